import numpy
import pytest

from fylki.distributions import Bernoulli, ContinuousUniform, DiscreteUniform, Gamma, Normal
from fylki.linalg import DenseMatrix


def uniform_discrete_mean_and_std(min, max):
    return (min + max) / 2.0, numpy.sqrt(((max - min + 1) ** 2 - 1.0) / 12)


def uniform_mean_and_std(min, max):
    return (min + max) / 2.0, (max - min) / numpy.sqrt(12)


class UniformIntegerHelper:
    def __init__(self, min_, max_):
        self.extent = (min_, max_)
        self.mean, self.std = uniform_discrete_mean_and_std(*self.extent)
        self.name = "uniform_integer"

    def get_distribution(self, seed):
        return DiscreteUniform(self.extent[0], self.extent[1] + 1, seed=seed)


class UniformFloatHelper:
    def __init__(self, min_, max_):
        self.extent = (min_, max_)
        self.mean, self.std = uniform_mean_and_std(*self.extent)
        self.name = "uniform_float"

    def get_distribution(self, seed):
        return ContinuousUniform(self.extent[0], self.extent[1], seed=seed)


class NormalHelper:
    def __init__(self, mean, std):
        self.mean = mean
        self.std = std
        self.name = "normal"

    def get_distribution(self, seed):
        return Normal(self.mean, self.std, seed=seed)


class GammaHelper:
    def __init__(self, shape, scale):
        self._shape = shape
        self._scale = scale
        self.mean = shape * scale
        self.std = numpy.sqrt(shape) * scale
        self.extent = (0, numpy.inf)
        self.name = "gamma"

    def get_distribution(self, seed):
        return Gamma(self._shape, self._scale, seed=seed)


class BernoulliHelper:
    def __init__(self, p):
        self._p = p
        self.mean = p
        self.std = numpy.sqrt(p * (1 - p))
        self.extent = (0, 1)
        self.name = "bernoulli"

    def get_distribution(self, seed):
        return Bernoulli(self._p, seed=seed)


def pytest_generate_tests(metafunc):
    if "test_distribution" in metafunc.fixturenames:
        vals = [
            UniformIntegerHelper(-10, 98),
            UniformFloatHelper(-5, 7.7),
            NormalHelper(-2, 10),
            GammaHelper(3, 0.4),
            BernoulliHelper(0.3),
        ]
        ids = [val.name for val in vals]
        metafunc.parametrize("test_distribution", vals, ids=ids)


def check_distribution(arr, ref):
    extent = getattr(ref, "extent", None)
    mean = getattr(ref, "mean", None)
    std = getattr(ref, "std", None)

    if extent is not None:
        assert arr.min() >= extent[0]
        assert arr.max() <= extent[1]

    if mean is not None and std is not None:
        # expected std of the mean of the sample array
        m_std = std / numpy.sqrt(arr.size)

        diff = abs(arr.mean() - mean)
        assert diff < 5 * m_std  # about 1e-6 chance of fail


def test_distribution(settings, test_distribution):
    m = DenseMatrix.random(100, 100, test_distribution.get_distribution(seed=1234))
    check_distribution(m.to_array(), test_distribution)


def test_sample_types():
    assert isinstance(Normal(seed=0).sample(), float)
    assert isinstance(ContinuousUniform(seed=0).sample(), float)
    assert isinstance(DiscreteUniform(5, seed=0).sample(), int)
    assert isinstance(Bernoulli(seed=0).sample(), int)


def test_discrete_uniform_single_bound():
    distribution = DiscreteUniform(3, seed=0)
    assert (distribution.low, distribution.high) == (0, 3)
    assert {distribution.sample() for _ in range(200)} == {0, 1, 2}


def test_reproducible():
    d1 = Gamma(2, 1, seed=42)
    d2 = Gamma(2, 1, seed=42)
    assert [d1.sample() for _ in range(10)] == [d2.sample() for _ in range(10)]


@pytest.mark.parametrize(
    "factory",
    [
        lambda: ContinuousUniform(1, 1),
        lambda: Normal(0, -1),
        lambda: Gamma(0, 1),
        lambda: Gamma(1, -2),
        lambda: DiscreteUniform(0),
        lambda: DiscreteUniform(5, 2),
        lambda: Bernoulli(1.5),
    ],
    ids=["uniform", "normal", "gamma_shape", "gamma_scale", "discrete_empty",
         "discrete_reversed", "bernoulli"],
)
def test_invalid_parameters(factory):
    with pytest.raises(ValueError):
        factory()
