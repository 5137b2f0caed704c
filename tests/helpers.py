import threading

import numpy

from fylki.linalg import Matrix, Vector
from fylki.helpers import wrap_in_tuple
from fylki.providers.numpy_provider import NumpyProvider

# Default tolerances for numpy.allclose().
# Should be enough to detect a error, but not enough to trigger a fail
# because of a different summation order in parallel kernels.
DOUBLE_RTOL = 1e-11
DOUBLE_ATOL = 1e-11


def get_test_array(shape, high=None, *, no_zeros=False):
    shape = wrap_in_tuple(shape)
    rng = numpy.random.default_rng()
    low = 0.01 if no_zeros else -1.0
    if high is None:
        high = 1.0
    return rng.uniform(low, high, shape)


def diff_is_negligible(m, m_ref, atol=None, rtol=None, *, verbose=True):
    m = numpy.asarray(m)
    m_ref = numpy.asarray(m_ref)
    assert m.shape == m_ref.shape

    if atol is None:
        atol = DOUBLE_ATOL
    if rtol is None:
        rtol = DOUBLE_RTOL

    close = numpy.isclose(m, m_ref, atol=atol, rtol=rtol)

    if close.all():
        return True

    if verbose:
        far_idxs = numpy.vstack(numpy.where(~close)).T
        print(  # noqa: T201
            f"diff_is_negligible() with atol={atol} and rtol={rtol} "
            f"found {far_idxs.shape[0]} differences, first ones are:"
        )
        for idx, _ in zip(far_idxs, range(10)):
            t_idx = tuple(idx)
            print(f"idx: {t_idx}, test: {m[t_idx]}, ref: {m_ref[t_idx]}")  # noqa: T201

    return False


class DictMatrix(Matrix):
    """
    A matrix that keeps its non-zero elements in a dictionary.
    Has no fast paths, so every operation involving it takes the generic route.
    """

    def __init__(self, rows, columns):
        super().__init__(rows, columns)
        self._cells = {}

    @classmethod
    def from_array(cls, array):
        array = numpy.asarray(array, numpy.float64)
        matrix = cls(*array.shape)
        for (i, j), value in numpy.ndenumerate(array):
            if value != 0:
                matrix.at(i, j, float(value))
        return matrix

    def at(self, row, column, value=None):
        if value is None:
            return self._cells.get((row, column), 0.0)
        self._cells[(row, column)] = value
        return None

    def create_matrix(self, rows, columns):
        return DictMatrix(rows, columns)

    def create_vector(self, count):
        return DictVector(count)


class DictVector(Vector):

    def __init__(self, count):
        super().__init__(count)
        self._cells = {}

    @classmethod
    def from_array(cls, array):
        vector = cls(len(array))
        for i, value in enumerate(array):
            vector.at(i, float(value))
        return vector

    def at(self, index, value=None):
        if value is None:
            return self._cells.get(index, 0.0)
        self._cells[index] = value
        return None

    def create_vector(self, count):
        return DictVector(count)


class CountingDistribution:
    """Returns 1, 2, 3, ... and remembers how many times it was sampled."""

    def __init__(self):
        self.calls = 0
        self._lock = threading.Lock()

    def sample(self):
        with self._lock:
            self.calls += 1
            return float(self.calls)


class RecordingProvider(NumpyProvider):
    """Remembers which provider functions were called."""

    def __init__(self):
        self.calls = []

    def add_arrays(self, x, y, result):
        self.calls.append("add_arrays")
        super().add_arrays(x, y, result)

    def subtract_arrays(self, x, y, result):
        self.calls.append("subtract_arrays")
        super().subtract_arrays(x, y, result)

    def scale_array(self, alpha, x):
        self.calls.append("scale_array")
        super().scale_array(alpha, x)
