import threading
import time

import pytest

from helpers import *
from fylki import Control, control
from fylki.linalg import DenseMatrix
from fylki.providers import managed_id, numpy_id


@pytest.fixture
def settings_object():
    settings = Control(max_degree_of_parallelism=2)
    yield settings
    settings.shutdown()


def test_from_environment():
    settings = Control.from_environment(
        {
            "FYLKI_PROVIDER": managed_id(),
            "FYLKI_NUM_THREADS": "3",
            "FYLKI_PARALLELIZE_ORDER": "10",
        }
    )
    assert settings.provider.get_id() == managed_id()
    assert settings.max_degree_of_parallelism == 3
    assert settings.parallelize_order == 10


def test_from_empty_environment():
    settings = Control.from_environment({"FYLKI_NUM_THREADS": ""})
    assert settings.provider.get_id() == numpy_id()
    assert settings.max_degree_of_parallelism >= 1
    assert settings.parallelize_order == 64


@pytest.mark.parametrize(
    "environ",
    [
        {"FYLKI_NUM_THREADS": "many"},
        {"FYLKI_NUM_THREADS": "0"},
        {"FYLKI_PARALLELIZE_ORDER": "1.5"},
        {"FYLKI_PROVIDER": "gpu"},
    ],
    ids=["threads_not_int", "threads_zero", "order_not_int", "provider"],
)
def test_invalid_environment(environ):
    with pytest.raises(ValueError):
        Control.from_environment(environ)


def test_invalid_values(settings_object):
    with pytest.raises(ValueError):
        settings_object.max_degree_of_parallelism = 0
    with pytest.raises(ValueError):
        settings_object.parallelize_order = 0
    with pytest.raises(TypeError):
        settings_object.provider = 1


def test_executor(settings_object):
    executor = settings_object.executor()
    assert executor is not None
    assert settings_object.executor() is executor

    settings_object.use_single_thread()
    assert settings_object.executor() is None

    settings_object.use_multiple_threads(3)
    assert settings_object.max_degree_of_parallelism == 3
    assert settings_object.executor() is not None


def test_use_provider(settings_object):
    settings_object.use_provider(managed_id())
    assert settings_object.provider.get_id() == managed_id()


def test_override():
    provider = control.provider
    threads = control.max_degree_of_parallelism
    order = control.parallelize_order

    with control.override(provider=managed_id(), max_degree_of_parallelism=1, parallelize_order=5):
        assert control.provider.get_id() == managed_id()
        assert control.max_degree_of_parallelism == 1
        assert control.parallelize_order == 5

    assert control.provider is provider
    assert control.max_degree_of_parallelism == threads
    assert control.parallelize_order == order


def test_override_restores_on_error():
    order = control.parallelize_order
    with pytest.raises(RuntimeError):
        with control.override(parallelize_order=order + 1):
            raise RuntimeError()
    assert control.parallelize_order == order


def test_override_unknown_setting():
    with pytest.raises(TypeError):
        with control.override(threads=2):
            pass


def test_lease_survives_setting_change(settings_object):
    with settings_object.lease_executor() as executor:
        settings_object.max_degree_of_parallelism = 3
        assert settings_object.executor() is not executor
        # the replaced executor still accepts tasks while leased
        assert executor.submit(lambda: 1).result() == 1

    # and is shut down once the lease is released
    with pytest.raises(RuntimeError):
        executor.submit(lambda: 1)


def test_lease_single_thread():
    settings = Control(max_degree_of_parallelism=1)
    with settings.lease_executor() as executor:
        assert executor is None


def test_change_threads_during_multiply():
    a = get_test_array((60, 60))
    m = DenseMatrix.from_array(a)
    reference = a @ a
    errors = []
    done = threading.Event()

    def compute():
        try:
            for _ in range(50):
                if not diff_is_negligible(m.multiply(m).to_array(), reference, verbose=False):
                    errors.append("wrong result")
        except Exception as e:  # noqa: BLE001
            errors.append(repr(e))
        finally:
            done.set()

    with control.override(max_degree_of_parallelism=4, parallelize_order=1):
        thread = threading.Thread(target=compute)
        thread.start()
        n = 0
        while not done.is_set():
            control.max_degree_of_parallelism = 2 + n % 3
            n += 1
            time.sleep(0.001)
        thread.join()

    assert errors == []
