import pytest

from fylki import control
from fylki.providers import provider_ids


def pytest_addoption(parser):
    parser.addoption(
        "--provider",
        dest="provider",
        action="store",
        help="Numeric backend to test: " + "/".join(provider_ids()) + "/both",
        default="both",
        choices=[*provider_ids(), "both"],
    )
    parser.addoption(
        "--threads",
        dest="threads",
        action="store",
        help="Run parallel kernels on one thread, several threads, or both",
        default="both",
        choices=["single", "multiple", "both"],
    )


def pytest_generate_tests(metafunc):
    if "provider" in metafunc.fixturenames:
        p = metafunc.config.option.provider
        providers = provider_ids() if p == "both" else [p]
        metafunc.parametrize("provider", providers, ids=providers)

    if "threads" in metafunc.fixturenames:
        t = metafunc.config.option.threads
        threads = dict(both=[1, 4], single=[1], multiple=[4])[t]
        thread_ids = [{1: "st", 4: "mt"}[num] for num in threads]
        metafunc.parametrize("threads", threads, ids=thread_ids)


@pytest.fixture
def settings(provider, threads):
    # parallelize_order=1 makes even the smallest test matrices fan out over the workers
    with control.override(
        provider=provider, max_degree_of_parallelism=threads, parallelize_order=1
    ):
        yield control


@pytest.fixture
def single_thread():
    with control.override(max_degree_of_parallelism=1):
        yield control
