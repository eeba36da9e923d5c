import os
import cProfile

import pytest

from vglsl import clear_virtual_include_paths

profiler = None


@pytest.fixture(scope="session", autouse=True)
def maybe_profile():
    if os.environ.get("PROFILE"):
        profiler = cProfile.Profile()
        profiler.enable()
        yield  # run all tests
        profiler.disable()
        profiler.dump_stats("profile.stats")
    else:
        yield


@pytest.fixture(autouse=True)
def clean_virtual_paths():
    clear_virtual_include_paths()
    yield
    clear_virtual_include_paths()
