"""Root conftest enforcing a time limit on the whole test suite.

A wait whose condition never becomes true polls forever, so a broken test can easily hang
instead of failing. pytest-timeout bounds each test (see pyproject.toml); this hook bounds
the suite as a whole.
"""

import os
import time
from collections.abc import Mapping
from typing import Final

import pytest

# Applies when the suite runs locally and no override is set.
_LOCAL_MAX_DURATION_SECONDS: Final[float] = 30.0
# Applies in CI, where machines are slower and more heavily shared.
_CI_MAX_DURATION_SECONDS: Final[float] = 60.0

_START_TIME_ATTR: Final[str] = "start_time"


def resolve_max_duration_seconds(environ: Mapping[str, str]) -> float:
    """Return the maximum allowed suite duration for the given environment.

    PYTEST_MAX_DURATION overrides everything (useful when generating test timings).
    """
    if "PYTEST_MAX_DURATION" in environ:
        return float(environ["PYTEST_MAX_DURATION"])
    if "CI" in environ:
        return _CI_MAX_DURATION_SECONDS
    return _LOCAL_MAX_DURATION_SECONDS


@pytest.hookimpl(tryfirst=True)
def pytest_sessionstart(session: pytest.Session) -> None:
    setattr(session, _START_TIME_ATTR, time.time())


@pytest.hookimpl(trylast=True)
def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    """Check that the total test session time is under the configured limit."""
    if not hasattr(session, _START_TIME_ATTR):
        return
    duration = time.time() - getattr(session, _START_TIME_ATTR)
    max_duration = resolve_max_duration_seconds(os.environ)
    if duration > max_duration:
        pytest.exit(
            f"Test suite took {duration:.2f}s, exceeding the {max_duration}s limit",
            returncode=1,
        )
