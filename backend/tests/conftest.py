import logfire
import pytest

from helpers import FakeClock

logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(now=1000.0)
