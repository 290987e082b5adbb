from datetime import datetime

import pytest

from embedview.activity_log import ActivityLog
from embedview.controller import EmbedController


class FixedClock:
    """Clock that returns a preset time and moves forward one second per call."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = current.replace(second=(current.second + 1) % 60)
        return current


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 5, 17, 14, 3, 5))


@pytest.fixture
def activity_log(clock):
    return ActivityLog(clock=clock)


@pytest.fixture
def controller(activity_log):
    """Controller with the real 10s watchdog; tests that need it to fire use fast_controller."""
    ctrl = EmbedController(activity_log)
    yield ctrl
    ctrl.watchdog.cancel()


@pytest.fixture
def fast_controller(activity_log):
    """Controller whose watchdog fires after 50ms."""
    ctrl = EmbedController(activity_log, timeout=0.05)
    yield ctrl
    ctrl.watchdog.cancel()
