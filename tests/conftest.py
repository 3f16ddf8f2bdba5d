from datetime import date, datetime
from decimal import Decimal

import pytest

from spending_report.models import ExpenseRecord
from spending_report.storage import JSONStorage


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeTimer:
    """Stands in for threading.Timer; tests fire it by hand."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


class TimerRecorder:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function):
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]


@pytest.fixture
def storage(tmp_path):
    return JSONStorage(tmp_path / "data")


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 27, 14, 30))


@pytest.fixture
def timers():
    return TimerRecorder()


def make_record(category="Gas", amount="10.00", on=date(2024, 3, 27), description=""):
    return ExpenseRecord.create(category, Decimal(amount), on, description)
