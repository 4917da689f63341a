# tests/test_quota.py
"""Tests for the per-device daily quota."""

from datetime import datetime

import pytest

from hintgate.utils.quota import DeviceQuotaTracker

from conftest import FakeClock


def local_ts(*args) -> float:
    return datetime(*args).timestamp()


@pytest.fixture()
def evening_clock() -> FakeClock:
    return FakeClock(local_ts(2026, 6, 10, 23, 0, 0))


class TestDailyLimit:
    def test_admits_up_to_limit(self, evening_clock):
        tracker = DeviceQuotaTracker(daily_limit=3, clock=evening_clock)
        decisions = [tracker.check_device_limit("device-a") for _ in range(4)]

        assert [d.allowed for d in decisions] == [True, True, True, False]

    def test_reports_time_until_local_midnight(self, evening_clock):
        tracker = DeviceQuotaTracker(daily_limit=1, clock=evening_clock)
        tracker.check_device_limit("device-a")

        decision = tracker.check_device_limit("device-a")
        assert decision.allowed is False
        assert decision.remaining_time == 60 * 60 * 1000

    def test_resets_after_midnight(self, evening_clock):
        tracker = DeviceQuotaTracker(daily_limit=2, clock=evening_clock)
        for _ in range(2):
            tracker.check_device_limit("device-a")
        assert tracker.check_device_limit("device-a").allowed is False

        evening_clock.advance(60 * 60 + 1)
        assert tracker.check_device_limit("device-a").allowed is True

    def test_devices_are_independent(self, evening_clock):
        tracker = DeviceQuotaTracker(daily_limit=1, clock=evening_clock)
        assert tracker.check_device_limit("device-a").allowed is True
        assert tracker.check_device_limit("device-b").allowed is True
        assert tracker.check_device_limit("device-a").allowed is False

    def test_previous_days_are_swept(self, evening_clock):
        tracker = DeviceQuotaTracker(daily_limit=5, clock=evening_clock)
        for device in ("a", "b", "c"):
            tracker.check_device_limit(device)
        assert len(tracker._counts) == 3

        evening_clock.advance(2 * 60 * 60)
        tracker.check_device_limit("a")
        assert len(tracker._counts) == 1


@pytest.mark.parametrize("limit", [1, 5, 200])
def test_never_more_than_limit_per_day(limit):
    clock = FakeClock(local_ts(2026, 6, 10, 8, 0, 0))
    tracker = DeviceQuotaTracker(daily_limit=limit, clock=clock)

    admitted_per_day = {}
    for _ in range(3 * (limit + 10)):
        clock.advance(17 * 60)
        if tracker.check_device_limit("device").allowed:
            day = datetime.fromtimestamp(clock()).date()
            admitted_per_day[day] = admitted_per_day.get(day, 0) + 1

    assert all(count <= limit for count in admitted_per_day.values())
