from datetime import timedelta

from showcaller.domain.clock import (
    trigger_instant, remaining, format_duration, format_countdown,
    format_time_remaining, urgency, as_utc,
)
from tests.conftest import at


def test_trigger_instant_subtracts_minutes():
    t = at("2024-01-01T20:00:00Z")
    assert trigger_instant(t, 30) == t - timedelta(minutes=30)


def test_trigger_instant_is_not_clamped():
    t = at("2024-01-01T00:10:00Z")
    assert trigger_instant(t, 180) == at("2023-12-31T21:10:00Z")


def test_remaining_never_negative():
    trig = at("2024-01-01T19:30:00Z")
    assert remaining(trig, trig) == timedelta(0)
    assert remaining(trig, trig + timedelta(seconds=1)) == timedelta(0)
    assert remaining(trig, trig - timedelta(minutes=5)) == timedelta(minutes=5)


def test_remaining_is_monotonic():
    trig = at("2024-01-01T19:30:00Z")
    start = at("2024-01-01T18:00:00Z")
    values = [remaining(trig, start + timedelta(minutes=m)) for m in range(0, 200, 7)]
    assert values == sorted(values, reverse=True)


def test_format_duration():
    assert format_duration(timedelta(minutes=90)) == "1:30"
    assert format_duration(timedelta(0)) == "0:00"
    assert format_duration(timedelta(minutes=61)) == "1:01"
    assert format_duration(timedelta(minutes=59, seconds=59)) == "0:59"
    assert format_duration(timedelta(hours=12, minutes=5)) == "12:05"


def test_format_countdown():
    assert format_countdown(timedelta(hours=2, minutes=7, seconds=30)) == "2h 7m"
    assert format_countdown(timedelta(seconds=-10)) == "0h 0m"


def test_format_time_remaining():
    now = at("2024-01-01T12:00:00Z")
    assert format_time_remaining(now - timedelta(seconds=1), now) == "Past"
    assert format_time_remaining(now + timedelta(days=1, hours=5), now) == "1d 5h"
    assert format_time_remaining(now + timedelta(hours=2, minutes=30), now) == "2h 30m"
    assert format_time_remaining(now + timedelta(minutes=12), now) == "12m"


def test_urgency_levels():
    assert urgency(timedelta(minutes=-1)) == "past"
    assert urgency(timedelta(minutes=10)) == "imminent"
    assert urgency(timedelta(minutes=90)) == "soon"
    assert urgency(timedelta(hours=3)) == "later"


def test_naive_datetimes_are_read_as_utc():
    naive = at("2024-01-01T20:00:00Z").replace(tzinfo=None)
    assert as_utc(naive) == at("2024-01-01T20:00:00Z")
