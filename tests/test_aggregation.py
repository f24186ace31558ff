"""Tests for per-day aggregation, burnout and chain detection."""

from datetime import date

from core.aggregation import (
    burnout_days,
    detect_chains,
    event_duration_days,
    events_active_on_day,
    is_burnout_day,
)


def test_events_active_on_day_keeps_input_order(sample_events):
    active = events_active_on_day(date(2025, 1, 20), sample_events)
    assert [e.id for e in active] == ["a", "b", "c"]


def test_events_active_on_day_empty():
    assert events_active_on_day(date(2025, 1, 20), []) == []


def test_burnout_with_three_events(sample_events):
    assert is_burnout_day(date(2025, 1, 20), sample_events)


def test_no_burnout_with_two_events(sample_events):
    # Only "a" and "c" cover the 19th
    assert not is_burnout_day(date(2025, 1, 19), sample_events)


def test_burnout_ignores_inverted_events(make_event):
    events = [
        make_event("a", (2025, 1, 1), (2025, 1, 10)),
        make_event("b", (2025, 1, 5), (2025, 1, 5)),
        make_event("c", (2025, 1, 10), (2025, 1, 1)),
    ]
    assert not is_burnout_day(date(2025, 1, 5), events)


def test_burnout_days_filters_in_order(sample_events):
    days = [date(2025, 1, d) for d in range(15, 26)]
    assert burnout_days(days, sample_events) == [date(2025, 1, 20)]


class TestDetectChains:
    def test_fourteen_inclusive_days_is_a_chain(self, make_event):
        event = make_event("long", (2025, 1, 1), (2025, 1, 14))
        assert detect_chains([event]) == ["long"]

    def test_thirteen_days_is_not(self, make_event):
        event = make_event("short", (2025, 1, 1), (2025, 1, 13))
        assert detect_chains([event]) == []

    def test_eleven_day_sprint_is_not(self, sample_event):
        # 2025-01-15 to 2025-01-25 spans 11 days
        assert detect_chains([sample_event]) == []

    def test_time_of_day_does_not_shorten_span(self, make_event):
        event = make_event("late", (2025, 1, 1, 23, 0), (2025, 1, 14, 1, 0))
        assert detect_chains([event]) == ["late"]

    def test_order_follows_input(self, make_event):
        events = [
            make_event("z", (2025, 5, 1), (2025, 6, 1)),
            make_event("x", (2025, 1, 1), (2025, 1, 2)),
            make_event("y", (2025, 2, 1), (2025, 3, 1)),
        ]
        assert detect_chains(events) == ["z", "y"]

    def test_inverted_event_is_not_a_chain(self, make_event):
        assert detect_chains([make_event("inv", (2025, 2, 1), (2025, 1, 1))]) == []

    def test_empty(self):
        assert detect_chains([]) == []


def test_duration_is_inclusive_with_minimum_one(make_event):
    assert event_duration_days(make_event(start=(2025, 1, 15), end=(2025, 1, 25))) == 11
    assert event_duration_days(make_event(start=(2025, 1, 15), end=(2025, 1, 15))) == 1
    assert event_duration_days(make_event(start=(2025, 1, 15), end=(2025, 1, 10))) == 1
