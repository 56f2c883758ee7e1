"""Tests for timewise/calendar/conflicts.py

The conflict detector classifies problems between pairs of events:
- Exact overlaps are double bookings (critical)
- Partial overlaps are graded by how much time they share
- Tight gaps between meetings are travel-time conflicts
- Work events outside work hours clash with personal events (opt-in)

Each pair of events yields at most one conflict, and events on the same
calendar are never compared.
"""

import pytest

from timewise.calendar.conflicts import (
    ConflictOptions,
    check_new_event,
    detect_conflicts,
    detect_conflicts_for_event,
    get_conflict_stats,
)
from timewise.calendar.models import ConflictSeverity, ConflictType


# ─────────────────────────────────────────────────────────────────────────────
# Overlaps
# ─────────────────────────────────────────────────────────────────────────────


class TestOverlapDetection:
    """Tests for overlapping events."""

    def test_identical_times_are_double_booking(self, make_event, at):
        events = [make_event("a", at(10)), make_event("b", at(10))]
        conflicts = detect_conflicts(events)

        assert len(conflicts) == 1
        conflict = conflicts[0]
        assert conflict.type == ConflictType.DOUBLE_BOOKING
        assert conflict.severity == ConflictSeverity.CRITICAL
        assert conflict.overlap_minutes == 60
        assert "exact same time" in conflict.description
        assert "Reschedule one of the events to a different time" in conflict.suggestions

    def test_overlap_over_half_of_shorter_is_high(self, make_event, at):
        events = [make_event("a", at(9)), make_event("b", at(9, 15))]
        conflict = detect_conflicts(events)[0]

        assert conflict.type == ConflictType.OVERLAP
        assert conflict.severity == ConflictSeverity.HIGH
        assert conflict.overlap_minutes == 45
        assert "overlap by 45 minutes" in conflict.description

    def test_overlap_over_thirty_minutes_is_medium(self, make_event, at):
        events = [make_event("a", at(9), minutes=180), make_event("b", at(11, 20), minutes=120)]
        conflict = detect_conflicts(events)[0]

        assert conflict.severity == ConflictSeverity.MEDIUM
        assert conflict.overlap_minutes == 40

    def test_small_overlap_is_low(self, make_event, at):
        events = [make_event("a", at(9)), make_event("b", at(9, 50))]
        conflict = detect_conflicts(events)[0]

        assert conflict.severity == ConflictSeverity.LOW
        assert conflict.overlap_minutes == 10
        assert "Join the second meeting late or leave the first meeting early" in conflict.suggestions

    def test_overlap_suggestions_name_events(self, make_event, at):
        events = [
            make_event("a", at(9), title="Standup"),
            make_event("b", at(9, 50), title="Design review"),
        ]
        conflict = detect_conflicts(events)[0]

        assert 'Shorten "Standup" by 10 minutes' in conflict.suggestions
        assert 'Move "Design review" to start 10 minutes later' in conflict.suggestions
        assert conflict.suggestions[-1] == "Consider if any meetings can be made shorter or asynchronous"

    def test_same_calendar_is_ignored(self, make_event, at):
        events = [make_event("a", at(10), calendar_id="work"), make_event("b", at(10), calendar_id="work")]
        assert detect_conflicts(events) == []

    def test_no_events(self):
        assert detect_conflicts([]) == []


# ─────────────────────────────────────────────────────────────────────────────
# Travel Time
# ─────────────────────────────────────────────────────────────────────────────


class TestTravelTime:
    """Tests for insufficient gaps between meetings."""

    def test_back_to_back_is_medium_travel_time(self, make_event, at):
        events = [make_event("a", at(9)), make_event("b", at(10))]
        conflicts = detect_conflicts(events, ConflictOptions(include_back_to_back=True, travel_time_minutes=15))

        assert len(conflicts) == 1
        assert conflicts[0].type == ConflictType.TRAVEL_TIME
        assert conflicts[0].severity == ConflictSeverity.MEDIUM
        assert "(0 minutes)" in conflicts[0].description
        assert "Add 15 minutes buffer between meetings" in conflicts[0].suggestions

    def test_short_gap_is_low(self, make_event, at):
        events = [make_event("a", at(9)), make_event("b", at(10, 10))]
        conflict = detect_conflicts(events)[0]

        assert conflict.type == ConflictType.TRAVEL_TIME
        assert conflict.severity == ConflictSeverity.LOW
        assert "Add 5 minutes buffer between meetings" in conflict.suggestions

    def test_gap_at_threshold_is_fine(self, make_event, at):
        events = [make_event("a", at(9)), make_event("b", at(10, 15))]
        assert detect_conflicts(events) == []

    def test_disabled(self, make_event, at):
        events = [make_event("a", at(9)), make_event("b", at(10))]
        assert detect_conflicts(events, ConflictOptions(include_back_to_back=False)) == []

    def test_zero_travel_time_disables_rule(self, make_event, at):
        events = [make_event("a", at(9)), make_event("b", at(10))]
        assert detect_conflicts(events, ConflictOptions(travel_time_minutes=0)) == []

    def test_order_of_events_in_description(self, make_event, at):
        later = make_event("late", at(11), title="Lunch")
        earlier = make_event("early", at(10), title="Sync")
        conflict = detect_conflicts_for_event(later, [earlier])[0]

        assert conflict.primary_event.id == "late"
        assert 'between "Sync" and "Lunch"' in conflict.description


# ─────────────────────────────────────────────────────────────────────────────
# Work / Personal Separation
# ─────────────────────────────────────────────────────────────────────────────


class TestWorkPersonal:
    """Tests for the opt-in work/personal rule."""

    OPTIONS = ConflictOptions(work_personal_separation=True)

    def test_work_event_after_hours(self, make_event, at):
        events = [
            make_event("personal", at(7), title="Gym"),
            make_event("work", at(19), title="Late deploy", is_work=True),
        ]
        conflicts = detect_conflicts(events, self.OPTIONS)

        assert len(conflicts) == 1
        conflict = conflicts[0]
        assert conflict.type == ConflictType.OVERLAP
        assert conflict.severity == ConflictSeverity.MEDIUM
        assert conflict.primary_event.id == "work"
        assert conflict.description == 'Work event "Late deploy" scheduled during personal time'

    def test_work_event_in_hours_is_fine(self, make_event, at):
        events = [make_event("personal", at(7)), make_event("work", at(11), is_work=True)]
        assert detect_conflicts(events, self.OPTIONS) == []

    def test_off_by_default(self, make_event, at):
        events = [make_event("personal", at(7)), make_event("work", at(19), is_work=True)]
        assert detect_conflicts(events) == []

    def test_uses_configured_time_zone(self, make_event, at):
        # 13:00 UTC is 22:00 in Tokyo
        events = [make_event("personal", at(7)), make_event("work", at(13), is_work=True)]
        tokyo = ConflictOptions(work_personal_separation=True, time_zone="Asia/Tokyo")

        assert detect_conflicts(events, self.OPTIONS) == []
        assert len(detect_conflicts(events, tokyo)) == 1

    def test_overlap_wins_over_work_personal(self, make_event, at):
        events = [
            make_event("work", at(18), is_work=True),
            make_event("personal", at(18, 30)),
        ]
        conflicts = detect_conflicts(events, self.OPTIONS)

        assert len(conflicts) == 1
        assert conflicts[0].description.startswith("Time conflict")


# ─────────────────────────────────────────────────────────────────────────────
# Ordering, Symmetry, Options
# ─────────────────────────────────────────────────────────────────────────────


class TestDetectConflicts:
    """Whole-list behaviour."""

    def test_symmetric_in_input_order(self, make_event, at):
        events = [
            make_event("a", at(9)),
            make_event("b", at(9, 30)),
            make_event("c", at(10, 35)),
            make_event("d", at(14)),
            make_event("e", at(14)),
        ]
        forward = detect_conflicts(events)
        backward = detect_conflicts(list(reversed(events)))

        def summary(conflicts):
            return {(c.pair_key, c.type, c.severity) for c in conflicts}

        assert summary(forward) == summary(backward)
        assert len(forward) == 3

    def test_results_start_with_earliest(self, make_event, at):
        events = [make_event("late", at(15)), make_event("late2", at(15)), make_event("early", at(9)), make_event("early2", at(9))]
        conflicts = detect_conflicts(events)
        assert [c.primary_event.id for c in conflicts] == ["early", "late"]

    def test_gap_measured_from_end_of_long_event(self, make_event, at):
        events = [
            make_event("long", at(9), minutes=180, calendar_id="work"),
            make_event("inside", at(9, 30), minutes=30, calendar_id="work"),
            make_event("after", at(12, 10), calendar_id="home"),
        ]
        conflicts = detect_conflicts(events)

        assert len(conflicts) == 1
        assert conflicts[0].pair_key == frozenset({"long", "after"})
        assert conflicts[0].type == ConflictType.TRAVEL_TIME
        assert "(10 minutes)" in conflicts[0].description
        assert "Add 5 minutes buffer between meetings" in conflicts[0].suggestions

    def test_events_beyond_travel_window_not_compared(self, make_event, at):
        events = [
            make_event("a", at(9)),
            make_event("b", at(10, 15)),
            make_event("c", at(11, 30)),
        ]
        assert detect_conflicts(events) == []

    def test_conflict_id_uses_event_ids(self, make_event, at):
        conflict = detect_conflicts([make_event("x", at(9)), make_event("y", at(9))])[0]
        assert conflict.id == "conflict_x_y"


class TestConflictOptions:
    def test_defaults(self):
        options = ConflictOptions()
        assert options.include_back_to_back is True
        assert options.travel_time_minutes == 15
        assert options.work_personal_separation is False

    def test_negative_travel_time_raises(self):
        with pytest.raises(ValueError, match="travel_time_minutes"):
            ConflictOptions(travel_time_minutes=-1)

    def test_invalid_work_hours_raise(self):
        with pytest.raises(ValueError, match="Invalid work hours"):
            ConflictOptions(work_day_start_hour=17, work_day_end_hour=9)

    def test_unknown_time_zone_raises(self):
        with pytest.raises(ValueError, match="Unknown time zone"):
            ConflictOptions(time_zone="Nowhere/Special")


# ─────────────────────────────────────────────────────────────────────────────
# Single Event Checks and Stats
# ─────────────────────────────────────────────────────────────────────────────


class TestDetectConflictsForEvent:
    """Tests for checking one proposed event."""

    def test_new_event_is_primary(self, make_event, at):
        existing = [make_event("a", at(9)), make_event("b", at(14))]
        new = make_event("new", at(9, 30))
        conflicts = detect_conflicts_for_event(new, existing)

        assert len(conflicts) == 1
        assert conflicts[0].primary_event.id == "new"
        assert conflicts[0].conflicting_event.id == "a"

    def test_skips_itself(self, make_event, at):
        event = make_event("a", at(9))
        assert detect_conflicts_for_event(event, [event]) == []

    def test_same_calendar_still_checked(self, make_event, at):
        existing = [make_event("a", at(9), calendar_id="main")]
        new = make_event("new", at(9), calendar_id="main")
        assert len(detect_conflicts_for_event(new, existing)) == 1


class TestCheckNewEvent:
    def test_result_shape(self, make_event, at):
        existing = [make_event("a", at(9)), make_event("b", at(10, 5))]
        result = check_new_event(make_event("new", at(9)), existing)

        assert result["success"] is True
        assert result["has_conflicts"] is True
        assert result["conflict_count"] == 2
        assert result["high_priority_conflicts"] == 1
        assert result["conflicts"][0]["type"] == "double_booking"

    def test_clear_calendar(self, make_event, at):
        result = check_new_event(make_event("new", at(9)), [])
        assert result["has_conflicts"] is False
        assert result["conflicts"] == []


class TestConflictStats:
    """Tests for aggregate counts."""

    def test_empty_has_all_keys(self):
        stats = get_conflict_stats([])
        assert stats.total == 0
        assert stats.by_severity == {"low": 0, "medium": 0, "high": 0, "critical": 0}
        assert stats.by_type == {"overlap": 0, "double_booking": 0, "back_to_back": 0, "travel_time": 0}

    def test_counts(self, make_event, at):
        events = [
            make_event("a", at(9)),
            make_event("b", at(9)),
            make_event("c", at(13)),
            make_event("d", at(14)),
        ]
        stats = get_conflict_stats(detect_conflicts(events))

        assert stats.total == 2
        assert stats.by_type["double_booking"] == 1
        assert stats.by_type["travel_time"] == 1
        assert stats.by_severity["critical"] == 1
        assert stats.by_severity["medium"] == 1
        assert stats.to_dict()["total"] == 2
