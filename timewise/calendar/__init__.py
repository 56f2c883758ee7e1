"""Calendar Engine - Free/busy, conflicts, and meeting suggestions

Philosophy:
    Every calendar question reduces to interval arithmetic. Normalize
    events into UTC time slots once, then answer availability, conflict
    and group-meeting questions with the same handful of primitives.

Components:
    models.py: Value types (TimeSlot, WorkingHours, Event, Conflict, ...)
    intervals.py: Overlap, intersection, gap, containment, merging
    availability.py: Free slots per person within working hours
    conflicts.py: Pairwise conflict detection and classification
    suggester.py: Rank candidate meeting slots across participants

Usage:
    from timewise.calendar.availability import compute_free_slots
    from timewise.calendar.conflicts import detect_conflicts
    from timewise.calendar.suggester import suggest_meeting_times

    free = compute_free_slots(user, start, end, buffer_minutes=15)
    conflicts = detect_conflicts(events)
    suggestions = suggest_meeting_times(users, 60, start, end)
"""

# Weekday numbering used by WorkingHours: 0 = Sunday .. 6 = Saturday
WEEKDAY_NAMES = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

# Working-hour defaults (Monday to Friday, 09:00-17:00)
DEFAULT_START_OF_DAY = "09:00"
DEFAULT_END_OF_DAY = "17:00"
DEFAULT_WORK_DAYS = frozenset({1, 2, 3, 4, 5})
DEFAULT_TIME_ZONE = "UTC"

# Conflict classification
CONFLICT_TYPES = ("overlap", "double_booking", "back_to_back", "travel_time")
CONFLICT_SEVERITIES = ("low", "medium", "high", "critical")

# Meeting suggestion defaults
DEFAULT_BUFFER_MINUTES = 15
DEFAULT_STEP_MINUTES = 30
DEFAULT_QUORUM = 0.6
DEFAULT_MAX_SUGGESTIONS = 10
PREFERRED_TIME_BOOST = 1.5

__all__ = [
    "WEEKDAY_NAMES",
    "DEFAULT_START_OF_DAY",
    "DEFAULT_END_OF_DAY",
    "DEFAULT_WORK_DAYS",
    "DEFAULT_TIME_ZONE",
    "CONFLICT_TYPES",
    "CONFLICT_SEVERITIES",
    "DEFAULT_BUFFER_MINUTES",
    "DEFAULT_STEP_MINUTES",
    "DEFAULT_QUORUM",
    "DEFAULT_MAX_SUGGESTIONS",
    "PREFERRED_TIME_BOOST",
]
