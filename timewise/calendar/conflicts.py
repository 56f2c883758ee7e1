"""
Tool: Conflict Detector
Purpose: Find and classify scheduling conflicts between calendar events

Events from different calendars are compared pairwise. For each pair the
first matching rule wins:

    1. Overlap         - the events share time (exact match = double booking)
    2. Travel time     - too little gap between consecutive events
    3. Work/personal   - a work event intrudes on personal hours

Events on the same calendar are never compared; overlaps there are assumed
intentional (recurring series, tentative holds). Each pair of events yields
at most one conflict.

Usage:
    from timewise.calendar.conflicts import ConflictOptions, detect_conflicts, get_conflict_stats

    conflicts = detect_conflicts(events, ConflictOptions(work_personal_separation=True))
    stats = get_conflict_stats(conflicts)

    # Pre-creation check for a single event
    result = check_new_event(new_event, existing_events)
    if result["has_conflicts"]:
        ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from timewise.calendar import CONFLICT_SEVERITIES, CONFLICT_TYPES, DEFAULT_TIME_ZONE
from timewise.calendar.intervals import gap_minutes, minutes_between, overlaps
from timewise.calendar.models import (
    Conflict,
    ConflictSeverity,
    ConflictStats,
    ConflictType,
    Event,
    load_zone,
)

logger = logging.getLogger(__name__)

# Overlap grading thresholds
SIGNIFICANT_OVERLAP_FRACTION = 0.5
MODERATE_OVERLAP_MINUTES = 30

# Gaps shorter than this are graded medium rather than low
TIGHT_GAP_MINUTES = 5


@dataclass(frozen=True)
class ConflictOptions:
    """Which conflict rules to apply and their thresholds."""

    include_back_to_back: bool = True
    travel_time_minutes: int = 15
    work_personal_separation: bool = False
    work_day_start_hour: int = 9
    work_day_end_hour: int = 17
    time_zone: str = DEFAULT_TIME_ZONE

    def __post_init__(self):
        if self.travel_time_minutes < 0:
            raise ValueError(f"travel_time_minutes must be non-negative, got {self.travel_time_minutes}")
        if not 0 <= self.work_day_start_hour < self.work_day_end_hour <= 24:
            raise ValueError(
                f"Invalid work hours: {self.work_day_start_hour}-{self.work_day_end_hour}"
            )
        load_zone(self.time_zone)


DEFAULT_OPTIONS = ConflictOptions()


def _conflict_id(first: Event, second: Event) -> str:
    return f"conflict_{first.id}_{second.id}"


def _overlap_description(first: Event, second: Event, conflict_type: ConflictType, overlap: int) -> str:
    if conflict_type == ConflictType.DOUBLE_BOOKING:
        return f'Double booking: "{first.title}" and "{second.title}" are scheduled at the exact same time'
    return f'Time conflict: "{first.title}" and "{second.title}" overlap by {overlap} minutes'


def _overlap_suggestions(first: Event, second: Event, conflict_type: ConflictType, overlap: int) -> list[str]:
    if conflict_type == ConflictType.DOUBLE_BOOKING:
        suggestions = [
            "Reschedule one of the events to a different time",
            "Delegate attendance to a colleague if possible",
            "Consider if both events are truly necessary",
        ]
    else:
        suggestions = [
            f'Shorten "{first.title}" by {overlap} minutes',
            f'Move "{second.title}" to start {overlap} minutes later',
            "Reschedule one event to a completely different time slot",
        ]
        if overlap < MODERATE_OVERLAP_MINUTES:
            suggestions.append("Join the second meeting late or leave the first meeting early")

    suggestions.extend([
        "Check with attendees about flexibility in timing",
        "Consider if any meetings can be made shorter or asynchronous",
    ])
    return suggestions


def _check_overlap(first: Event, second: Event) -> Conflict | None:
    if not overlaps(first.slot, second.slot):
        return None

    overlap = minutes_between(max(first.start, second.start), min(first.end, second.end))

    if first.start == second.start and first.end == second.end:
        conflict_type = ConflictType.DOUBLE_BOOKING
        severity = ConflictSeverity.CRITICAL
    else:
        conflict_type = ConflictType.OVERLAP
        shorter = min(first.duration_minutes, second.duration_minutes)
        if overlap > shorter * SIGNIFICANT_OVERLAP_FRACTION:
            severity = ConflictSeverity.HIGH
        elif overlap > MODERATE_OVERLAP_MINUTES:
            severity = ConflictSeverity.MEDIUM
        else:
            severity = ConflictSeverity.LOW

    return Conflict(
        id=_conflict_id(first, second),
        type=conflict_type,
        severity=severity,
        primary_event=first,
        conflicting_event=second,
        overlap_minutes=overlap,
        description=_overlap_description(first, second, conflict_type, overlap),
        suggestions=tuple(_overlap_suggestions(first, second, conflict_type, overlap)),
    )


def _check_travel_time(first: Event, second: Event, travel_time_minutes: int) -> Conflict | None:
    earlier, later = sorted((first, second), key=lambda e: (e.start, e.end))
    gap = gap_minutes(earlier.slot, later.slot)

    if not 0 <= gap < travel_time_minutes:
        return None

    severity = ConflictSeverity.MEDIUM if gap < TIGHT_GAP_MINUTES else ConflictSeverity.LOW
    needed = travel_time_minutes - gap

    return Conflict(
        id=_conflict_id(first, second),
        type=ConflictType.TRAVEL_TIME,
        severity=severity,
        primary_event=first,
        conflicting_event=second,
        description=(
            f'Insufficient time between "{earlier.title}" and "{later.title}" ({round(gap)} minutes)'
        ),
        suggestions=(
            f"Add {needed:g} minutes buffer between meetings",
            "Move one of the meetings to a different time",
            "Consider virtual attendance if both meetings are remote",
        ),
    )


def _check_work_personal(first: Event, second: Event, options: ConflictOptions) -> Conflict | None:
    if first.is_work == second.is_work:
        return None

    work_event, personal_event = (first, second) if first.is_work else (second, first)
    hour = work_event.start.astimezone(load_zone(options.time_zone)).hour
    if options.work_day_start_hour <= hour < options.work_day_end_hour:
        return None

    return Conflict(
        id=_conflict_id(first, second),
        type=ConflictType.OVERLAP,
        severity=ConflictSeverity.MEDIUM,
        primary_event=work_event,
        conflicting_event=personal_event,
        description=f'Work event "{work_event.title}" scheduled during personal time',
        suggestions=(
            "Move work event to regular business hours",
            "Consider if this work event is truly necessary outside work hours",
            "Block personal time to prevent work scheduling",
        ),
    )


def _detect_between(first: Event, second: Event, options: ConflictOptions) -> Conflict | None:
    conflict = _check_overlap(first, second)
    if conflict:
        return conflict

    if options.include_back_to_back and options.travel_time_minutes > 0:
        conflict = _check_travel_time(first, second, options.travel_time_minutes)
        if conflict:
            return conflict

    if options.work_personal_separation:
        return _check_work_personal(first, second, options)

    return None


def _deduplicate(conflicts: list[Conflict]) -> list[Conflict]:
    seen: set[frozenset[str]] = set()
    unique: list[Conflict] = []
    for conflict in conflicts:
        if conflict.pair_key in seen:
            continue
        seen.add(conflict.pair_key)
        unique.append(conflict)
    return unique


def detect_conflicts(events: list[Event], options: ConflictOptions | None = None) -> list[Conflict]:
    """
    Detect conflicts among events from different calendars.

    Args:
        events: Well-formed events (validated on construction)
        options: Rule switches and thresholds

    Returns:
        One conflict per conflicting event pair, earliest events first.
    """
    opts = options or DEFAULT_OPTIONS
    ordered = sorted(events, key=lambda e: (e.start, e.end, e.id))

    # Without the work/personal rule a pair can only conflict when the later
    # event starts before the earlier one ends plus the travel window.
    horizon_minutes = opts.travel_time_minutes if opts.include_back_to_back else 0
    can_stop_early = not opts.work_personal_separation

    conflicts: list[Conflict] = []
    pairs_checked = 0

    for i, first in enumerate(ordered):
        for second in ordered[i + 1:]:
            if can_stop_early and gap_minutes(first.slot, second.slot) >= horizon_minutes:
                break
            if first.calendar_id == second.calendar_id:
                continue
            pairs_checked += 1
            conflict = _detect_between(first, second, opts)
            if conflict:
                conflicts.append(conflict)

    result = _deduplicate(conflicts)
    logger.debug(
        f"Found {len(result)} conflicts among {len(events)} events ({pairs_checked} pairs checked)"
    )
    return result


def detect_conflicts_for_event(
    new_event: Event,
    existing_events: list[Event],
    options: ConflictOptions | None = None,
) -> list[Conflict]:
    """
    Conflicts between one proposed event and existing events.

    The proposed event is always the primary event, except for
    work/personal conflicts where the work event leads.
    """
    opts = options or DEFAULT_OPTIONS
    conflicts: list[Conflict] = []

    for existing in existing_events:
        if existing.id == new_event.id:
            continue
        conflict = _detect_between(new_event, existing, opts)
        if conflict:
            conflicts.append(conflict)

    return _deduplicate(conflicts)


def get_conflict_stats(conflicts: list[Conflict]) -> ConflictStats:
    """Count conflicts by severity and type."""
    by_severity = {severity: 0 for severity in CONFLICT_SEVERITIES}
    by_type = {conflict_type: 0 for conflict_type in CONFLICT_TYPES}

    for conflict in conflicts:
        by_severity[conflict.severity.value] += 1
        by_type[conflict.type.value] += 1

    return ConflictStats(total=len(conflicts), by_severity=by_severity, by_type=by_type)


def check_new_event(
    new_event: Event,
    existing_events: list[Event],
    options: ConflictOptions | None = None,
) -> dict[str, Any]:
    """
    Pre-creation conflict check for a single event.

    Returns:
        {
            "success": True,
            "has_conflicts": bool,
            "conflict_count": int,
            "high_priority_conflicts": int,
            "conflicts": list[dict],
        }
    """
    conflicts = detect_conflicts_for_event(new_event, existing_events, options)
    high_priority = sum(
        1 for c in conflicts if c.severity in (ConflictSeverity.HIGH, ConflictSeverity.CRITICAL)
    )
    return {
        "success": True,
        "has_conflicts": bool(conflicts),
        "conflict_count": len(conflicts),
        "high_priority_conflicts": high_priority,
        "conflicts": [c.to_dict() for c in conflicts],
    }


__all__ = [
    "ConflictOptions",
    "detect_conflicts",
    "detect_conflicts_for_event",
    "get_conflict_stats",
    "check_new_event",
]
