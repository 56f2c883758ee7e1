"""
Tool: Availability Engine
Purpose: Turn a person's busy time and working hours into free time slots

For every working day in the requested range, the person's busy slots are
clipped to the working window, merged, and the gaps between them are
reported as free time. A buffer shrinks each gap on the side that touches
a busy slot, leaving transition time around meetings.

Usage:
    from timewise.calendar.availability import compute_free_slots, calculate_availability

    free = compute_free_slots(user, range_start, range_end, buffer_minutes=15)
    by_user = calculate_availability(users, range_start, range_end)

Output:
    Chronologically ordered list of TimeSlot values (UTC)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date, datetime, timedelta, tzinfo

from timewise.calendar.intervals import clip, merge_slots, overlaps
from timewise.calendar.models import TimeSlot, UserAvailability, WorkingHours, to_utc

logger = logging.getLogger(__name__)


def _validate_range(range_start: datetime | str, range_end: datetime | str) -> tuple[datetime, datetime]:
    start = to_utc(range_start)
    end = to_utc(range_end)
    if end < start:
        raise ValueError(f"Range ends before it starts: {start.isoformat()} -> {end.isoformat()}")
    return start, end


def iter_days(range_start: datetime, range_end: datetime, tz: tzinfo) -> Iterator[date]:
    """Local calendar days from the day of range_start through the day of range_end."""
    day = range_start.astimezone(tz).date()
    last = range_end.astimezone(tz).date()
    while day <= last:
        yield day
        day += timedelta(days=1)


def working_windows(
    working_hours: WorkingHours,
    range_start: datetime | str,
    range_end: datetime | str,
) -> list[TimeSlot]:
    """
    Working windows for each working day in the range, clipped to the range.

    Days whose window is empty (zero-length hours, or entirely outside the
    range) are skipped.
    """
    start, end = _validate_range(range_start, range_end)
    windows: list[TimeSlot] = []

    for day in iter_days(start, end, working_hours.tzinfo):
        if not working_hours.is_work_day(day):
            continue
        day_start, day_end = working_hours.window_for(day)
        day_start = max(day_start, start)
        day_end = min(day_end, end)
        if day_start < day_end:
            windows.append(TimeSlot(day_start, day_end))

    return windows


def find_free_slots_in_window(
    busy_slots: tuple[TimeSlot, ...] | list[TimeSlot],
    window: TimeSlot,
    buffer_minutes: int = 0,
) -> list[TimeSlot]:
    """Free gaps inside one working window."""
    buffer = timedelta(minutes=buffer_minutes)

    relevant = [clip(slot, window) for slot in busy_slots if overlaps(slot, window)]
    busy = merge_slots(s for s in relevant if s is not None)

    if not busy:
        return [window]

    free: list[TimeSlot] = []

    # Before the first busy slot
    free_end = busy[0].start - buffer
    if window.start < free_end:
        free.append(TimeSlot(window.start, free_end))

    # Between busy slots
    for current, following in zip(busy, busy[1:]):
        free_start = current.end + buffer
        free_end = following.start - buffer
        if free_start < free_end:
            free.append(TimeSlot(free_start, free_end))

    # After the last busy slot
    free_start = busy[-1].end + buffer
    if free_start < window.end:
        free.append(TimeSlot(free_start, window.end))

    return free


def compute_free_slots(
    user: UserAvailability,
    range_start: datetime | str,
    range_end: datetime | str,
    buffer_minutes: int = 0,
) -> list[TimeSlot]:
    """
    Compute a person's free time within their working hours.

    Args:
        user: Busy slots and working hours for one person
        range_start: First instant of interest
        range_end: Last instant of interest
        buffer_minutes: Transition time kept clear around busy slots

    Returns:
        Free slots in chronological order. Empty when nothing is free.
    """
    if buffer_minutes < 0:
        raise ValueError(f"buffer_minutes must be non-negative, got {buffer_minutes}")

    windows = working_windows(user.working_hours, range_start, range_end)
    free: list[TimeSlot] = []
    for window in windows:
        free.extend(find_free_slots_in_window(user.busy_slots, window, buffer_minutes))

    logger.debug(
        f"Computed {len(free)} free slots for {user.user_id} "
        f"across {len(windows)} working days ({len(user.busy_slots)} busy slots)"
    )
    return free


def calculate_availability(
    users: list[UserAvailability],
    range_start: datetime | str,
    range_end: datetime | str,
    buffer_minutes: int = 0,
) -> dict[str, list[TimeSlot]]:
    """Free slots for several people, keyed by user_id."""
    return {
        user.user_id: compute_free_slots(user, range_start, range_end, buffer_minutes)
        for user in users
    }


__all__ = [
    "compute_free_slots",
    "calculate_availability",
    "find_free_slots_in_window",
    "working_windows",
    "iter_days",
]
