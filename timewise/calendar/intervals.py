"""
Tool: Interval Primitives
Purpose: Comparison and combination helpers for TimeSlot values

All helpers treat slots as half-open intervals on UTC instants, so two
slots that merely touch (one ends exactly when the other starts) do not
overlap.

Usage:
    from timewise.calendar.intervals import overlaps, intersection, merge_slots

    if overlaps(a, b):
        shared = intersection(a, b)
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import datetime

from timewise.calendar.models import TimeSlot


def overlaps(a: TimeSlot, b: TimeSlot) -> bool:
    """True iff the slots share some positive-length stretch of time."""
    return a.start < b.end and b.start < a.end


def intersection(a: TimeSlot, b: TimeSlot) -> TimeSlot | None:
    """The overlapping sub-interval of two slots, or None."""
    if not overlaps(a, b):
        return None
    return TimeSlot(max(a.start, b.start), min(a.end, b.end))


def clip(slot: TimeSlot, window: TimeSlot) -> TimeSlot | None:
    """Restrict a slot to a window."""
    return intersection(slot, window)


def is_adjacent(a: TimeSlot, b: TimeSlot) -> bool:
    """True iff one slot ends exactly where the other begins."""
    return a.end == b.start or b.end == a.start


def contains(outer: TimeSlot, inner: TimeSlot) -> bool:
    return outer.start <= inner.start and inner.end <= outer.end


def gap_minutes(a: TimeSlot, b: TimeSlot) -> float:
    """
    Minutes from the end of `a` to the start of `b`.

    Meaningful only when `a` ends before `b` starts; negative when they
    overlap.
    """
    return (b.start - a.end).total_seconds() / 60


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, rounded half-up."""
    return math.floor((end - start).total_seconds() / 60 + 0.5)


def merge_slots(slots: Iterable[TimeSlot]) -> list[TimeSlot]:
    """
    Sort slots and merge any that overlap or touch.

    Returns a chronologically ordered list of disjoint, non-adjacent slots.
    """
    merged: list[TimeSlot] = []
    for slot in sorted(slots, key=lambda s: (s.start, s.end)):
        if merged and slot.start <= merged[-1].end:
            last = merged[-1]
            if slot.end > last.end:
                merged[-1] = TimeSlot(last.start, slot.end)
        else:
            merged.append(slot)
    return merged


__all__ = [
    "overlaps",
    "intersection",
    "clip",
    "is_adjacent",
    "contains",
    "gap_minutes",
    "minutes_between",
    "merge_slots",
]
