"""
Tool: Meeting Suggester
Purpose: Rank candidate meeting slots across several participants

Candidates are generated by sliding a meeting-length window across each
working day at a fixed step. A participant counts as available only when
the whole candidate fits inside one of their free slots. Candidates that
fail the quorum (60% of participants by default) are dropped; the rest are
scored by participant coverage and time-of-day desirability.

This is a greedy ranking, not an optimal solver: it orders the candidates
it finds and leaves the final choice to the caller.

Usage:
    from timewise.calendar.suggester import suggest_meeting_times, apply_preferred_times

    suggestions = suggest_meeting_times(users, 60, range_start, range_end)
    boosted = apply_preferred_times(suggestions, ["10:00", "14:00"])
    best = boosted[0] if boosted else None
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from timewise.calendar import (
    DEFAULT_BUFFER_MINUTES,
    DEFAULT_MAX_SUGGESTIONS,
    DEFAULT_QUORUM,
    DEFAULT_STEP_MINUTES,
    DEFAULT_TIME_ZONE,
    PREFERRED_TIME_BOOST,
)
from timewise.calendar.availability import calculate_availability, working_windows
from timewise.calendar.intervals import contains
from timewise.calendar.models import (
    MeetingSuggestion,
    TimeSlot,
    UserAvailability,
    WorkingHours,
    load_zone,
    to_utc,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuggestOptions:
    """Knobs for candidate generation and filtering."""

    buffer_minutes: int = DEFAULT_BUFFER_MINUTES
    step_minutes: int = DEFAULT_STEP_MINUTES
    quorum: float = DEFAULT_QUORUM
    max_results: int | None = DEFAULT_MAX_SUGGESTIONS
    working_hours: WorkingHours = field(default_factory=WorkingHours)

    def __post_init__(self):
        if self.buffer_minutes < 0:
            raise ValueError(f"buffer_minutes must be non-negative, got {self.buffer_minutes}")
        if self.step_minutes <= 0:
            raise ValueError(f"step_minutes must be positive, got {self.step_minutes}")
        if not 0.0 <= self.quorum <= 1.0:
            raise ValueError(f"quorum must be between 0 and 1, got {self.quorum}")
        if self.max_results is not None and self.max_results < 1:
            raise ValueError(f"max_results must be at least 1, got {self.max_results}")


def generate_candidates(
    working_hours: WorkingHours,
    duration_minutes: int,
    range_start: datetime,
    range_end: datetime,
    step_minutes: int = DEFAULT_STEP_MINUTES,
) -> list[TimeSlot]:
    """Meeting-length windows stepped across each working day."""
    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=step_minutes)
    candidates: list[TimeSlot] = []

    for window in working_windows(working_hours, range_start, range_end):
        start = window.start
        while start + duration <= window.end:
            candidates.append(TimeSlot(start, start + duration))
            start += step

    return candidates


def score_slot(local_start: datetime, available: int, total: int) -> float:
    """
    Coverage score adjusted for time-of-day desirability.

    local_start is the candidate start on the scoring clock.
    """
    score = available / total
    hour = local_start.hour
    minute = local_start.minute

    # Round hours and half hours read better on invites
    if minute == 0:
        score *= 1.2
    elif minute == 30:
        score *= 1.1

    # Typical meeting windows: 9-11 AM, 1-4 PM
    if 9 <= hour <= 11 or 13 <= hour <= 16:
        score *= 1.3

    if hour < 9 or hour > 16:
        score *= 0.9

    # Right after lunch, and end of the working day
    if hour == 13:
        score *= 0.95
    if hour >= 17:
        score *= 0.8

    return score


def suggest_meeting_times(
    users: list[UserAvailability],
    duration_minutes: int,
    range_start: datetime | str,
    range_end: datetime | str,
    options: SuggestOptions | None = None,
) -> list[MeetingSuggestion]:
    """
    Suggest meeting slots where a quorum of participants is free.

    Args:
        users: Participants with busy slots and working hours
        duration_minutes: Meeting length
        range_start: Earliest acceptable start
        range_end: Latest acceptable end
        options: Buffer, step, quorum and candidate working hours

    Returns:
        Suggestions sorted by score, best first. Empty when nothing fits.
    """
    if not users:
        raise ValueError("At least one participant is required")
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")

    opts = options or SuggestOptions()
    start = to_utc(range_start)
    end = to_utc(range_end)

    free_by_user = calculate_availability(users, start, end, opts.buffer_minutes)
    candidates = generate_candidates(opts.working_hours, duration_minutes, start, end, opts.step_minutes)
    min_participants = math.ceil(opts.quorum * len(users))
    scoring_tz = opts.working_hours.tzinfo

    suggestions: list[MeetingSuggestion] = []
    for candidate in candidates:
        available = tuple(
            user.user_id
            for user in users
            if any(contains(free, candidate) for free in free_by_user[user.user_id])
        )
        if not available or len(available) < min_participants:
            continue

        suggestions.append(MeetingSuggestion(
            start=candidate.start,
            end=candidate.end,
            duration=duration_minutes,
            available_participant_ids=available,
            confidence=len(available) / len(users),
            score=score_slot(candidate.start.astimezone(scoring_tz), len(available), len(users)),
        ))

    # sorted() is stable, so equal scores stay in chronological order
    ranked = sorted(suggestions, key=lambda s: s.score, reverse=True)
    if opts.max_results is not None:
        ranked = ranked[:opts.max_results]

    logger.debug(
        f"Suggested {len(ranked)} of {len(suggestions)} qualifying slots "
        f"({len(candidates)} candidates, {len(users)} participants, {duration_minutes} min)"
    )
    return ranked


def apply_preferred_times(
    suggestions: list[MeetingSuggestion],
    preferred_times: list[str] | None,
    time_zone: str = DEFAULT_TIME_ZONE,
    boost: float = PREFERRED_TIME_BOOST,
) -> list[MeetingSuggestion]:
    """
    Boost suggestions starting at a preferred "HH:MM" and re-rank.

    Post-processing for callers; the core ranking never sees preferences.
    """
    if not preferred_times:
        return list(suggestions)

    tz = load_zone(time_zone)
    wanted = set(preferred_times)
    boosted = []
    for suggestion in suggestions:
        if suggestion.start.astimezone(tz).strftime("%H:%M") in wanted:
            suggestion = replace(suggestion, score=suggestion.score * boost, is_preferred_time=True)
        boosted.append(suggestion)

    return sorted(boosted, key=lambda s: s.score, reverse=True)


def find_optimal_meeting_time(
    users: list[UserAvailability],
    duration_minutes: int,
    range_start: datetime | str,
    range_end: datetime | str,
    preferred_times: list[str] | None = None,
    options: SuggestOptions | None = None,
) -> MeetingSuggestion | None:
    """The single best suggestion after preferred-time boosting, or None."""
    opts = options or SuggestOptions()
    suggestions = suggest_meeting_times(users, duration_minutes, range_start, range_end, opts)
    ranked = apply_preferred_times(suggestions, preferred_times, opts.working_hours.time_zone)
    return ranked[0] if ranked else None


__all__ = [
    "SuggestOptions",
    "suggest_meeting_times",
    "apply_preferred_times",
    "find_optimal_meeting_time",
    "generate_candidates",
    "score_slot",
]
