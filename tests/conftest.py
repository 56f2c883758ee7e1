"""Shared test fixtures for timewise tests.

This module provides common fixtures used across all test modules:
- A fixed working week (Monday 2026-10-19 onwards, UTC)
- Helpers for building aware datetimes, slots and events
- Sample users and events

Usage:
    def test_something(monday, make_event):
        event = make_event("a", monday.replace(hour=10), minutes=30)
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from timewise.calendar.models import Event, TimeSlot, UserAvailability, WorkingHours
from timewise.logging_config import HANDLER_NAME, LOGGER_NAME


# ─────────────────────────────────────────────────────────────────────────────
# Time Fixtures
# ─────────────────────────────────────────────────────────────────────────────


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Aware UTC datetime shorthand."""
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def monday() -> datetime:
    """Midnight UTC on Monday 2026-10-19."""
    return utc(2026, 10, 19)


@pytest.fixture
def at(monday: datetime) -> Callable[..., datetime]:
    """Build a time on the test week: at(hour, minute=0, day=0)."""

    def _at(hour: int, minute: int = 0, day: int = 0) -> datetime:
        return monday + timedelta(days=day, hours=hour, minutes=minute)

    return _at


@pytest.fixture
def work_day(at) -> TimeSlot:
    """Monday's default working window, 09:00-17:00 UTC."""
    return TimeSlot(at(9), at(17))


# ─────────────────────────────────────────────────────────────────────────────
# Event Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Build an event starting at `start` lasting `minutes`."""

    def _make(
        event_id: str,
        start: datetime,
        minutes: int = 60,
        calendar_id: str | None = None,
        title: str | None = None,
        is_work: bool = False,
    ) -> Event:
        return Event(
            id=event_id,
            title=title or f"Event {event_id}",
            start=start,
            end=start + timedelta(minutes=minutes),
            owner_id="alice",
            calendar_id=calendar_id if calendar_id is not None else f"cal-{event_id}",
            is_work=is_work,
        )

    return _make


@pytest.fixture
def default_hours() -> WorkingHours:
    """Monday-Friday, 09:00-17:00 UTC."""
    return WorkingHours()


# ─────────────────────────────────────────────────────────────────────────────
# User Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_user() -> Callable[..., UserAvailability]:
    """Build a user from (start, end) busy pairs."""

    def _make(
        user_id: str,
        busy: list[tuple[datetime, datetime]] | None = None,
        working_hours: WorkingHours | None = None,
    ) -> UserAvailability:
        return UserAvailability(
            user_id=user_id,
            name=user_id.title(),
            email=f"{user_id}@example.com",
            busy_slots=tuple(TimeSlot(s, e) for s, e in busy or []),
            working_hours=working_hours or WorkingHours(),
        )

    return _make


# ─────────────────────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def reset_timewise_logging():
    """Undo setup_logging() after each test (the CLI calls it)."""
    logger = logging.getLogger(LOGGER_NAME)
    level, propagate = logger.level, logger.propagate
    yield
    for handler in [h for h in logger.handlers if h.get_name() == HANDLER_NAME]:
        logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
