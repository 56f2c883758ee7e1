"""
Tool: Calendar Models
Purpose: Value types shared by the availability, conflict and suggestion engines

Usage:
    from timewise.calendar.models import TimeSlot, WorkingHours, Event, UserAvailability

Every type here is a frozen dataclass. Engines receive these as immutable
inputs and return freshly built instances; nothing is mutated in place.
Timestamps are normalized to UTC on construction so that every comparison
in the engines happens on absolute instants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timewise.calendar import (
    DEFAULT_END_OF_DAY,
    DEFAULT_START_OF_DAY,
    DEFAULT_TIME_ZONE,
    DEFAULT_WORK_DAYS,
    WEEKDAY_NAMES,
)


def to_utc(value: datetime | str) -> datetime:
    """
    Normalize a datetime (or ISO-8601 string) to an aware UTC datetime.

    Naive values are taken to already be UTC.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            raise ValueError(f"Invalid ISO-8601 timestamp: {value!r}") from None
    if not isinstance(value, datetime):
        raise ValueError(f"Expected datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_hhmm(value: str) -> time:
    """Parse an "HH:MM" string into a time."""
    try:
        hours_str, minutes_str = value.split(":")
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid time of day {value!r}, expected HH:MM") from None
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"Invalid time of day {value!r}, expected HH:MM")
    return time(hours, minutes)


def load_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown time zone: {name!r}") from None


def sunday_weekday(day: date) -> int:
    """Weekday number with 0 = Sunday .. 6 = Saturday."""
    return (day.weekday() + 1) % 7


def weekday_number(value: int | str) -> int:
    """
    Weekday number (0 = Sunday .. 6 = Saturday) from a number or a day name.

    Names are case-insensitive; "mon" and "Monday" both give 1.
    """
    if isinstance(value, str) and not value.strip().isdigit():
        name = value.strip().lower()
        matches = [i for i, day in enumerate(WEEKDAY_NAMES) if len(name) >= 3 and day.startswith(name)]
        if not matches:
            raise ValueError(f"Unknown weekday {value!r}, expected one of {', '.join(WEEKDAY_NAMES)}")
        return matches[0]
    number = int(value)
    if not 0 <= number <= 6:
        raise ValueError(f"Invalid weekday number {number}, expected 0 (Sunday) to 6 (Saturday)")
    return number


class ConflictType(str, Enum):
    """Kinds of scheduling conflict."""

    OVERLAP = "overlap"
    DOUBLE_BOOKING = "double_booking"
    BACK_TO_BACK = "back_to_back"
    TRAVEL_TIME = "travel_time"


class ConflictSeverity(str, Enum):
    """How urgently a conflict needs attention."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class TimeSlot:
    """
    A half-open interval of time between two UTC instants.

    Invariant: start < end.
    """

    start: datetime
    end: datetime

    def __post_init__(self):
        object.__setattr__(self, "start", to_utc(self.start))
        object.__setattr__(self, "end", to_utc(self.end))
        if self.end <= self.start:
            raise ValueError(
                f"Time slot must end after it starts: {self.start.isoformat()} -> {self.end.isoformat()}"
            )

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimeSlot:
        return cls(start=data["start"], end=data["end"])


@dataclass(frozen=True)
class WorkingHours:
    """
    Working-hour policy for one person.

    work_days uses 0 = Sunday .. 6 = Saturday. start_of_day and end_of_day
    are wall-clock times in time_zone.
    """

    start_of_day: str = DEFAULT_START_OF_DAY
    end_of_day: str = DEFAULT_END_OF_DAY
    work_days: frozenset[int] = DEFAULT_WORK_DAYS
    time_zone: str = DEFAULT_TIME_ZONE

    def __post_init__(self):
        start = parse_hhmm(self.start_of_day)
        end = parse_hhmm(self.end_of_day)
        if end < start:
            raise ValueError(
                f"Working day ends before it starts: {self.start_of_day}-{self.end_of_day}"
            )
        days = frozenset(int(d) for d in self.work_days)
        invalid = sorted(d for d in days if not 0 <= d <= 6)
        if invalid:
            raise ValueError(f"Invalid weekday numbers {invalid}, expected 0 (Sunday) to 6 (Saturday)")
        object.__setattr__(self, "work_days", days)
        load_zone(self.time_zone)

    @property
    def tzinfo(self) -> ZoneInfo:
        return load_zone(self.time_zone)

    def is_work_day(self, day: date) -> bool:
        return sunday_weekday(day) in self.work_days

    def window_for(self, day: date) -> tuple[datetime, datetime]:
        """UTC start and end of the working window on a local calendar day."""
        tz = self.tzinfo
        start = datetime.combine(day, parse_hhmm(self.start_of_day), tzinfo=tz)
        end = datetime.combine(day, parse_hhmm(self.end_of_day), tzinfo=tz)
        return start.astimezone(timezone.utc), end.astimezone(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_of_day": self.start_of_day,
            "end_of_day": self.end_of_day,
            "work_days": sorted(self.work_days),
            "time_zone": self.time_zone,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkingHours:
        data = dict(data)
        if "work_days" in data:
            data["work_days"] = frozenset(weekday_number(d) for d in data["work_days"])
        return cls(**data)


@dataclass(frozen=True)
class Event:
    """
    Normalized calendar event, owned by the caller.

    The engines never persist or mutate events.
    """

    id: str
    title: str
    start: datetime
    end: datetime
    owner_id: str = ""
    calendar_id: str = ""
    is_work: bool = False

    def __post_init__(self):
        object.__setattr__(self, "start", to_utc(self.start))
        object.__setattr__(self, "end", to_utc(self.end))
        if self.end <= self.start:
            raise ValueError(f"Event {self.id!r} must end after it starts")

    @property
    def slot(self) -> TimeSlot:
        return TimeSlot(self.start, self.end)

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "owner_id": self.owner_id,
            "calendar_id": self.calendar_id,
            "is_work": self.is_work,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            start=data["start"],
            end=data["end"],
            owner_id=data.get("owner_id", ""),
            calendar_id=data.get("calendar_id", ""),
            is_work=bool(data.get("is_work", False)),
        )


def events_to_busy_slots(events: list[Event]) -> tuple[TimeSlot, ...]:
    """Convert a person's events into busy time slots."""
    return tuple(event.slot for event in events)


@dataclass(frozen=True)
class UserAvailability:
    """A person's busy time plus the working hours that bound it."""

    user_id: str
    name: str = ""
    email: str = ""
    busy_slots: tuple[TimeSlot, ...] = ()
    working_hours: WorkingHours = field(default_factory=WorkingHours)

    def __post_init__(self):
        object.__setattr__(self, "busy_slots", tuple(self.busy_slots))

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "busy_slots": [slot.to_dict() for slot in self.busy_slots],
            "working_hours": self.working_hours.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserAvailability:
        busy = [TimeSlot.from_dict(s) for s in data.get("busy_slots", [])]
        # Callers may hand over raw events instead of pre-built busy slots
        busy.extend(Event.from_dict(e).slot for e in data.get("events", []))
        working_hours = data.get("working_hours")
        return cls(
            user_id=str(data["user_id"]),
            name=data.get("name", ""),
            email=data.get("email", ""),
            busy_slots=tuple(busy),
            working_hours=WorkingHours.from_dict(working_hours) if working_hours else WorkingHours(),
        )


@dataclass(frozen=True)
class Conflict:
    """A scheduling problem between two events."""

    id: str
    type: ConflictType
    severity: ConflictSeverity
    primary_event: Event
    conflicting_event: Event
    description: str
    suggestions: tuple[str, ...] = ()
    overlap_minutes: int | None = None

    @property
    def pair_key(self) -> frozenset[str]:
        """Order-independent identity of the event pair."""
        return frozenset((self.primary_event.id, self.conflicting_event.id))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "severity": self.severity.value,
            "primary_event": self.primary_event.to_dict(),
            "conflicting_event": self.conflicting_event.to_dict(),
            "overlap_minutes": self.overlap_minutes,
            "description": self.description,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class ConflictStats:
    """Aggregated conflict counts."""

    total: int
    by_severity: dict[str, int]
    by_type: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "by_severity": dict(self.by_severity),
            "by_type": dict(self.by_type),
        }


@dataclass(frozen=True)
class MeetingSuggestion:
    """A ranked candidate meeting slot."""

    start: datetime
    end: datetime
    duration: int
    available_participant_ids: tuple[str, ...]
    confidence: float
    score: float
    is_preferred_time: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration": self.duration,
            "available_participant_ids": list(self.available_participant_ids),
            "confidence": round(self.confidence, 4),
            "score": round(self.score, 4),
            "is_preferred_time": self.is_preferred_time,
        }
