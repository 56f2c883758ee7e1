from __future__ import annotations

import logging
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from timewise import ARGS_DIR
from timewise.calendar import (
    DEFAULT_BUFFER_MINUTES,
    DEFAULT_END_OF_DAY,
    DEFAULT_MAX_SUGGESTIONS,
    DEFAULT_QUORUM,
    DEFAULT_START_OF_DAY,
    DEFAULT_STEP_MINUTES,
    DEFAULT_TIME_ZONE,
    DEFAULT_WORK_DAYS,
)
from timewise.calendar.conflicts import ConflictOptions
from timewise.calendar.models import WorkingHours, weekday_number
from timewise.calendar.suggester import SuggestOptions
from timewise.tasks.patterns import EstimatorConfig

logger = logging.getLogger(__name__)


# =============================================================================
# SchedulingConfig (args/scheduling.yaml)
# =============================================================================

class WorkingHoursConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    start_of_day: str = Field(default=DEFAULT_START_OF_DAY)
    end_of_day: str = Field(default=DEFAULT_END_OF_DAY)
    work_days: list[int | str] = Field(default_factory=lambda: sorted(DEFAULT_WORK_DAYS))
    time_zone: str = Field(default=DEFAULT_TIME_ZONE)


class AvailabilityConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    buffer_minutes: int = Field(default=0, ge=0)


class ConflictsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    include_back_to_back: bool = Field(default=True)
    travel_time_minutes: int = Field(default=15, ge=0)
    work_personal_separation: bool = Field(default=False)
    work_day_start_hour: int = Field(default=9, ge=0, le=23)
    work_day_end_hour: int = Field(default=17, ge=1, le=24)


class SuggestionsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    buffer_minutes: int = Field(default=DEFAULT_BUFFER_MINUTES, ge=0)
    step_minutes: int = Field(default=DEFAULT_STEP_MINUTES, ge=1)
    quorum: float = Field(default=DEFAULT_QUORUM, ge=0.0, le=1.0)
    max_results: Optional[int] = Field(default=DEFAULT_MAX_SUGGESTIONS, ge=1)
    preferred_times: list[str] = Field(default_factory=list)


class SchedulingConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    working_hours: WorkingHoursConfig = Field(default_factory=WorkingHoursConfig)
    availability: AvailabilityConfig = Field(default_factory=AvailabilityConfig)
    conflicts: ConflictsConfig = Field(default_factory=ConflictsConfig)
    suggestions: SuggestionsConfig = Field(default_factory=SuggestionsConfig)

    def to_working_hours(self) -> WorkingHours:
        wh = self.working_hours
        return WorkingHours(
            start_of_day=wh.start_of_day,
            end_of_day=wh.end_of_day,
            work_days=frozenset(weekday_number(d) for d in wh.work_days),
            time_zone=wh.time_zone,
        )

    def to_conflict_options(self) -> ConflictOptions:
        c = self.conflicts
        return ConflictOptions(
            include_back_to_back=c.include_back_to_back,
            travel_time_minutes=c.travel_time_minutes,
            work_personal_separation=c.work_personal_separation,
            work_day_start_hour=c.work_day_start_hour,
            work_day_end_hour=c.work_day_end_hour,
            time_zone=self.working_hours.time_zone,
        )

    def to_suggest_options(self) -> SuggestOptions:
        s = self.suggestions
        return SuggestOptions(
            buffer_minutes=s.buffer_minutes,
            step_minutes=s.step_minutes,
            quorum=s.quorum,
            max_results=s.max_results,
            working_hours=self.to_working_hours(),
        )


# =============================================================================
# Loader
# =============================================================================

_CONFIG_MAP: dict[str, type[BaseModel]] = {
    "scheduling": SchedulingConfig,
    "estimator": EstimatorConfig,
}


def load_and_validate(config_name: str, model_class: type[BaseModel] | None = None) -> BaseModel:
    if model_class is None:
        model_class = _CONFIG_MAP.get(config_name)
        if model_class is None:
            raise ValueError(f"Unknown config: {config_name}. Available: {list(_CONFIG_MAP.keys())}")

    yaml_path = ARGS_DIR / f"{config_name}.yaml"

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return model_class.model_validate(raw)
    except Exception as e:
        logger.warning(f"Config validation failed for {config_name}: {e}, using defaults")
        return model_class()


__all__ = [
    "WorkingHoursConfig",
    "AvailabilityConfig",
    "ConflictsConfig",
    "SuggestionsConfig",
    "SchedulingConfig",
    "EstimatorConfig",
    "load_and_validate",
]
