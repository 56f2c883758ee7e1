"""
Tool: Task Patterns
Purpose: Keyword tables that drive the duration estimator

The estimator is a rule engine, and these tables are its rules. They are
plain configuration: an ordered list of task categories plus shared
multiplier and indicator word lists. Callers (and tests) can build their
own EstimatorConfig, or load one from args/estimator.yaml.

Usage:
    from timewise.tasks.patterns import EstimatorConfig, TaskCategory

    config = EstimatorConfig(categories=[
        TaskCategory(name="gardening", keywords=["weed", "plant"], base_minutes=40),
    ])
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TaskCategory(BaseModel):
    model_config = ConfigDict(extra="allow")
    name: str
    keywords: list[str] = Field(min_length=1)
    base_minutes: int = Field(ge=1)
    multipliers: dict[str, float] = Field(default_factory=dict)

    @field_validator("keywords")
    @classmethod
    def _lowercase_keywords(cls, value: list[str]) -> list[str]:
        return [k.lower() for k in value]

    @field_validator("multipliers")
    @classmethod
    def _positive_multipliers(cls, value: dict[str, float]) -> dict[str, float]:
        for keyword, factor in value.items():
            if factor <= 0:
                raise ValueError(f"Multiplier for {keyword!r} must be positive, got {factor}")
        return {k.lower(): v for k, v in value.items()}


DEFAULT_CATEGORIES: list[dict] = [
    {
        "name": "meeting",
        "keywords": ["meeting", "call", "standup", "sync", "check-in", "discussion"],
        "base_minutes": 30,
        "multipliers": {
            "quick": 0.5,
            "brief": 0.5,
            "short": 0.5,
            "long": 2,
            "extended": 2.5,
            "all-day": 8,
            "team": 1.5,
            "client": 1.5,
        },
    },
    {
        "name": "development",
        "keywords": ["code", "develop", "implement", "build", "create", "program", "debug", "fix"],
        "base_minutes": 120,
        "multipliers": {
            "simple": 0.5,
            "basic": 0.5,
            "quick": 0.5,
            "complex": 2,
            "advanced": 2.5,
            "refactor": 1.5,
            "prototype": 0.8,
            "production": 2,
        },
    },
    {
        "name": "research",
        "keywords": ["research", "analyze", "investigate", "study", "explore", "learn"],
        "base_minutes": 90,
        "multipliers": {
            "quick": 0.5,
            "deep": 2,
            "thorough": 2,
            "comprehensive": 3,
            "preliminary": 0.7,
        },
    },
    {
        "name": "documentation",
        "keywords": ["document", "write", "documentation", "readme", "manual", "guide"],
        "base_minutes": 60,
        "multipliers": {
            "quick": 0.5,
            "brief": 0.5,
            "detailed": 2,
            "comprehensive": 3,
            "technical": 1.5,
        },
    },
    {
        "name": "design",
        "keywords": ["design", "mockup", "wireframe", "prototype", "ui", "ux"],
        "base_minutes": 90,
        "multipliers": {
            "simple": 0.7,
            "complex": 2,
            "detailed": 1.5,
            "high-fidelity": 2,
            "low-fidelity": 0.8,
        },
    },
    {
        "name": "testing",
        "keywords": ["test", "testing", "qa", "review", "validate"],
        "base_minutes": 45,
        "multipliers": {
            "quick": 0.5,
            "thorough": 2,
            "comprehensive": 2.5,
            "unit": 0.8,
            "integration": 1.5,
            "e2e": 2,
        },
    },
    {
        "name": "admin",
        "keywords": ["email", "admin", "administrative", "paperwork", "form", "application"],
        "base_minutes": 20,
        "multipliers": {
            "quick": 0.5,
            "detailed": 1.5,
            "complex": 2,
        },
    },
    {
        "name": "presentation",
        "keywords": ["presentation", "present", "demo", "showcase", "pitch"],
        "base_minutes": 45,
        "multipliers": {
            "prepare": 3,
            "create": 4,
            "deliver": 1,
            "practice": 1.5,
        },
    },
]

# Category-independent size, urgency, complexity and time-unit words
DEFAULT_COMMON_MULTIPLIERS: dict[str, float] = {
    # Size
    "small": 0.5,
    "large": 2,
    "huge": 3,
    "tiny": 0.3,
    "massive": 4,
    # Urgency: less time available, work faster
    "urgent": 0.8,
    "asap": 0.8,
    "rush": 0.7,
    # Complexity
    "simple": 0.6,
    "easy": 0.5,
    "hard": 2,
    "difficult": 2.5,
    "challenging": 2,
    # Time units without an explicit number
    "hour": 1,
    "hours": 2,
    "day": 8,
    "days": 16,
    "week": 40,
    "month": 160,
}

DEFAULT_TECHNICAL_TERMS: list[str] = [
    "api",
    "database",
    "server",
    "deploy",
    "infrastructure",
    "architecture",
    "framework",
    "integration",
    "migration",
    "optimization",
    "performance",
    "security",
    "scalability",
]

DEFAULT_MULTI_STEP_TERMS: list[str] = ["step", "phase", "stage"]
DEFAULT_COLLABORATION_TERMS: list[str] = ["team", "collaborate", "coordinate"]

# Explicit "N <unit>" durations, checked in order; the first hit wins.
# A working day is 8 hours and a working week 5 days.
DURATION_PATTERNS: list[tuple[re.Pattern[str], int]] = [
    (re.compile(r"\b(\d+(?:\.\d+)?)[\s-]*(?:minutes?|mins?)\b"), 1),
    (re.compile(r"\b(\d+(?:\.\d+)?)[\s-]*(?:hours?|hrs?)\b"), 60),
    (re.compile(r"\b(\d+(?:\.\d+)?)[\s-]*days?\b"), 480),
    (re.compile(r"\b(\d+(?:\.\d+)?)[\s-]*weeks?\b"), 2400),
]

# (trigger keywords, tip) pairs for planning suggestions
PLANNING_TIPS: list[tuple[tuple[str, ...], str]] = [
    (("meeting", "call"), "Block calendar time and send agenda in advance"),
    (("code", "develop"), "Set up development environment and gather requirements first"),
    (("research",), "Define specific research questions and success criteria"),
    (("write", "document"), "Create an outline before writing to stay focused"),
    (("review", "test"), "Prepare test cases or review checklist beforehand"),
    (("complex", "difficult"), "Consider pairing with a colleague or seeking expert input"),
    (("urgent", "asap"), "Focus on minimum viable solution first"),
]


class EstimatorConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    categories: list[TaskCategory] = Field(
        default_factory=lambda: [TaskCategory(**c) for c in DEFAULT_CATEGORIES]
    )
    common_multipliers: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_COMMON_MULTIPLIERS))
    technical_terms: list[str] = Field(default_factory=lambda: list(DEFAULT_TECHNICAL_TERMS))
    multi_step_terms: list[str] = Field(default_factory=lambda: list(DEFAULT_MULTI_STEP_TERMS))
    collaboration_terms: list[str] = Field(default_factory=lambda: list(DEFAULT_COLLABORATION_TERMS))
    default_base_minutes: int = Field(default=60, ge=1)
    min_minutes: int = Field(default=5, ge=1)
    max_minutes: int = Field(default=480, ge=1)
    long_text_words: int = Field(default=10, ge=1)
    technical_term_weight: float = Field(default=0.2, ge=0)
    multi_step_factor: float = Field(default=1.4, gt=0)
    collaboration_factor: float = Field(default=1.3, gt=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> EstimatorConfig:
        if self.min_minutes > self.max_minutes:
            raise ValueError(f"min_minutes ({self.min_minutes}) exceeds max_minutes ({self.max_minutes})")
        return self


__all__ = [
    "TaskCategory",
    "EstimatorConfig",
    "DEFAULT_CATEGORIES",
    "DEFAULT_COMMON_MULTIPLIERS",
    "DEFAULT_TECHNICAL_TERMS",
    "DEFAULT_MULTI_STEP_TERMS",
    "DEFAULT_COLLABORATION_TERMS",
    "DURATION_PATTERNS",
    "PLANNING_TIPS",
]
