"""
Tool: Duration Estimator
Purpose: Estimate how long a task will take from its title and description

Estimation pipeline:
1. Match the text against task categories and pick a base duration
2. An explicit duration ("for 3 hours") wins outright
3. Otherwise apply category and common multipliers ("quick", "large", ...)
4. Apply complexity factors (long descriptions, technical terms, teamwork)
5. Round half-up and clamp to the configured bounds

Every step that changes the number adds a line to the reasoning, so the
result can be explained back to the user.

Usage:
    from timewise.tasks.estimator import DurationEstimator, estimate

    result = estimate("Quick team meeting")
    result.minutes        # 23
    result.confidence     # "low"

    # Custom rules
    estimator = DurationEstimator(EstimatorConfig(max_minutes=240))
    estimator.estimate("Refactor the billing service")

Dependencies:
    - pydantic (EstimatorConfig)

Output:
    DurationEstimate (call .to_dict() for a JSON-ready result)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from timewise.tasks import (
    CONFIDENCE_LEVELS,
    HIGH_CONFIDENCE_SCORE,
    LONG_DESCRIPTION_WORDS,
    MEDIUM_CONFIDENCE_SCORE,
    VERY_LONG_DESCRIPTION_WORDS,
)
from timewise.tasks.patterns import DURATION_PATTERNS, PLANNING_TIPS, EstimatorConfig, TaskCategory

logger = logging.getLogger(__name__)

# Words, keeping hyphenated compounds ("check-in", "all-day") together
WORD_PATTERN = re.compile(r"[a-z0-9]+(?:[-'][a-z0-9]+)*")


@dataclass(frozen=True)
class DurationEstimate:
    """Result of a duration estimate."""

    minutes: int
    confidence: str
    reasoning: tuple[str, ...]
    category: str | None = None
    explicit: bool = False
    suggestions: tuple[str, ...] = ()

    @property
    def formatted(self) -> str:
        return format_duration(self.minutes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "minutes": self.minutes,
            "formatted": self.formatted,
            "confidence": self.confidence,
            "category": self.category,
            "explicit": self.explicit,
            "reasoning": list(self.reasoning),
            "suggestions": list(self.suggestions),
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (22.5 -> 23)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def tokenize(text: str) -> list[str]:
    """Lowercased words of the text."""
    return WORD_PATTERN.findall(text.lower())


def _stem_match(word: str, keyword: str) -> bool:
    return bool(keyword) and word.startswith(keyword)


def _matched_keywords(words: list[str], keywords: list[str]) -> list[str]:
    """Keywords (in declaration order) that some word starts with."""
    return [k for k in keywords if any(_stem_match(w, k) for w in words)]


def _priced_keywords(words: list[str], table: dict[str, float]) -> dict[str, str]:
    """
    Map each word to the longest multiplier key it starts with.

    Longest-key wins so "days" is priced as "days", not also as "day".
    """
    priced: dict[str, str] = {}
    for word in words:
        candidates = [k for k in table if _stem_match(word, k)]
        if candidates:
            priced[word] = max(candidates, key=len)
    return priced


def _format_factor(value: float) -> str:
    return f"{value:g}x"


def extract_explicit_minutes(text: str) -> tuple[int, str] | None:
    """
    Find an explicit "N <unit>" duration in the text.

    Units are checked in order (minutes, hours, days, weeks) and the first
    unit with a match wins. Days and weeks are working days (8h) and
    working weeks (5 days).

    Returns:
        (minutes, matched phrase), or None
    """
    lowered = text.lower()
    for pattern, unit_minutes in DURATION_PATTERNS:
        match = pattern.search(lowered)
        if match:
            return round_half_up(float(match.group(1)) * unit_minutes), match.group(0)
    return None


def format_duration(minutes: int) -> str:
    """Human-readable duration: "45 minutes", "1 hour", "2 hours 15 minutes"."""
    hours, mins = divmod(int(minutes), 60)
    parts = []
    if hours:
        parts.append(f"{hours} hour{'s' if hours != 1 else ''}")
    if mins or not hours:
        parts.append(f"{mins} minute{'s' if mins != 1 else ''}")
    return " ".join(parts)


def planning_suggestions(text: str, minutes: int) -> list[str]:
    """Practical planning tips for a task of this kind and length."""
    words = tokenize(text)
    suggestions: list[str] = []

    if minutes > 120:
        suggestions.append("Consider breaking this task into smaller subtasks")
    if minutes > 240:
        suggestions.append("This seems like a multi-day task, consider setting intermediate milestones")

    for triggers, tip in PLANNING_TIPS:
        if _matched_keywords(words, list(triggers)):
            suggestions.append(tip)

    if minutes > 90 and not suggestions:
        suggestions.append("Plan regular breaks to maintain focus and productivity")

    return suggestions


class DurationEstimator:
    """
    Keyword rule engine for task durations.

    Holds no state beyond its configuration, so one instance can be shared.
    """

    def __init__(self, config: EstimatorConfig | None = None):
        self.config = config or EstimatorConfig()

    def _best_category(self, words: list[str]) -> tuple[TaskCategory | None, float, list[str]]:
        best: TaskCategory | None = None
        best_score = 0.0
        best_matched: list[str] = []

        for category in self.config.categories:
            matched = _matched_keywords(words, category.keywords)
            score = len(matched) / len(category.keywords)
            # Strictly greater keeps the earliest category on ties
            if score > best_score:
                best, best_score, best_matched = category, score, matched

        return best, best_score, best_matched

    def _complexity_multiplier(self, words: list[str], word_count: int) -> tuple[float, list[str]]:
        cfg = self.config
        multiplier = 1.0
        factors: list[str] = []

        if word_count > LONG_DESCRIPTION_WORDS:
            multiplier *= 1.3
            factors.append(f"long description ({word_count} words, 1.3x)")
        if word_count > VERY_LONG_DESCRIPTION_WORDS:
            multiplier *= 1.5
            factors.append("very long description (1.5x)")

        technical = _matched_keywords(words, cfg.technical_terms)
        if technical:
            factor = 1 + cfg.technical_term_weight * len(technical)
            multiplier *= factor
            factors.append(f"technical terms: {', '.join(technical)} ({_format_factor(factor)})")

        if _matched_keywords(words, cfg.multi_step_terms):
            multiplier *= cfg.multi_step_factor
            factors.append(f"multi-step work ({_format_factor(cfg.multi_step_factor)})")

        if _matched_keywords(words, cfg.collaboration_terms):
            multiplier *= cfg.collaboration_factor
            factors.append(f"collaboration ({_format_factor(cfg.collaboration_factor)})")

        return multiplier, factors

    def _confidence(self, category_score: float, explicit: bool, word_count: int) -> str:
        level = 0
        if category_score > MEDIUM_CONFIDENCE_SCORE:
            level = 1
        if category_score > HIGH_CONFIDENCE_SCORE or explicit:
            level = 2
        if word_count > self.config.long_text_words:
            level = min(level + 1, len(CONFIDENCE_LEVELS) - 1)
        return CONFIDENCE_LEVELS[level]

    def _clamp(self, minutes: int, reasoning: list[str]) -> int:
        cfg = self.config
        if minutes < cfg.min_minutes:
            reasoning.append(f"Raised to minimum of {cfg.min_minutes} minutes")
            return cfg.min_minutes
        if minutes > cfg.max_minutes:
            reasoning.append(f"Capped at maximum of {cfg.max_minutes} minutes")
            return cfg.max_minutes
        return minutes

    def estimate(self, title: str, description: str | None = None) -> DurationEstimate:
        """
        Estimate the duration of a task.

        Args:
            title: Short task title (required, non-blank)
            description: Optional longer description

        Returns:
            DurationEstimate with minutes, confidence and reasoning

        Raises:
            ValueError: If the title is empty or blank
        """
        if not title or not title.strip():
            raise ValueError("Task title is required")

        text = f"{title} {description or ''}".strip()
        words = tokenize(text)
        word_count = len(text.split())
        reasoning: list[str] = []

        category, score, matched = self._best_category(words)
        if category:
            base = category.base_minutes
            reasoning.append(
                f"Identified as {category.name} task from: {', '.join(matched)} (base: {base} min)"
            )
        else:
            base = self.config.default_base_minutes
            reasoning.append(f"No task category matched (default base: {base} min)")

        explicit = extract_explicit_minutes(text)
        if explicit:
            raw_minutes, phrase = explicit
            reasoning.append(f'Explicit duration "{phrase}" = {raw_minutes} minutes')
            minutes = self._clamp(raw_minutes, reasoning)
        else:
            multiplier = 1.0
            applied: list[str] = []

            category_priced = _priced_keywords(words, category.multipliers) if category else {}
            for keyword in dict.fromkeys(category_priced.values()):
                factor = category.multipliers[keyword]
                multiplier *= factor
                applied.append(f"{keyword} ({_format_factor(factor)})")

            common_priced = _priced_keywords(words, self.config.common_multipliers)
            for keyword in dict.fromkeys(common_priced.values()):
                factor = self.config.common_multipliers[keyword]
                multiplier *= factor
                applied.append(f"{keyword} ({_format_factor(factor)})")

            if applied:
                reasoning.append(f"Applied multipliers: {', '.join(applied)}")

            # Words the category already priced are not indicators a second time
            remaining = [w for w in words if w not in category_priced]
            complexity, factors = self._complexity_multiplier(remaining, word_count)
            if factors:
                reasoning.append(f"Complexity factors: {'; '.join(factors)}")

            minutes = self._clamp(round_half_up(base * multiplier * complexity), reasoning)

        confidence = self._confidence(score, explicit is not None, word_count)
        result = DurationEstimate(
            minutes=minutes,
            confidence=confidence,
            reasoning=tuple(reasoning),
            category=category.name if category else None,
            explicit=explicit is not None,
            suggestions=tuple(planning_suggestions(text, minutes)),
        )

        logger.debug(
            f"Estimated {minutes} min ({confidence} confidence, category={result.category}, "
            f"explicit={result.explicit})"
        )
        return result


_default_estimator: DurationEstimator | None = None


def estimate(title: str, description: str | None = None) -> DurationEstimate:
    """Estimate with the default rule tables."""
    global _default_estimator
    if _default_estimator is None:
        _default_estimator = DurationEstimator()
    return _default_estimator.estimate(title, description)


__all__ = [
    "DurationEstimate",
    "DurationEstimator",
    "estimate",
    "extract_explicit_minutes",
    "format_duration",
    "planning_suggestions",
    "round_half_up",
    "tokenize",
]
