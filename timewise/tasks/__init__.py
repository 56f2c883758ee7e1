"""Task Engine - Rule-based task duration estimation

Philosophy:
    People are bad at guessing how long things take, and worse at it when
    the task is vague. A transparent rule engine beats a black box: every
    estimate comes with the reasons it was made, so the user can see why
    "Quick team meeting" got 23 minutes and correct it.

Components:
    patterns.py: Category keyword tables and EstimatorConfig
    estimator.py: DurationEstimator, format_duration, planning suggestions

Usage:
    from timewise.tasks.estimator import estimate

    result = estimate("Write API documentation", "Cover auth and pagination")
    print(result.minutes, result.confidence)
    for reason in result.reasoning:
        print(reason)
"""

# Confidence levels, lowest first
CONFIDENCE_LEVELS = ("low", "medium", "high")

# Category match scores above these raise confidence
MEDIUM_CONFIDENCE_SCORE = 0.5
HIGH_CONFIDENCE_SCORE = 0.8

# Description length thresholds (words) for the complexity multiplier
LONG_DESCRIPTION_WORDS = 20
VERY_LONG_DESCRIPTION_WORDS = 50

__all__ = [
    "CONFIDENCE_LEVELS",
    "MEDIUM_CONFIDENCE_SCORE",
    "HIGH_CONFIDENCE_SCORE",
    "LONG_DESCRIPTION_WORDS",
    "VERY_LONG_DESCRIPTION_WORDS",
]
