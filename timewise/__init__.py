"""Timewise - Scheduling intelligence over plain calendar data

Philosophy:
    Calendars already know when people are busy. The hard part is turning
    a pile of events into answers: when am I free, what clashes, when can
    the whole group meet, and how long will this task really take.

Components:
    calendar/: Interval model, availability, conflicts, meeting suggestions
    tasks/: Rule-based task duration estimation
    config_models.py: Validated configuration loaded from args/*.yaml
    logging_config.py: Opt-in structlog rendering for the timewise loggers
    cli.py: `timewise` command line entry point

Design Principles:
    1. Pure functions over immutable values. No I/O inside the engines.
    2. Validate at the boundary. Engines assume well-formed input.
    3. Empty results are results, not errors.
"""

import logging
from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent
ARGS_DIR = PROJECT_ROOT / "args"

__version__ = "0.1.0"

# Silent unless the application calls setup_logging()
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "PROJECT_ROOT",
    "ARGS_DIR",
    "__version__",
]
