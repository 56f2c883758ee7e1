#!/usr/bin/env python3
"""
Timewise Command Line Interface

Main entry point for the `timewise` command. Each subcommand reads a JSON
document (a file path, or - for stdin) and prints a JSON result.

Usage:
    timewise availability request.json      # Free slots per person
    timewise conflicts events.json          # Conflicts among events
    timewise suggest meeting.json           # Ranked meeting slots
    timewise estimate "Quick team meeting"  # Task duration estimate
    timewise --version                      # Show version

Input documents:
    availability: {"users": [...], "range_start": ISO, "range_end": ISO,
                   "buffer_minutes": 15}
    conflicts:    {"events": [...], "new_event": {...}, "options": {...}}
    suggest:      {"users": [...], "duration_minutes": 60, "range_start": ISO,
                   "range_end": ISO, "preferred_times": ["10:00"]}

Defaults come from args/scheduling.yaml and args/estimator.yaml.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Any

from timewise import __version__
from timewise.calendar.availability import calculate_availability
from timewise.calendar.conflicts import check_new_event, detect_conflicts, get_conflict_stats
from timewise.calendar.models import Event, UserAvailability
from timewise.calendar.suggester import apply_preferred_times, suggest_meeting_times
from timewise.config_models import SchedulingConfig, load_and_validate
from timewise.logging_config import setup_logging
from timewise.tasks.estimator import DurationEstimator
from timewise.tasks.patterns import EstimatorConfig

logger = logging.getLogger(__name__)

# Errors that mean "bad input" rather than a bug
INPUT_ERRORS = (ValueError, KeyError, TypeError, OSError)


def _read_document(source: str) -> dict[str, Any]:
    if source == "-":
        document = json.load(sys.stdin)
    else:
        with open(source) as f:
            document = json.load(f)
    if not isinstance(document, dict):
        raise ValueError("Input document must be a JSON object")
    return document


def _load_users(document: dict[str, Any], config: SchedulingConfig) -> list[UserAvailability]:
    default_hours = config.to_working_hours()
    users = []
    for data in document.get("users", []):
        user = UserAvailability.from_dict(data)
        if "working_hours" not in data:
            user = replace(user, working_hours=default_hours)
        users.append(user)
    return users


# =============================================================================
# Tool functions
# =============================================================================

def run_availability(document: dict[str, Any], config: SchedulingConfig) -> dict[str, Any]:
    users = _load_users(document, config)
    buffer_minutes = document.get("buffer_minutes", config.availability.buffer_minutes)
    free = calculate_availability(users, document["range_start"], document["range_end"], buffer_minutes)
    return {
        "success": True,
        "availability": {
            user_id: [slot.to_dict() for slot in slots] for user_id, slots in free.items()
        },
    }


def run_conflicts(document: dict[str, Any], config: SchedulingConfig) -> dict[str, Any]:
    overrides = document.get("options") or {}
    options = replace(config.to_conflict_options(), **overrides)
    events = [Event.from_dict(e) for e in document.get("events", [])]

    if document.get("new_event"):
        return check_new_event(Event.from_dict(document["new_event"]), events, options)

    conflicts = detect_conflicts(events, options)
    return {
        "success": True,
        "conflicts": [c.to_dict() for c in conflicts],
        "stats": get_conflict_stats(conflicts).to_dict(),
    }


def run_suggest(document: dict[str, Any], config: SchedulingConfig) -> dict[str, Any]:
    users = _load_users(document, config)
    options = config.to_suggest_options()
    preferred = document.get("preferred_times", config.suggestions.preferred_times)

    suggestions = suggest_meeting_times(
        users,
        int(document["duration_minutes"]),
        document["range_start"],
        document["range_end"],
        options,
    )
    ranked = apply_preferred_times(suggestions, preferred, options.working_hours.time_zone)
    return {
        "success": True,
        "suggestions": [s.to_dict() for s in ranked],
    }


def run_estimate(title: str, description: str | None, config: EstimatorConfig) -> dict[str, Any]:
    result = DurationEstimator(config).estimate(title, description)
    return {"success": True, **result.to_dict()}


# =============================================================================
# Subcommands
# =============================================================================

def cmd_availability(args) -> dict[str, Any]:
    return run_availability(_read_document(args.input), load_and_validate("scheduling"))


def cmd_conflicts(args) -> dict[str, Any]:
    return run_conflicts(_read_document(args.input), load_and_validate("scheduling"))


def cmd_suggest(args) -> dict[str, Any]:
    return run_suggest(_read_document(args.input), load_and_validate("scheduling"))


def cmd_estimate(args) -> dict[str, Any]:
    return run_estimate(args.title, args.description, load_and_validate("estimator"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timewise",
        description="Timewise - Availability, conflicts, meeting times and task estimates",
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show version and exit"
    )
    parser.add_argument(
        "--log-level", default=None, help="Log level (default: TIMEWISE_LOG_LEVEL or INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    availability_parser = subparsers.add_parser(
        "availability", help="Compute free slots for each user"
    )
    availability_parser.add_argument("input", help="JSON request file, or - for stdin")
    availability_parser.set_defaults(func=cmd_availability)

    conflicts_parser = subparsers.add_parser(
        "conflicts", help="Detect conflicts among events (or for one new event)"
    )
    conflicts_parser.add_argument("input", help="JSON request file, or - for stdin")
    conflicts_parser.set_defaults(func=cmd_conflicts)

    suggest_parser = subparsers.add_parser(
        "suggest", help="Suggest meeting times for a group"
    )
    suggest_parser.add_argument("input", help="JSON request file, or - for stdin")
    suggest_parser.set_defaults(func=cmd_suggest)

    estimate_parser = subparsers.add_parser(
        "estimate", help="Estimate how long a task will take"
    )
    estimate_parser.add_argument("title", help="Task title")
    estimate_parser.add_argument(
        "--description", "-d", default=None, help="Longer task description"
    )
    estimate_parser.set_defaults(func=cmd_estimate)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"timewise {__version__}")
        return 0

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(level=args.log_level)

    try:
        result = args.func(args)
    except json.JSONDecodeError as e:
        print(f"ERROR: Invalid JSON input: {e}")
        return 1
    except INPUT_ERRORS as e:
        logger.debug(f"{args.command} failed: {e}")
        print(f"ERROR: {e}")
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
