"""Timewise Test Suite

This package contains all tests for the timewise scheduling engines.

Test organization:
- unit/: Unit tests for individual modules
  - calendar/: Interval model, availability, conflicts, meeting suggestions
  - tasks/: Duration estimator and its rule tables
  - config/: YAML-backed configuration models
  - test_cli.py: The `timewise` command line

Running tests:
    # All tests
    pytest

    # Specific area
    pytest tests/unit/calendar/
"""
