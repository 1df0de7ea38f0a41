"""
Scheduling limits and defaults shared by the filler, validator and API.
"""

from typing import Optional

from .types import EmploymentType


MAX_WORK_DAYS_PER_WEEK = 3
PART_TIME_MAX_WORK_DAYS_PER_WEEK = 2
PRN_MAX_WORK_DAYS_PER_WEEK = 1

MIN_SHIFT_COVERAGE_PER_DAY = 3
MAX_SHIFT_COVERAGE_PER_DAY = 5

SOFT_NON_WORKS_DAY_PENALTY = 25

NO_ELIGIBLE_CANDIDATES_REASON = "no_eligible_candidates_due_to_constraints"

# Statuses that occupy a coverage slot and count toward weekly workload
COUNTING_STATUSES = frozenset({"scheduled", "on_call"})


def default_weekly_limit(employment_type) -> int:
    value = getattr(employment_type, "value", employment_type)
    if value == EmploymentType.PART_TIME.value:
        return PART_TIME_MAX_WORK_DAYS_PER_WEEK
    if value == EmploymentType.PRN.value:
        return PRN_MAX_WORK_DAYS_PER_WEEK
    return MAX_WORK_DAYS_PER_WEEK


def sanitize_weekly_limit(value: Optional[int], fallback: int = MAX_WORK_DAYS_PER_WEEK) -> int:
    """Accept whole-number limits 1..7; anything else falls back."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    if value != value or value in (float("inf"), float("-inf")):
        return fallback
    rounded = int(value)
    if rounded < 1 or rounded > 7:
        return fallback
    return rounded
