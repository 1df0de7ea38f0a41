"""
Recurring weekly work patterns.
Normalizes raw pattern rows and decides whether a pattern permits a date.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .constants import SOFT_NON_WORKS_DAY_PENALTY
from .dates import DateLike, dow_index, parse_iso_date, weekend_saturday
from .types import (
    EligibilityReason,
    OverrideShiftType,
    ShiftPreference,
    WeekendRotation,
    WorkPattern,
    WorksDowMode,
)


@dataclass
class PatternDecision:
    allowed: bool
    reason: EligibilityReason
    penalty: int = 0


def _field(raw: Any, name: str, default: Any = None) -> Any:
    if isinstance(raw, dict):
        return raw.get(name, default)
    return getattr(raw, name, default)


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def normalize_dow_values(values: Optional[Iterable[Any]]) -> list[int]:
    """Deduplicated, sorted weekday indices in [0, 6]; junk is dropped."""
    if values is None or isinstance(values, (str, bytes, dict)):
        return []
    try:
        items = list(values)
    except TypeError:
        return []

    result = set()
    for value in items:
        if isinstance(value, bool):
            continue
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        elif isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                continue
        if isinstance(value, int) and 0 <= value <= 6:
            result.add(value)
    return sorted(result)


def normalize_work_pattern(raw: Any) -> WorkPattern:
    """
    Sanitize a raw pattern (mapping or row object) into canonical form.

    Unknown rotation/mode values degrade to 'none'/'hard', unknown shift
    preferences to 'either'. Never raises.
    """
    rotation = _enum_value(_field(raw, "weekend_rotation"))
    mode = _enum_value(_field(raw, "works_dow_mode"))
    preference = _enum_value(_field(raw, "shift_preference"))

    return WorkPattern(
        therapist_id=_field(raw, "therapist_id"),
        works_dow=normalize_dow_values(_field(raw, "works_dow")),
        offs_dow=normalize_dow_values(_field(raw, "offs_dow")),
        weekend_rotation=(
            WeekendRotation.EVERY_OTHER
            if rotation == WeekendRotation.EVERY_OTHER.value
            else WeekendRotation.NONE
        ),
        weekend_anchor_date=parse_iso_date(_field(raw, "weekend_anchor_date")),
        works_dow_mode=WorksDowMode.SOFT if mode == WorksDowMode.SOFT.value else WorksDowMode.HARD,
        shift_preference=(
            ShiftPreference(preference)
            if isinstance(preference, str) and preference in {p.value for p in ShiftPreference}
            else ShiftPreference.EITHER
        ),
    )


def is_weekend_on(pattern: WorkPattern, on_date: DateLike) -> bool:
    """
    Whether an alternating-weekend pattern works the weekend containing on_date.

    Weekdays and non-rotating patterns are always on. Weekends are on when their
    Saturday is a multiple of 14 days from the anchor's Saturday; a missing or
    weekday anchor turns every weekend off.
    """
    saturday = weekend_saturday(on_date)
    if saturday is None:
        return True
    if pattern.weekend_rotation != WeekendRotation.EVERY_OTHER:
        return True

    anchor_saturday = weekend_saturday(pattern.weekend_anchor_date)
    if anchor_saturday is None:
        return False

    return (saturday - anchor_saturday).days % 14 == 0


def is_allowed_by_pattern(pattern: WorkPattern, on_date: DateLike) -> PatternDecision:
    weekday = dow_index(on_date)
    if weekday is None:
        return PatternDecision(False, EligibilityReason.BLOCKED_OFFS_DOW)

    if weekday in pattern.offs_dow:
        return PatternDecision(False, EligibilityReason.BLOCKED_OFFS_DOW)

    if (
        weekend_saturday(on_date) is not None
        and pattern.weekend_rotation == WeekendRotation.EVERY_OTHER
        and not is_weekend_on(pattern, on_date)
    ):
        return PatternDecision(False, EligibilityReason.BLOCKED_EVERY_OTHER_WEEKEND)

    in_works_dow = weekday in pattern.works_dow
    if pattern.works_dow_mode == WorksDowMode.HARD:
        if not pattern.works_dow or in_works_dow:
            return PatternDecision(True, EligibilityReason.ALLOWED)
        return PatternDecision(False, EligibilityReason.BLOCKED_OUTSIDE_WORKS_DOW_HARD)

    if pattern.works_dow and not in_works_dow:
        return PatternDecision(True, EligibilityReason.SOFT_OUTSIDE_WORKS_DOW, SOFT_NON_WORKS_DAY_PENALTY)

    return PatternDecision(True, EligibilityReason.ALLOWED)


def shift_type_matches(override_shift_type: Any, shift_type: Any) -> bool:
    """An override for 'both' covers day and night."""
    override_value = _enum_value(override_shift_type)
    return override_value == OverrideShiftType.BOTH.value or override_value == _enum_value(shift_type)
