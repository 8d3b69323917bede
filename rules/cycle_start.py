"""
Cycle Start Resolution.

Bounds the infertile window at the beginning of the cycle with one of three
calibration strategies, in priority order:
1. Minus-8 - earliest historical first higher reading minus 8 days.
2. Five-Day - the first 5 days (beginners), replaced by
3. Minus-20 - shortest known cycle minus 20, when it is more conservative.
Whatever the strategy, mucus observed on or before the computed day wins.
"""

import logging
from typing import Optional, Sequence

from models import (
    CycleStartResult,
    CycleStartRule,
    DailyObservation,
    MAX_HISTORY_ENTRIES,
    UserCalibrationProfile,
)
from .observations import mucus_indicates_fertility

logger = logging.getLogger(__name__)

# "The first 5 cycle days are assumed to be infertile"
FIVE_DAY_RULE_DAYS = 5

MINUS_8_OFFSET = 8
MINUS_20_OFFSET = 20

# "at least 12 previous cycles"
MIN_CYCLES_FOR_MINUS_8 = 12

# "on or before cycle day 12"
TRANSITION_THRESHOLD_DAY = 12


def _first_fertile_mucus_day(observations: Sequence[DailyObservation], up_to_day: int) -> Optional[int]:
    days = [
        o.cycle_day for o in observations
        if o.cycle_day <= up_to_day and mucus_indicates_fertility(o)
    ]
    return min(days) if days else None


def _has_early_transition(profile: UserCalibrationProfile) -> bool:
    return any(day <= TRANSITION_THRESHOLD_DAY for day in profile.earliest_first_higher_temps)


def apply_five_day_rule(observations: Sequence[DailyObservation]) -> int:
    """Last infertile day under the 5-Day rule (0 if mucus is seen on day 1)."""
    mucus_day = _first_fertile_mucus_day(observations, FIVE_DAY_RULE_DAYS)
    if mucus_day is not None:
        return max(0, mucus_day - 1)
    return FIVE_DAY_RULE_DAYS


def can_use_five_day_rule(profile: UserCalibrationProfile) -> bool:
    """
    The 5-Day rule stops applying after 12 cycles, or as soon as a first
    higher reading has ever been on or before cycle day 12.
    """
    if profile.cycle_count >= MIN_CYCLES_FOR_MINUS_8:
        return False
    return not _has_early_transition(profile)


def apply_minus_8_rule(profile: UserCalibrationProfile) -> Optional[int]:
    """
    Last infertile day under Minus-8, or None when the history does not allow it.
    An early first higher reading forces Minus-8 even with fewer than 12 cycles.
    """
    history = profile.earliest_first_higher_temps
    if len(history) < MIN_CYCLES_FOR_MINUS_8 and not _has_early_transition(profile):
        return None
    return max(0, min(history) - MINUS_8_OFFSET)


def apply_minus_20_rule(shortest_cycle_length: int) -> int:
    return max(0, shortest_cycle_length - MINUS_20_OFFSET)


def adjust_for_mucus(last_infertile_day: int, observations: Sequence[DailyObservation]) -> int:
    """Fertility starts immediately once mucus is seen on or before the computed day."""
    mucus_day = _first_fertile_mucus_day(observations, last_infertile_day)
    if mucus_day is not None:
        return max(0, mucus_day - 1)
    return last_infertile_day


def determine_cycle_start(
    profile: UserCalibrationProfile,
    observations: Sequence[DailyObservation]
) -> CycleStartResult:
    """
    Pick the strategy and compute the start of the fertile window.
    """
    rule = CycleStartRule.FIVE_DAY
    last_infertile_day = FIVE_DAY_RULE_DAYS

    minus_8_day = apply_minus_8_rule(profile)
    if minus_8_day is not None:
        rule = CycleStartRule.MINUS_8
        last_infertile_day = minus_8_day
    elif can_use_five_day_rule(profile):
        # Minus-20 only replaces the 5-Day default when it is later;
        # early mucus is left to the override below
        if profile.shortest_cycle_length is not None:
            minus_20_day = apply_minus_20_rule(profile.shortest_cycle_length)
            if minus_20_day > last_infertile_day:
                rule = CycleStartRule.MINUS_20
                last_infertile_day = minus_20_day

    adjusted = adjust_for_mucus(last_infertile_day, observations)
    if adjusted != last_infertile_day:
        logger.debug(f"Mucus override: last infertile day {last_infertile_day} -> {adjusted}")

    logger.debug(f"Cycle start rule {rule.value}: last infertile day {adjusted}")
    return CycleStartResult(
        rule=rule,
        last_infertile_day=adjusted,
        fertility_starts_day=adjusted + 1,
        mucus_override_applied=adjusted != last_infertile_day,
    )


def update_earliest_first_higher_temp(
    profile: UserCalibrationProfile,
    first_higher_temp_day: int
) -> UserCalibrationProfile:
    """
    Record a closed cycle's first higher reading day.
    Keeps the most recent entries only and bumps the cycle count.
    """
    history = (profile.earliest_first_higher_temps + (first_higher_temp_day,))[-MAX_HISTORY_ENTRIES:]
    return profile.model_copy(update={
        "earliest_first_higher_temps": history,
        "cycle_count": profile.cycle_count + 1,
    })
