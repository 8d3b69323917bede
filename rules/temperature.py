"""
Temperature Shift Evaluation.

This module answers the question: "Has the post-ovulatory thermal shift happened?"
It slides a 6-reading baseline over the valid readings and checks the readings
that follow it against three rules, tried in fixed priority order:
1. Main rule - 3 readings above the coverline, the 3rd at least 0.2°C above.
2. Exception 1 - the 3rd is not 0.2°C above, a 4th reading above the coverline is required.
3. Exception 2 - one of the 3 readings falls on/below the coverline and is ignored.
The two exceptions are never combined.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from models import DailyObservation, TemperatureEvaluation, TemperatureException
from .observations import TemperatureReading, get_valid_temperatures

logger = logging.getLogger(__name__)

# 2/10 °C above the coverline for the 3rd higher reading
MIN_THIRD_TEMP_ELEVATION = 0.2

# "higher than the six previous readings"
LOW_TEMP_COUNT = 6

# "three consecutive readings"
HIGH_TEMP_COUNT = 3


def _hundredths(value: float) -> int:
    """Readings carry 2 decimals; compare them as integers to avoid float drift."""
    return round(value * 100)


def _above(temp: float, cover_line: float) -> bool:
    return _hundredths(temp) > _hundredths(cover_line)


def _high_enough(temp: float, cover_line: float) -> bool:
    return _hundredths(temp) >= _hundredths(cover_line) + _hundredths(MIN_THIRD_TEMP_ELEVATION)


def _complete(cover_line: float, days: Sequence[int], exception: TemperatureException) -> TemperatureEvaluation:
    return TemperatureEvaluation(
        is_shift_complete=True,
        cover_line_temp=cover_line,
        higher_temp_days=tuple(days),
        exception_used=exception,
    )


# --- Window Rules ---
# Each rule returns a completed evaluation, or None if it does not apply.

def _check_main_rule(cover_line: float, temps: List[TemperatureReading], start: int) -> Optional[TemperatureEvaluation]:
    high = temps[start:start + HIGH_TEMP_COUNT]
    if len(high) < HIGH_TEMP_COUNT:
        return None
    if not all(_above(t.temp, cover_line) for t in high):
        return None
    if not _high_enough(high[2].temp, cover_line):
        return None
    return _complete(cover_line, [t.day for t in high], TemperatureException.NONE)


def _check_first_exception(cover_line: float, temps: List[TemperatureReading], start: int) -> Optional[TemperatureEvaluation]:
    high = temps[start:start + HIGH_TEMP_COUNT + 1]
    if len(high) < HIGH_TEMP_COUNT + 1:
        return None
    if not all(_above(t.temp, cover_line) for t in high[:HIGH_TEMP_COUNT]):
        return None
    # A high enough 3rd reading belongs to the main rule
    if _high_enough(high[2].temp, cover_line):
        return None
    # No 0.2 threshold on the 4th reading
    if not _above(high[3].temp, cover_line):
        return None
    return _complete(cover_line, [t.day for t in high], TemperatureException.FIRST)


def _check_second_exception(cover_line: float, temps: List[TemperatureReading], start: int) -> Optional[TemperatureEvaluation]:
    high = temps[start:start + HIGH_TEMP_COUNT]
    if len(high) < HIGH_TEMP_COUNT:
        return None
    above = [t for t in high if _above(t.temp, cover_line)]
    if len(above) != HIGH_TEMP_COUNT - 1:
        return None
    if not _high_enough(high[2].temp, cover_line):
        return None
    # The reading on/below the coverline is left out
    return _complete(cover_line, [t.day for t in above], TemperatureException.SECOND)


WindowRule = Callable[[float, List[TemperatureReading], int], Optional[TemperatureEvaluation]]

# Priority order matters: an exception is only ever tried after the main rule failed.
WINDOW_RULES: Tuple[WindowRule, ...] = (
    _check_main_rule,
    _check_first_exception,
    _check_second_exception,
)


def evaluate_window(temps: List[TemperatureReading], start: int) -> Tuple[float, Optional[TemperatureEvaluation]]:
    """
    Evaluate the readings following the baseline that ends right before `start`.
    Returns the coverline and the first rule result that confirms a shift.
    """
    baseline = temps[start - LOW_TEMP_COUNT:start]
    cover_line = max(t.temp for t in baseline)

    for rule in WINDOW_RULES:
        result = rule(cover_line, temps, start)
        if result is not None:
            return cover_line, result
    return cover_line, None


def evaluate_temperature_shift(observations: Sequence[DailyObservation]) -> TemperatureEvaluation:
    """
    Master evaluation function.
    Windows are scanned in increasing day order; the first matching window wins.
    """
    temps = get_valid_temperatures(observations)

    if len(temps) < LOW_TEMP_COUNT + HIGH_TEMP_COUNT:
        return TemperatureEvaluation(
            cannot_evaluate=True,
            cannot_evaluate_reason=(
                f"Not enough temperature readings ({len(temps)}/{LOW_TEMP_COUNT + HIGH_TEMP_COUNT})"
            ),
        )

    for start in range(LOW_TEMP_COUNT, len(temps) - HIGH_TEMP_COUNT + 1):
        cover_line, result = evaluate_window(temps, start)
        if result is not None:
            logger.debug(
                f"Temperature shift confirmed on days {list(result.higher_temp_days)} "
                f"(coverline {cover_line}, exception {result.exception_used.value})"
            )
            return result

    return TemperatureEvaluation()
