"""
Rule Engine package for the sympto-thermal method.

The evaluators are deterministic pure functions; `calculate_fertility_status`
is the single entry point callers need.

Example:
    >>> from rules import calculate_fertility_status
    >>> status = calculate_fertility_status(observations, 16, cycle, profile)
    >>> status.status, status.explanation.en
"""

from .observations import (
    TemperatureReading,
    MucusReading,
    get_valid_temperatures,
    get_mucus_observations,
    compare_mucus_quality,
    find_highest_quality,
    mucus_indicates_fertility,
)
from .temperature import evaluate_temperature_shift
from .mucus import evaluate_mucus_shift, find_peak_day
from .cervix import evaluate_cervix_shift
from .cycle_start import (
    apply_five_day_rule,
    apply_minus_8_rule,
    apply_minus_20_rule,
    adjust_for_mucus,
    can_use_five_day_rule,
    determine_cycle_start,
    update_earliest_first_higher_temp,
)
from .messages import MessageKey, message
from .references import (
    TEMPERATURE_RULES,
    MUCUS_RULES,
    CERVIX_RULES,
    CYCLE_START_RULES,
    FERTILITY_STATUS_RULES,
)
from .engine import (
    FertilityStatusEngine,
    calculate_fertility_status,
    evaluate_cycle_timeline,
    input_fingerprint,
)

__all__ = [
    # Accessors
    "TemperatureReading",
    "MucusReading",
    "get_valid_temperatures",
    "get_mucus_observations",
    "compare_mucus_quality",
    "find_highest_quality",
    "mucus_indicates_fertility",
    # Evaluators
    "evaluate_temperature_shift",
    "evaluate_mucus_shift",
    "find_peak_day",
    "evaluate_cervix_shift",
    # Cycle start
    "apply_five_day_rule",
    "apply_minus_8_rule",
    "apply_minus_20_rule",
    "adjust_for_mucus",
    "can_use_five_day_rule",
    "determine_cycle_start",
    "update_earliest_first_higher_temp",
    # Messages & references
    "MessageKey",
    "message",
    "TEMPERATURE_RULES",
    "MUCUS_RULES",
    "CERVIX_RULES",
    "CYCLE_START_RULES",
    "FERTILITY_STATUS_RULES",
    # Engine
    "FertilityStatusEngine",
    "calculate_fertility_status",
    "evaluate_cycle_timeline",
    "input_fingerprint",
]
