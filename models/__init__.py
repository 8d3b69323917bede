"""
Data models package for the Fertility Rule Engine.

This package exports the three pillars of the data architecture:
1. Input (DailyObservation, MucusCategory)
2. Context (Cycle, UserCalibrationProfile)
3. Output (evaluations and FertilityStatus)
"""

from .observation import (
    DailyObservation,
    MucusCategory,
    MUCUS_QUALITY_ORDER,
    TemperatureMethod,
    CervixPosition,
    CervixOpening,
    CervixFirmness
)

from .cycle import (
    Cycle,
    CycleStartRule,
    Locale,
    UserCalibrationProfile,
    MAX_HISTORY_ENTRIES
)

from .evaluation import (
    BilingualText,
    CervixEvaluation,
    CycleMarkers,
    CyclePhase,
    CycleStartResult,
    DataPoint,
    FertilityStatus,
    FertilityStatusType,
    MucusEvaluation,
    RuleReference,
    TemperatureEvaluation,
    TemperatureException
)

__all__ = [
    # --- Input Models ---
    "DailyObservation",
    "MucusCategory",
    "MUCUS_QUALITY_ORDER",
    "TemperatureMethod",
    "CervixPosition",
    "CervixOpening",
    "CervixFirmness",

    # --- Context Models ---
    "Cycle",
    "CycleStartRule",
    "Locale",
    "UserCalibrationProfile",
    "MAX_HISTORY_ENTRIES",

    # --- Output Models ---
    "BilingualText",
    "CervixEvaluation",
    "CycleMarkers",
    "CyclePhase",
    "CycleStartResult",
    "DataPoint",
    "FertilityStatus",
    "FertilityStatusType",
    "MucusEvaluation",
    "RuleReference",
    "TemperatureEvaluation",
    "TemperatureException",
]
