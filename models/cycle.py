"""
Cycle and calibration profile models for the Fertility Rule Engine.

This module defines the 'Context' the engine reads alongside observations:
1. The cycle record (owned and persisted by the caller)
2. The user calibration profile (history that drives the cycle start rules)
"""

from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING
from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import date

from .observation import TemperatureMethod

if TYPE_CHECKING:
    from .evaluation import CycleMarkers


class CycleStartRule(str, Enum):
    """Strategy bounding the infertile window at the start of the cycle."""
    FIVE_DAY = "five-day"
    MINUS_8 = "minus-8"
    MINUS_20 = "minus-20"


class Locale(str, Enum):
    """Languages carried by every message in the evidence trail."""
    FR = "fr"
    EN = "en"


# Rolling window kept by the caller for the Minus-8 history
MAX_HISTORY_ENTRIES = 12


class Cycle(BaseModel):
    """
    A menstrual cycle as persisted by the caller.
    The engine never mutates it; computed markers are returned in the status.
    """
    id: str = Field(description="Unique identifier")
    start_date: date = Field(description="Date of cycle day 1")
    end_date: Optional[date] = Field(default=None, description="None while the cycle is running")

    # --- Computed markers (once known) ---
    peak_day: Optional[int] = Field(default=None, ge=1)
    first_higher_temp_day: Optional[int] = Field(default=None, ge=1)
    temperature_shift_complete: bool = Field(default=False)
    mucus_shift_complete: bool = Field(default=False)

    # --- Cycle start ---
    rule_applied: CycleStartRule = Field(default=CycleStartRule.FIVE_DAY)
    last_infertile_day: Optional[int] = Field(default=None, ge=0)

    is_first_12_cycles: bool = Field(default=True, description="Learning mode")
    cycle_number: int = Field(default=1, ge=1, description="Sequence number in the user's history")

    def with_markers(self, markers: "CycleMarkers") -> "Cycle":
        """Return a copy of this cycle carrying freshly computed markers."""
        return self.model_copy(update={
            "peak_day": markers.peak_day,
            "first_higher_temp_day": markers.first_higher_temp_day,
            "temperature_shift_complete": markers.temperature_shift_complete,
            "mucus_shift_complete": markers.mucus_shift_complete,
            "rule_applied": markers.rule_applied,
            "last_infertile_day": markers.last_infertile_day,
        })

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": "cycle_2025_01",
            "start_date": "2025-01-01",
            "end_date": None,
            "rule_applied": "five-day",
            "is_first_12_cycles": True,
            "cycle_number": 3
        }
    })


class UserCalibrationProfile(BaseModel):
    """
    Per-user calibration history.
    Updated by the caller between cycles (see update_earliest_first_higher_temp).
    """
    language: Locale = Field(default=Locale.FR)
    temperature_method: TemperatureMethod = Field(default=TemperatureMethod.ORAL)
    use_cervix_sign: bool = Field(
        default=False,
        description="If True, the cervix sign replaces mucus in the double-check"
    )

    # Minus-8 input: cycle day of the earliest first higher temperature, per past cycle
    earliest_first_higher_temps: Tuple[int, ...] = Field(default=())

    # Minus-20 input
    shortest_cycle_length: Optional[int] = Field(default=None, ge=1)

    cycle_count: int = Field(default=0, ge=0, description="Completed cycles recorded so far")

    @field_validator('earliest_first_higher_temps')
    @classmethod
    def validate_history_window(cls, v):
        """The caller keeps a rolling window of the most recent cycles."""
        if len(v) > MAX_HISTORY_ENTRIES:
            raise ValueError(f"History cannot exceed {MAX_HISTORY_ENTRIES} entries")
        if any(day < 1 for day in v):
            raise ValueError("History entries must be positive cycle days")
        return v

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "language": "en",
            "temperature_method": "oral",
            "use_cervix_sign": False,
            "earliest_first_higher_temps": [15, 14, 16],
            "shortest_cycle_length": 27,
            "cycle_count": 3
        }
    })
