"""
Daily observation data models for the Fertility Rule Engine.

This module defines the 'Input' of the engine:
one self-recorded row per cycle day (temperature, mucus, bleeding, cervix).
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict
from datetime import date as date_type


class MucusCategory(str, Enum):
    """
    Cervical mucus classification.
    Quality ascends d < ø < m < S < S+ (see MUCUS_QUALITY_ORDER).
    """
    DRY = "d"            # dry, rough, itching
    NOTHING = "ø"        # nothing felt, no moistness
    MOIST = "m"          # moist, nothing visible
    S = "S"              # thick, whitish, creamy
    S_PLUS = "S+"        # slippery, translucent, stretchy

    @property
    def rank(self) -> int:
        """Position of this category in the quality order."""
        return MUCUS_QUALITY_ORDER[self]


# Explicit ordering; the string values must never be compared lexically.
MUCUS_QUALITY_ORDER = {
    MucusCategory.DRY: 0,
    MucusCategory.NOTHING: 1,
    MucusCategory.MOIST: 2,
    MucusCategory.S: 3,
    MucusCategory.S_PLUS: 4,
}


class TemperatureMethod(str, Enum):
    """Where the basal temperature was taken."""
    ORAL = "oral"
    RECTAL = "rectal"
    VAGINAL = "vaginal"


class CervixPosition(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CervixOpening(str, Enum):
    CLOSED = "closed"
    PARTIAL = "partial"
    OPEN = "open"


class CervixFirmness(str, Enum):
    HARD = "hard"
    SOFT = "soft"


class DailyObservation(BaseModel):
    """
    A single day of self-recorded signals.
    Created and stored by the caller; the engine only reads it.
    """

    # --- Core Identity ---
    date: date_type = Field(description="Calendar date of the observation")
    cycle_day: int = Field(ge=1, description="1-indexed day within the cycle")

    # --- Temperature ---
    temperature: Optional[float] = Field(default=None, description="Basal body temperature in °C")
    temperature_time: Optional[str] = Field(default=None, description="Measurement time (HH:MM)")
    temperature_method: TemperatureMethod = Field(default=TemperatureMethod.ORAL)
    temperature_disturbance: Optional[str] = Field(
        default=None,
        description="Reason the reading may be disturbed (late night, illness...)"
    )
    temperature_excluded: bool = Field(
        default=False,
        description="If True, the reading is bracketed and never used for evaluation"
    )

    # --- Cervical Mucus ---
    mucus: Optional[MucusCategory] = Field(default=None, description="Mucus category of the day")
    mucus_sensation: Optional[str] = Field(default=None)
    mucus_appearance: Optional[str] = Field(default=None)

    # --- Bleeding ---
    bleeding_intensity: Optional[int] = Field(
        default=None,
        ge=0,
        le=3,
        description="0=none, 1=spotting, 2=normal, 3=heavy"
    )

    # --- Cervix (alternative to mucus) ---
    cervix_position: Optional[CervixPosition] = Field(default=None)
    cervix_opening: Optional[CervixOpening] = Field(default=None)
    cervix_firmness: Optional[CervixFirmness] = Field(default=None)

    # --- Secondary symptoms (informative only) ---
    mittelschmerz: bool = Field(default=False)
    breast_symptoms: bool = Field(default=False)

    notes: str = Field(default="", description="Free-text note")

    @property
    def has_valid_temperature(self) -> bool:
        """A reading that may take part in coverline/elevation computation."""
        return self.temperature is not None and not self.temperature_excluded

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "date": "2025-01-14",
            "cycle_day": 14,
            "temperature": 36.65,
            "temperature_time": "06:30",
            "temperature_method": "oral",
            "temperature_excluded": False,
            "mucus": "S+",
            "bleeding_intensity": 0,
            "notes": ""
        }
    })
