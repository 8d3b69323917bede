"""
Evaluation result models for the Fertility Rule Engine.

This module defines the 'Output' of the engine. Every result is frozen and
built fresh per call, so two evaluations of the same inputs compare equal.
"""

from enum import Enum
from typing import Optional, Tuple, Union
from pydantic import BaseModel, Field, ConfigDict
from datetime import date as date_type

from .cycle import CycleStartRule, Locale


class TemperatureException(str, Enum):
    """Which relaxation of the main temperature rule confirmed the shift."""
    NONE = "none"
    FIRST = "first"      # 4th reading required
    SECOND = "second"    # one reading on/below the coverline ignored


class FertilityStatusType(str, Enum):
    FERTILE = "fertile"
    INFERTILE = "infertile"
    INDETERMINATE = "indeterminate"


class CyclePhase(str, Enum):
    PRE_OVULATION = "pre-ovulation"
    FERTILE = "fertile"
    POST_OVULATION = "post-ovulation"


class BilingualText(BaseModel):
    """A message in every supported locale; the caller picks one."""
    fr: str
    en: str

    def for_locale(self, locale: Locale) -> str:
        return self.fr if Locale(locale) == Locale.FR else self.en

    model_config = ConfigDict(frozen=True)


class RuleReference(BaseModel):
    """Pointer to the protocol rule that was applied (audit trail)."""
    rule_id: str
    rule_name: str
    source_line_start: int = Field(description="First line of the rule in the protocol handbook")
    source_line_end: int

    model_config = ConfigDict(frozen=True)


class DataPoint(BaseModel):
    """A named fact consumed by a decision."""
    label: str = Field(description="Human-readable name")
    cycle_day: Optional[int] = Field(default=None, description="Cycle day the fact refers to")
    field: str = Field(description="Machine name of the fact")
    value: Union[bool, int, float, str]
    date: Optional[date_type] = Field(default=None)

    model_config = ConfigDict(frozen=True)


class TemperatureEvaluation(BaseModel):
    """Result of the temperature shift evaluation."""
    is_shift_complete: bool = False
    cover_line_temp: Optional[float] = None
    higher_temp_days: Tuple[int, ...] = Field(
        default=(),
        description="Elevated days recorded for the matching window (3 or 4, or 2 for exception 2)"
    )
    exception_used: TemperatureException = TemperatureException.NONE

    cannot_evaluate: bool = False
    cannot_evaluate_reason: Optional[str] = None

    @property
    def first_higher_temp_day(self) -> Optional[int]:
        if not self.is_shift_complete or not self.higher_temp_days:
            return None
        return self.higher_temp_days[0]

    @property
    def complete_day(self) -> Optional[int]:
        """
        Day the temperature shift is confirmed: the 3rd elevated reading,
        or the 4th when exception 1 was used. With exception 2 the dipped
        reading is not recorded, so the last recorded day is the 3rd by position.
        """
        if not self.is_shift_complete or not self.higher_temp_days:
            return None
        return self.higher_temp_days[-1]

    model_config = ConfigDict(frozen=True)


class MucusEvaluation(BaseModel):
    """Result of the cervical mucus shift evaluation."""
    peak_day: Optional[int] = None
    is_shift_complete: bool = False
    post_peak_count: int = Field(default=0, ge=0, le=3)
    peak_quality_returned: bool = False

    @property
    def complete_day(self) -> Optional[int]:
        """Evening of P+3."""
        if not self.is_shift_complete or self.peak_day is None:
            return None
        return self.peak_day + 3

    model_config = ConfigDict(frozen=True)


class CervixEvaluation(BaseModel):
    """Result of the cervix shift evaluation."""
    highest_point_day: Optional[int] = None
    is_shift_complete: bool = False
    closed_hard_days: Tuple[int, ...] = Field(default=(), description="Closed and hard days after the highest point (max 3)")

    @property
    def complete_day(self) -> Optional[int]:
        if not self.is_shift_complete:
            return None
        return self.closed_hard_days[-1]

    model_config = ConfigDict(frozen=True)


class CycleStartResult(BaseModel):
    """Bounds of the infertile window at the start of the cycle."""
    rule: CycleStartRule
    last_infertile_day: int = Field(ge=0)
    fertility_starts_day: int = Field(ge=1)
    mucus_override_applied: bool = False

    model_config = ConfigDict(frozen=True)


class CycleMarkers(BaseModel):
    """Markers computed for the cycle; persisting them is up to the caller."""
    rule_applied: CycleStartRule
    last_infertile_day: int
    fertility_starts_day: int
    peak_day: Optional[int] = None
    first_higher_temp_day: Optional[int] = None
    cover_line_temp: Optional[float] = None
    temperature_shift_complete: bool = False
    mucus_shift_complete: bool = False
    fertility_ends_day: Optional[int] = None

    model_config = ConfigDict(frozen=True)


class FertilityStatus(BaseModel):
    """
    Final classification of a cycle day.
    Carries the full audit trail in the order rules were consulted.
    """
    status: FertilityStatusType
    phase: CyclePhase

    # --- Audit Trail ---
    rules_applied: Tuple[RuleReference, ...] = ()
    data_points_used: Tuple[DataPoint, ...] = ()

    explanation: BilingualText
    warnings: Tuple[BilingualText, ...] = ()

    markers: CycleMarkers

    @property
    def is_fertile(self) -> bool:
        return self.status == FertilityStatusType.FERTILE

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "status": "infertile",
            "phase": "post-ovulation",
            "rules_applied": [
                {"rule_id": "FERT_DOUBLE_CHECK", "rule_name": "Double-check: whichever comes last",
                 "source_line_start": 2843, "source_line_end": 2846}
            ],
            "data_points_used": [
                {"label": "Coverline", "cycle_day": None, "field": "cover_line_temp", "value": 36.4}
            ],
            "explanation": {"fr": "Période infertile après ovulation confirmée",
                            "en": "Infertile period after confirmed ovulation"},
            "warnings": []
        }
    })
