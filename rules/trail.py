"""
Evidence Trail.

This module acts as the 'Memory' of a single evaluation.
It records, in call order:
1. The protocol rules applied.
2. The data points consulted.
3. The warnings raised.
A trail lives for one call only and is frozen into the returned status.
"""

from datetime import date as date_type
from typing import List, Optional, Sequence, Union

from models import (
    BilingualText,
    CycleMarkers,
    CyclePhase,
    DailyObservation,
    DataPoint,
    FertilityStatus,
    FertilityStatusType,
    RuleReference,
)
from .messages import MessageKey, message
from .observations import find_observation


class EvidenceTrail:
    """
    Accumulates the audit trail while the engine walks through its branches.
    """

    def __init__(self, observations: Sequence[DailyObservation]):
        self._observations = observations
        self.rules_applied: List[RuleReference] = []
        self.data_points: List[DataPoint] = []
        self.warnings: List[BilingualText] = []

    def apply_rule(self, rule: RuleReference) -> None:
        self.rules_applied.append(rule)

    def record_data_point(
        self,
        label: str,
        field: str,
        value: Union[bool, int, float, str],
        cycle_day: Optional[int] = None
    ) -> None:
        """Log a fact; the date is resolved from the observation of that day when there is one."""
        date: Optional[date_type] = None
        if cycle_day is not None:
            observation = find_observation(self._observations, cycle_day)
            if observation is not None:
                date = observation.date
        self.data_points.append(DataPoint(
            label=label,
            cycle_day=cycle_day,
            field=field,
            value=value,
            date=date,
        ))

    def warn(self, key: MessageKey) -> None:
        self.warnings.append(message(key))

    # --- Result Builders ---

    def conclude(
        self,
        status: FertilityStatusType,
        phase: CyclePhase,
        explanation: MessageKey,
        markers: CycleMarkers
    ) -> FertilityStatus:
        """Freeze the trail into an immutable status."""
        return FertilityStatus(
            status=status,
            phase=phase,
            rules_applied=tuple(self.rules_applied),
            data_points_used=tuple(self.data_points),
            explanation=message(explanation),
            warnings=tuple(self.warnings),
            markers=markers,
        )

    def fertile(self, phase: CyclePhase, explanation: MessageKey, markers: CycleMarkers) -> FertilityStatus:
        return self.conclude(FertilityStatusType.FERTILE, phase, explanation, markers)

    def infertile(self, phase: CyclePhase, explanation: MessageKey, markers: CycleMarkers) -> FertilityStatus:
        return self.conclude(FertilityStatusType.INFERTILE, phase, explanation, markers)
