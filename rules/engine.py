"""
The Fertility Status Engine.

This module implements the root "double-check" logic.
It combines the independent evaluators into a single classification:
1. Cycle Start Resolution - is the day still inside the initial infertile window?
2. Temperature + Mucus (or Cervix) Shifts - has ovulation been confirmed twice?
3. "Whichever comes last" - the post-ovulatory infertile phase starts with the later axis.
"""

import hashlib
import json
import logging
from typing import Optional, Sequence, Tuple

from models import (
    Cycle,
    CycleMarkers,
    CyclePhase,
    CycleStartRule,
    DailyObservation,
    FertilityStatus,
    TemperatureException,
    UserCalibrationProfile,
)
from .cervix import evaluate_cervix_shift
from .cycle_start import MIN_CYCLES_FOR_MINUS_8, determine_cycle_start
from .messages import MessageKey
from .mucus import evaluate_mucus_shift
from .observations import find_observation, mucus_indicates_fertility
from .references import (
    CERVIX_RULES,
    CYCLE_START_RULES,
    FERTILITY_STATUS_RULES,
    MUCUS_RULES,
    TEMPERATURE_RULES,
)
from .temperature import evaluate_temperature_shift
from .trail import EvidenceTrail

logger = logging.getLogger(__name__)


class FertilityStatusEngine:
    """
    Main evaluation engine.
    Ingests the observations of one cycle and its context, outputs a FertilityStatus per day.
    """

    # Watchdogs: "more than three months = amenorrhea"
    LONG_CYCLE_WARNING_DAYS = 60
    AMENORRHEA_WARNING_DAYS = 90

    START_RULE_REFS = {
        CycleStartRule.FIVE_DAY: CYCLE_START_RULES["FIVE_DAY"],
        CycleStartRule.MINUS_8: CYCLE_START_RULES["MINUS_8"],
        CycleStartRule.MINUS_20: CYCLE_START_RULES["MINUS_20"],
    }

    def __init__(
        self,
        observations: Sequence[DailyObservation],
        cycle: Cycle,
        profile: UserCalibrationProfile
    ):
        self.observations: Tuple[DailyObservation, ...] = tuple(
            sorted(observations, key=lambda o: o.cycle_day)
        )
        self.cycle = cycle
        self.profile = profile

    def calculate(self, current_day: int) -> FertilityStatus:
        """
        Classify `current_day`. Pure: the same inputs always give an equal status.
        """
        trail = EvidenceTrail(self.observations)

        # 1. Watchdogs
        if current_day > self.AMENORRHEA_WARNING_DAYS:
            trail.warn(MessageKey.AMENORRHEA)
        elif current_day > self.LONG_CYCLE_WARNING_DAYS:
            trail.warn(MessageKey.LONG_CYCLE)

        # 2. Start of the fertile window
        start = determine_cycle_start(self.profile, self.observations)
        trail.apply_rule(self.START_RULE_REFS[start.rule])
        if start.rule == CycleStartRule.MINUS_8:
            if len(self.profile.earliest_first_higher_temps) >= MIN_CYCLES_FOR_MINUS_8:
                trail.apply_rule(CYCLE_START_RULES["MINUS_8_REQUIREMENT"])
            else:
                trail.apply_rule(CYCLE_START_RULES["FIVE_DAY_TRANSITION"])
        if start.mucus_override_applied:
            trail.apply_rule(CYCLE_START_RULES["MUCUS_OVERRIDES"])
        trail.record_data_point("Last infertile day", "last_infertile_day", start.last_infertile_day)

        markers = CycleMarkers(
            rule_applied=start.rule,
            last_infertile_day=start.last_infertile_day,
            fertility_starts_day=start.fertility_starts_day,
        )

        if current_day <= start.last_infertile_day:
            return self._pre_ovulation_status(trail, current_day, markers)

        # 3. Temperature shift
        temp_eval = evaluate_temperature_shift(self.observations)
        if temp_eval.cannot_evaluate:
            trail.record_data_point("Temperature evaluation", "temperature_cannot_evaluate", temp_eval.cannot_evaluate_reason)
        if temp_eval.cover_line_temp is not None:
            trail.record_data_point("Coverline", "cover_line_temp", temp_eval.cover_line_temp)

        if temp_eval.exception_used == TemperatureException.FIRST:
            trail.apply_rule(TEMPERATURE_RULES["EXCEPTION_1"])
            trail.apply_rule(TEMPERATURE_RULES["NO_COMBINED_EXCEPTIONS"])
        elif temp_eval.exception_used == TemperatureException.SECOND:
            trail.apply_rule(TEMPERATURE_RULES["EXCEPTION_2"])
            trail.apply_rule(TEMPERATURE_RULES["NO_COMBINED_EXCEPTIONS"])
        elif temp_eval.is_shift_complete:
            trail.apply_rule(TEMPERATURE_RULES["MAIN_RULE"])

        # 4. Mucus (or cervix) shift
        if self.profile.use_cervix_sign:
            second_complete, second_complete_day = self._evaluate_cervix_axis(trail)
            relapse = False
            markers = markers.model_copy(update={"mucus_shift_complete": second_complete})
        else:
            mucus_eval = evaluate_mucus_shift(self.observations)
            if mucus_eval.peak_day is not None:
                trail.apply_rule(MUCUS_RULES["PEAK_DAY"])
                trail.record_data_point("Peak day", "peak_day", mucus_eval.peak_day, cycle_day=mucus_eval.peak_day)
            if mucus_eval.is_shift_complete:
                trail.apply_rule(MUCUS_RULES["POST_PEAK_COUNT"])
            if mucus_eval.peak_quality_returned:
                trail.warn(MessageKey.PEAK_RETURNED)
                trail.apply_rule(MUCUS_RULES["PEAK_RETURN_RESTART"])
            second_complete = mucus_eval.is_shift_complete
            second_complete_day = mucus_eval.complete_day
            relapse = mucus_eval.peak_quality_returned
            markers = markers.model_copy(update={
                "peak_day": mucus_eval.peak_day,
                "mucus_shift_complete": second_complete,
            })

        markers = markers.model_copy(update={
            "first_higher_temp_day": temp_eval.first_higher_temp_day,
            "cover_line_temp": temp_eval.cover_line_temp,
            "temperature_shift_complete": temp_eval.is_shift_complete,
        })

        # 5. Double-check: both axes must be complete
        if not temp_eval.is_shift_complete or not second_complete:
            if not temp_eval.is_shift_complete:
                trail.warn(MessageKey.NO_TEMP_SHIFT)
                if relapse:
                    trail.apply_rule(MUCUS_RULES["PEAK_BEFORE_TEMP_COMPLETE"])
            if self.profile.use_cervix_sign and not second_complete:
                trail.warn(MessageKey.NO_CERVIX_SHIFT)

            logger.info(f"Day {current_day}: fertile (double-check pending)")
            return trail.fertile(CyclePhase.FERTILE, MessageKey.FERTILE_WAITING_DOUBLE_CHECK, markers)

        trail.apply_rule(FERTILITY_STATUS_RULES["DOUBLE_CHECK"])

        fertility_ends_day = self._whichever_comes_last(temp_eval.complete_day, second_complete_day)
        if temp_eval.complete_day is not None:
            trail.record_data_point("Temperature shift complete", "temperature_complete_day", temp_eval.complete_day, cycle_day=temp_eval.complete_day)
        if second_complete_day is not None:
            if self.profile.use_cervix_sign:
                trail.record_data_point("Cervix shift complete", "cervix_complete_day", second_complete_day, cycle_day=second_complete_day)
            else:
                trail.record_data_point("Mucus shift complete", "mucus_complete_day", second_complete_day, cycle_day=second_complete_day)

        if fertility_ends_day is None:
            logger.info(f"Day {current_day}: fertile (end of fertility not determinable)")
            return trail.fertile(CyclePhase.FERTILE, MessageKey.FERTILE_WAITING_DOUBLE_CHECK, markers)

        trail.record_data_point("Fertility ends", "fertility_ends_day", fertility_ends_day, cycle_day=fertility_ends_day)
        markers = markers.model_copy(update={"fertility_ends_day": fertility_ends_day})

        # 6. Infertile from the evening of the later completion day
        if current_day >= fertility_ends_day:
            trail.apply_rule(FERTILITY_STATUS_RULES["INFERTILE_EVENING"])
            trail.apply_rule(FERTILITY_STATUS_RULES["IGNORE_MUCUS_AFTER"])
            logger.info(f"Day {current_day}: infertile (post-ovulation since day {fertility_ends_day})")
            return trail.infertile(CyclePhase.POST_OVULATION, MessageKey.POST_OVULATION_INFERTILE, markers)

        logger.info(f"Day {current_day}: fertile (infertile from day {fertility_ends_day})")
        return trail.fertile(CyclePhase.FERTILE, MessageKey.FERTILE_WAITING_DOUBLE_CHECK, markers)

    def timeline(self, through_day: int) -> Tuple[FertilityStatus, ...]:
        """
        Status of every day from 1 to `through_day`, each computed from the
        observations recorded up to that day (what the user saw on that day).
        """
        statuses = []
        for day in range(1, through_day + 1):
            known = [o for o in self.observations if o.cycle_day <= day]
            statuses.append(FertilityStatusEngine(known, self.cycle, self.profile).calculate(day))
        return tuple(statuses)

    def _pre_ovulation_status(self, trail: EvidenceTrail, current_day: int, markers: CycleMarkers) -> FertilityStatus:
        """Inside the initial infertile window; the day's own mucus still wins."""
        today = find_observation(self.observations, current_day)
        # Not reached from calculate(): the mucus override already ends the
        # window the day before any non-dry mucus
        if mucus_indicates_fertility(today):
            trail.record_data_point("Mucus", "mucus", today.mucus.value, cycle_day=current_day)
            logger.info(f"Day {current_day}: fertile (mucus observed in the pre-ovulation window)")
            return trail.fertile(CyclePhase.PRE_OVULATION, MessageKey.FERTILE_MUCUS_STARTED, markers)

        logger.info(f"Day {current_day}: infertile (pre-ovulation, until day {markers.last_infertile_day})")
        return trail.infertile(CyclePhase.PRE_OVULATION, MessageKey.PRE_OVULATION_INFERTILE, markers)

    def _evaluate_cervix_axis(self, trail: EvidenceTrail) -> Tuple[bool, Optional[int]]:
        cervix_eval = evaluate_cervix_shift(self.observations)
        if cervix_eval.highest_point_day is not None:
            trail.record_data_point(
                "Cervix highest point", "cervix_highest_point_day",
                cervix_eval.highest_point_day, cycle_day=cervix_eval.highest_point_day
            )
        if cervix_eval.is_shift_complete:
            trail.apply_rule(CERVIX_RULES["CERVIX_SHIFT"])
        return cervix_eval.is_shift_complete, cervix_eval.complete_day

    @staticmethod
    def _whichever_comes_last(temperature_day: Optional[int], second_day: Optional[int]) -> Optional[int]:
        """None stands for an axis that cannot be determined (unbounded)."""
        if temperature_day is None or second_day is None:
            return None
        return max(temperature_day, second_day)


def calculate_fertility_status(
    observations: Sequence[DailyObservation],
    current_day: int,
    cycle: Cycle,
    profile: UserCalibrationProfile
) -> FertilityStatus:
    """Classify one cycle day."""
    return FertilityStatusEngine(observations, cycle, profile).calculate(current_day)


def evaluate_cycle_timeline(
    observations: Sequence[DailyObservation],
    cycle: Cycle,
    profile: UserCalibrationProfile,
    through_day: int
) -> Tuple[FertilityStatus, ...]:
    """Classify days 1..through_day of a cycle (calendar view)."""
    return FertilityStatusEngine(observations, cycle, profile).timeline(through_day)


def input_fingerprint(
    observations: Sequence[DailyObservation],
    current_day: int,
    cycle: Cycle,
    profile: UserCalibrationProfile
) -> str:
    """
    Stable digest of the inputs, usable as a memoization key by the caller.
    Observation order does not matter; values do.
    """
    payload = {
        "observations": [
            o.model_dump(mode='json')
            for o in sorted(observations, key=lambda o: o.cycle_day)
        ],
        "current_day": current_day,
        "cycle": cycle.model_dump(mode='json'),
        "profile": profile.model_dump(mode='json'),
    }
    encoded = json.dumps(payload, sort_keys=True, ensure_ascii=False).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()
