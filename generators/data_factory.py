"""
Synthetic cycle generator for the Fertility Rule Engine.
STRATEGY: textbook-shaped cycles (bleeding, dry days, mucus build-up, thermal shift)
so demos and tests run without any recorded user data.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from models import (
    Cycle,
    DailyObservation,
    MucusCategory,
    UserCalibrationProfile,
)

logger = logging.getLogger(__name__)

# Every 6-day baseline window tops out at 36.40, so the coverline is stable
LOW_TEMP_PATTERN = (36.30, 36.40, 36.35, 36.38, 36.32, 36.40)
# Only the 3rd higher reading clears the 36.40 coverline by 0.2 (main rule)
HIGH_TEMP_PATTERN = (36.50, 36.55, 36.65)

# Mucus build-up towards the peak, best quality last
BUILD_UP = (MucusCategory.NOTHING, MucusCategory.MOIST, MucusCategory.S, MucusCategory.S_PLUS)
# Decline after the peak
DECLINE = (MucusCategory.S, MucusCategory.MOIST, MucusCategory.DRY)


class CycleFactory:
    """
    Builds complete, internally consistent cycles.
    Defaults give a 28-day cycle: peak day 14, first higher reading on day 16.
    """

    def __init__(self, start_date: Optional[date] = None):
        self.start_date = start_date or date(2025, 1, 1)

    def generate_observations(
        self,
        cycle_length: int = 28,
        bleeding_days: int = 5,
        mucus_onset_day: int = 9,
        peak_day: int = 14,
        first_higher_temp_day: int = 16,
        excluded_days: Sequence[int] = (),
        missing_temperature_days: Sequence[int] = ()
    ) -> List[DailyObservation]:
        """
        One observation per day.
        Excluded days keep a (disturbed) reading flagged as excluded; missing days have none.
        """
        if not (bleeding_days < mucus_onset_day <= peak_day < cycle_length):
            raise ValueError("Expected bleeding_days < mucus_onset_day <= peak_day < cycle_length")

        observations = []
        low_index = 0
        high_index = 0

        for day in range(1, cycle_length + 1):
            # --- Temperature ---
            if day < first_higher_temp_day:
                temperature = LOW_TEMP_PATTERN[low_index % len(LOW_TEMP_PATTERN)]
                low_index += 1
            else:
                temperature = HIGH_TEMP_PATTERN[high_index % len(HIGH_TEMP_PATTERN)]
                high_index += 1

            excluded = day in excluded_days
            if excluded:
                temperature = round(temperature + 0.4, 2)  # late night, illness...
            if day in missing_temperature_days:
                temperature = None

            observations.append(DailyObservation(
                date=self.start_date + timedelta(days=day - 1),
                cycle_day=day,
                temperature=temperature,
                temperature_time="06:30" if temperature is not None else None,
                temperature_excluded=excluded and temperature is not None,
                temperature_disturbance="Late night" if excluded else None,
                mucus=self._mucus_for_day(day, bleeding_days, mucus_onset_day, peak_day),
                bleeding_intensity=self._bleeding_for_day(day, bleeding_days),
            ))

        logger.info(
            f"Generated {len(observations)} observations "
            f"(peak day {peak_day}, first higher reading day {first_higher_temp_day})"
        )
        return observations

    def generate_cycle(self, cycle_number: int = 1, cycle_id: Optional[str] = None) -> Cycle:
        return Cycle(
            id=cycle_id or f"cycle_{cycle_number:03d}",
            start_date=self.start_date,
            is_first_12_cycles=cycle_number <= 12,
            cycle_number=cycle_number,
        )

    def generate_profile(
        self,
        history: Sequence[int] = (),
        shortest_cycle_length: Optional[int] = None,
        use_cervix_sign: bool = False
    ) -> UserCalibrationProfile:
        return UserCalibrationProfile(
            earliest_first_higher_temps=tuple(history),
            shortest_cycle_length=shortest_cycle_length,
            use_cervix_sign=use_cervix_sign,
            cycle_count=len(history),
        )

    def generate_dataset(self, **observation_options) -> Tuple[UserCalibrationProfile, Cycle, List[DailyObservation]]:
        """Profile, cycle and observations for a new user."""
        return self.generate_profile(), self.generate_cycle(), self.generate_observations(**observation_options)

    @staticmethod
    def to_json_dict(
        profile: UserCalibrationProfile,
        cycle: Cycle,
        observations: Sequence[DailyObservation]
    ) -> Dict:
        return {
            "profile": profile.model_dump(mode='json'),
            "cycle": cycle.model_dump(mode='json'),
            "observations": [o.model_dump(mode='json') for o in observations],
        }

    @staticmethod
    def _bleeding_for_day(day: int, bleeding_days: int) -> int:
        if day > bleeding_days:
            return 0
        return 3 if day <= 2 else (2 if day < bleeding_days else 1)

    @staticmethod
    def _mucus_for_day(day: int, bleeding_days: int, mucus_onset_day: int, peak_day: int) -> Optional[MucusCategory]:
        if day <= bleeding_days:
            return None  # not observable during the period
        if day < mucus_onset_day:
            return MucusCategory.DRY
        if day <= peak_day:
            # Best quality is reached on the peak day and held until it
            steps_before_peak = peak_day - day
            return BUILD_UP[max(0, len(BUILD_UP) - 1 - steps_before_peak)]
        after = day - peak_day - 1
        return DECLINE[min(after, len(DECLINE) - 1)]
