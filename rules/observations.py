"""
Observation accessors.

Pure filters over the day rows of a cycle. Every evaluator works on these
extracted readings, never on the raw observations.
"""

from typing import List, NamedTuple, Optional, Sequence

from models import DailyObservation, MucusCategory


class TemperatureReading(NamedTuple):
    day: int
    temp: float


class MucusReading(NamedTuple):
    day: int
    mucus: MucusCategory


def get_valid_temperatures(observations: Sequence[DailyObservation]) -> List[TemperatureReading]:
    """Readings with a value that are not excluded, sorted by cycle day."""
    readings = [
        TemperatureReading(o.cycle_day, o.temperature)
        for o in observations
        if o.has_valid_temperature
    ]
    readings.sort(key=lambda r: r.day)
    return readings


def get_mucus_observations(observations: Sequence[DailyObservation]) -> List[MucusReading]:
    """Days with a recorded mucus category, sorted by cycle day."""
    readings = [
        MucusReading(o.cycle_day, o.mucus)
        for o in observations
        if o.mucus is not None
    ]
    readings.sort(key=lambda r: r.day)
    return readings


def compare_mucus_quality(a: MucusCategory, b: MucusCategory) -> int:
    """Negative if a < b, 0 if equal, positive if a > b."""
    return MucusCategory(a).rank - MucusCategory(b).rank


def find_highest_quality(readings: Sequence[MucusReading]) -> Optional[MucusCategory]:
    if not readings:
        return None
    highest = readings[0].mucus
    for reading in readings:
        if compare_mucus_quality(reading.mucus, highest) > 0:
            highest = reading.mucus
    return highest


def mucus_indicates_fertility(observation: Optional[DailyObservation]) -> bool:
    """
    Any mucus other than 'd' marks potential fertility.
    'ø' (nothing felt) is not the same as dry and counts as fertile.
    """
    if observation is None or observation.mucus is None:
        return False
    return observation.mucus != MucusCategory.DRY


def find_observation(observations: Sequence[DailyObservation], cycle_day: int) -> Optional[DailyObservation]:
    """The row recorded for a given cycle day, if any."""
    for observation in observations:
        if observation.cycle_day == cycle_day:
            return observation
    return None
