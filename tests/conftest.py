"""Shared builders for the rule engine test suite.

Observations are built field by field so each test only spells out the
signals it is about.
"""

from datetime import date, timedelta
from typing import Optional, Sequence

import pytest

from models import Cycle, DailyObservation, MucusCategory, UserCalibrationProfile

CYCLE_START = date(2024, 1, 1)


def make_observation(
    cycle_day: int,
    temperature: Optional[float] = None,
    mucus: Optional[str] = None,
    excluded: bool = False,
    **extra
) -> DailyObservation:
    return DailyObservation(
        date=CYCLE_START + timedelta(days=cycle_day - 1),
        cycle_day=cycle_day,
        temperature=temperature,
        temperature_excluded=excluded,
        mucus=MucusCategory(mucus) if mucus is not None else None,
        **extra
    )


def temperatures(values: Sequence[float], first_day: int = 1):
    """Consecutive days carrying the given readings."""
    return [make_observation(first_day + i, temperature=v) for i, v in enumerate(values)]


def mucus_days(values: Sequence[str], first_day: int = 1):
    return [make_observation(first_day + i, mucus=v) for i, v in enumerate(values)]


def make_profile(**overrides) -> UserCalibrationProfile:
    return UserCalibrationProfile(**overrides)


def make_cycle(**overrides) -> Cycle:
    fields = {"id": "test-cycle", "start_date": CYCLE_START}
    fields.update(overrides)
    return Cycle(**fields)


# 6 baseline readings topping out at 36.40
BASELINE = [36.3, 36.4, 36.35, 36.38, 36.32, 36.4]


@pytest.fixture
def profile():
    return make_profile()


@pytest.fixture
def cycle():
    return make_cycle()
