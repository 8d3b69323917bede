"""
Cervix Shift Evaluation.

Alternative to the mucus sign: after the highest point (last day the cervix
was felt open or soft), three days of a closed and hard cervix complete the shift.
"""

import logging
from typing import List, Sequence

from models import CervixEvaluation, CervixFirmness, CervixOpening, DailyObservation

logger = logging.getLogger(__name__)

CLOSED_HARD_DAYS_REQUIRED = 3


def _is_closed_and_hard(observation: DailyObservation) -> bool:
    return (observation.cervix_opening == CervixOpening.CLOSED
            and observation.cervix_firmness == CervixFirmness.HARD)


def get_cervix_observations(observations: Sequence[DailyObservation]) -> List[DailyObservation]:
    """Days where both opening and firmness were recorded, sorted by cycle day."""
    rows = [
        o for o in observations
        if o.cervix_opening is not None and o.cervix_firmness is not None
    ]
    rows.sort(key=lambda o: o.cycle_day)
    return rows


def evaluate_cervix_shift(observations: Sequence[DailyObservation]) -> CervixEvaluation:
    """
    Counts the first three recorded days after the highest point, as the mucus
    count does. Days with no complete cervix record are skipped, so the counted
    days need not be consecutive cycle days.
    """
    rows = get_cervix_observations(observations)

    fertile_days = [o.cycle_day for o in rows if not _is_closed_and_hard(o)]
    if not fertile_days:
        return CervixEvaluation()

    highest_point = fertile_days[-1]
    closed_hard_days = tuple(
        o.cycle_day for o in rows if o.cycle_day > highest_point
    )[:CLOSED_HARD_DAYS_REQUIRED]

    is_complete = len(closed_hard_days) >= CLOSED_HARD_DAYS_REQUIRED
    if is_complete:
        logger.debug(f"Cervix shift complete on day {closed_hard_days[-1]} (highest point {highest_point})")

    return CervixEvaluation(
        highest_point_day=highest_point,
        is_shift_complete=is_complete,
        closed_hard_days=closed_hard_days,
    )
