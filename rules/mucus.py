"""
Cervical Mucus Shift Evaluation.

The Peak Day can only be known in hindsight: it is the last day of the best
mucus quality, confirmed once a later day shows a lower quality.
From there, three days of lower quality (P+1, P+2, P+3) complete the shift,
unless the peak quality comes back first, in which case the count restarts.
"""

import logging
from typing import Optional, Sequence

from models import DailyObservation, MucusEvaluation
from .observations import (
    compare_mucus_quality,
    find_highest_quality,
    get_mucus_observations,
)

logger = logging.getLogger(__name__)

# "On the third day following the cervical mucus peak"
POST_PEAK_DAYS_REQUIRED = 3


def find_peak_day(observations: Sequence[DailyObservation]) -> Optional[int]:
    """
    Identify the Peak Day.
    Returns None until a down-transition after the best quality has been observed.
    """
    readings = get_mucus_observations(observations)
    if len(readings) < 2:
        return None

    highest = find_highest_quality(readings)
    if highest is None:
        return None

    last_day_with_highest = None
    for reading in readings:
        if reading.mucus == highest:
            last_day_with_highest = reading.day
        elif last_day_with_highest is not None and compare_mucus_quality(reading.mucus, highest) < 0:
            # First decline after the best quality confirms the peak
            return last_day_with_highest

    return None


def evaluate_mucus_shift(observations: Sequence[DailyObservation]) -> MucusEvaluation:
    """Evaluate the P+1+2+3 count after a confirmed Peak Day."""
    readings = get_mucus_observations(observations)
    if not readings:
        return MucusEvaluation()

    peak_day = find_peak_day(observations)
    if peak_day is None:
        return MucusEvaluation()

    peak_quality = next((r.mucus for r in readings if r.day == peak_day), None)
    if peak_quality is None:
        return MucusEvaluation(peak_day=peak_day)

    post_peak_count = 0
    peak_quality_returned = False

    for reading in readings:
        if reading.day <= peak_day:
            continue
        if compare_mucus_quality(reading.mucus, peak_quality) >= 0:
            # Back to peak quality: the count has to start over
            peak_quality_returned = True
            break
        post_peak_count += 1
        if post_peak_count >= POST_PEAK_DAYS_REQUIRED:
            break

    if peak_quality_returned:
        logger.debug(f"Peak quality returned after peak day {peak_day} (count was {post_peak_count})")

    return MucusEvaluation(
        peak_day=peak_day,
        is_shift_complete=post_peak_count >= POST_PEAK_DAYS_REQUIRED and not peak_quality_returned,
        post_peak_count=post_peak_count,
        peak_quality_returned=peak_quality_returned,
    )
