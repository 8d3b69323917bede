"""
Main Execution Script for the Fertility Rule Engine.
Loads one cycle (profile + cycle record + observations), classifies every day and reports.
"""

import os
import sys
import logging
import json

from pydantic import ValidationError

# Add current directory to path so imports work
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from generators.data_factory import CycleFactory
from rules import evaluate_cycle_timeline, input_fingerprint
from models import Cycle, DailyObservation, Locale, UserCalibrationProfile

# --- CONFIGURATION ---
DATA_FILENAME = os.environ.get("FERTILITY_DATA_FILE", "cycle_data.json")
EXPORT_FILENAME = os.environ.get("FERTILITY_EXPORT_FILE", "cycle_status.json")
LOCALE = Locale(os.environ.get("FERTILITY_LOCALE", "en"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
# ---------------------

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("Main")


def save_dataset(profile, cycle, observations, filename: str):
    """Helper to save a generated cycle so the next run uses the same data."""
    with open(filename, 'w') as f:
        json.dump(CycleFactory.to_json_dict(profile, cycle, observations), f, indent=2, ensure_ascii=False)
    logger.info(f"Saved cycle data to {filename}")


def load_dataset(filename: str):
    """
    Helper to load JSON data and reconstruct pydantic objects.
    Returns (None, None, None) if the file is missing or invalid.
    """
    try:
        with open(filename, 'r') as f:
            data = json.load(f)

        logger.info(f"Loading cycle data from {filename}...")

        profile = UserCalibrationProfile(**data.get('profile', {}))
        cycle = Cycle(**data['cycle'])
        observations = [DailyObservation(**item) for item in data.get('observations', [])]

        logger.info(f"Loaded cycle {cycle.id}: {len(observations)} observations.")
        return profile, cycle, observations

    except (FileNotFoundError, json.JSONDecodeError, KeyError):
        logger.warning(f"Data file {filename} not found or invalid. Falling back to Generator.")
        return None, None, None
    except ValidationError as e:
        logger.error(f"Invalid cycle data in {filename}: {e}")
        return None, None, None


def export_statuses(statuses, cycle, filename: str):
    """Serializes the per-day statuses and the final markers for the frontend."""
    data = {
        "cycle": cycle.with_markers(statuses[-1].markers).model_dump(mode='json') if statuses else cycle.model_dump(mode='json'),
        "days": {
            str(day): status.model_dump(mode='json')
            for day, status in enumerate(statuses, start=1)
        },
    }
    with open(filename, 'w') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.info(f"Exported {len(statuses)} daily statuses to {filename}")


def main():
    logger.info("Starting Fertility Rule Engine run...")

    # --- PHASE 1: DATA ACQUISITION (File vs. Generator) ---
    profile, cycle, observations = load_dataset(DATA_FILENAME)

    if cycle is None:
        factory = CycleFactory()
        profile, cycle, observations = factory.generate_dataset()
        save_dataset(profile, cycle, observations, DATA_FILENAME)

    if not observations:
        logger.error("No observations available. Exiting.")
        return

    # --- PHASE 2: EVALUATION ---
    last_day = max(o.cycle_day for o in observations)
    logger.info(f"Evaluating days 1-{last_day} of cycle {cycle.id}")
    logger.debug(f"Input fingerprint: {input_fingerprint(observations, last_day, cycle, profile)}")

    statuses = evaluate_cycle_timeline(observations, cycle, profile, last_day)

    # --- PHASE 3: REPORTING ---
    print("\n" + "=" * 50)
    print(f"CYCLE {cycle.cycle_number} REPORT ({cycle.start_date})")
    print("=" * 50)
    for day, status in enumerate(statuses, start=1):
        print(f"Day {day:>3}  {status.status.value:<13} {status.phase.value:<15} {status.explanation.for_locale(LOCALE)}")
        for warning in status.warnings:
            print(f"         ! {warning.for_locale(LOCALE)}")

    markers = statuses[-1].markers
    print("\nMarkers:")
    print(f"  Rule applied:          {markers.rule_applied.value}")
    print(f"  Last infertile day:    {markers.last_infertile_day}")
    print(f"  Peak day:              {markers.peak_day}")
    print(f"  First higher reading:  {markers.first_higher_temp_day}")
    print(f"  Fertility ends:        {markers.fertility_ends_day}")

    # --- PHASE 4: EXPORT ---
    export_statuses(statuses, cycle, EXPORT_FILENAME)


if __name__ == "__main__":
    main()
