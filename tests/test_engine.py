"""Tests for the fertility status engine (double-check, watchdogs, audit trail)."""

import pytest

from models import (
    CervixFirmness,
    CervixOpening,
    CyclePhase,
    CycleStartRule,
    FertilityStatusType,
    Locale,
)
from rules import (
    FertilityStatusEngine,
    MessageKey,
    calculate_fertility_status,
    evaluate_cycle_timeline,
    input_fingerprint,
    message,
)

from conftest import BASELINE, make_cycle, make_observation, make_profile


def build_observations(temps=None, mucus=None, cervix=None):
    """One observation per day present in any of the mappings {day: value}."""
    temps = temps or {}
    mucus = mucus or {}
    cervix = cervix or {}
    observations = []
    for day in sorted(set(temps) | set(mucus) | set(cervix)):
        extra = {}
        if day in cervix:
            opening, firmness = cervix[day]
            extra = {"cervix_opening": CervixOpening(opening), "cervix_firmness": CervixFirmness(firmness)}
        observations.append(make_observation(day, temperature=temps.get(day), mucus=mucus.get(day), **extra))
    return observations


def rule_ids(status):
    return [r.rule_id for r in status.rules_applied]


def data_fields(status):
    return {p.field: p for p in status.data_points_used}


# Temperature shift complete on day 9, peak day 14 -> mucus shift complete on day 17
SHIFT_TEMPS = dict(enumerate(BASELINE + [36.5, 36.55, 36.65], start=1))
PEAK_14_MUCUS = {
    6: "d", 7: "d", 8: "d", 9: "d",
    10: "m", 11: "S", 12: "S+", 13: "S+", 14: "S+", 15: "S", 16: "m", 17: "d",
}


class TestDoubleCheck:
    def setup_method(self):
        self.observations = build_observations(SHIFT_TEMPS, PEAK_14_MUCUS)
        self.cycle = make_cycle()
        self.profile = make_profile()

    def test_fertile_until_later_shift_completes(self):
        status = calculate_fertility_status(self.observations, 16, self.cycle, self.profile)

        assert status.status == FertilityStatusType.FERTILE
        assert status.phase == CyclePhase.FERTILE
        assert status.markers.fertility_ends_day == 17

    def test_infertile_from_whichever_comes_last(self):
        status = calculate_fertility_status(self.observations, 17, self.cycle, self.profile)

        assert status.status == FertilityStatusType.INFERTILE
        assert status.phase == CyclePhase.POST_OVULATION
        assert status.explanation == message(MessageKey.POST_OVULATION_INFERTILE)

    def test_data_points_of_the_decision(self):
        status = calculate_fertility_status(self.observations, 17, self.cycle, self.profile)
        points = data_fields(status)

        assert points["cover_line_temp"].value == pytest.approx(36.4)
        assert points["peak_day"].value == 14
        assert points["peak_day"].date is not None
        assert points["temperature_complete_day"].value == 9
        assert points["mucus_complete_day"].value == 17
        assert points["fertility_ends_day"].value == 17

    def test_rules_applied_in_call_order(self):
        status = calculate_fertility_status(self.observations, 17, self.cycle, self.profile)
        ids = rule_ids(status)

        assert ids[0] == "START_5DAY"
        assert ids.index("TEMP_MAIN") < ids.index("MUCUS_PEAK") < ids.index("FERT_DOUBLE_CHECK")
        assert "FERT_EVENING" in ids

    def test_markers(self):
        status = calculate_fertility_status(self.observations, 17, self.cycle, self.profile)
        markers = status.markers

        assert markers.rule_applied == CycleStartRule.FIVE_DAY
        assert markers.last_infertile_day == 5
        assert markers.fertility_starts_day == 6
        assert markers.peak_day == 14
        assert markers.first_higher_temp_day == 7
        assert markers.temperature_shift_complete
        assert markers.mucus_shift_complete

    def test_markers_applied_to_cycle_copy(self):
        status = calculate_fertility_status(self.observations, 17, self.cycle, self.profile)
        updated = self.cycle.with_markers(status.markers)

        assert updated.peak_day == 14
        assert updated.first_higher_temp_day == 7
        assert updated.last_infertile_day == 5
        assert self.cycle.peak_day is None

    def test_idempotent(self):
        first = calculate_fertility_status(self.observations, 17, self.cycle, self.profile)
        second = calculate_fertility_status(list(reversed(self.observations)), 17, self.cycle, self.profile)
        assert first == second


class TestTemperatureCompletesLast:
    def test_fourth_reading_day_with_first_exception(self):
        temps = dict(enumerate(BASELINE + [36.5, 36.55, 36.55, 36.5], start=1))
        mucus = {6: "S+", 7: "S", 8: "m", 9: "d"}
        observations = build_observations(temps, mucus)

        day_9 = calculate_fertility_status(observations, 9, make_cycle(), make_profile())
        day_10 = calculate_fertility_status(observations, 10, make_cycle(), make_profile())

        assert day_9.status == FertilityStatusType.FERTILE
        assert day_10.status == FertilityStatusType.INFERTILE
        assert day_10.markers.fertility_ends_day == 10
        assert "TEMP_EX1" in rule_ids(day_10)


class TestIncompleteAxes:
    def test_missing_temperature_shift(self):
        observations = build_observations({1: 36.3, 2: 36.4}, PEAK_14_MUCUS)
        status = calculate_fertility_status(observations, 20, make_cycle(), make_profile())

        assert status.status == FertilityStatusType.FERTILE
        assert status.phase == CyclePhase.FERTILE
        assert message(MessageKey.NO_TEMP_SHIFT) in status.warnings
        assert "temperature_cannot_evaluate" in data_fields(status)

    def test_missing_mucus_shift(self):
        mucus = {10: "m", 11: "S+", 12: "S+"}
        status = calculate_fertility_status(build_observations(SHIFT_TEMPS, mucus), 14, make_cycle(), make_profile())

        assert status.status == FertilityStatusType.FERTILE
        assert message(MessageKey.NO_TEMP_SHIFT) not in status.warnings
        assert status.markers.temperature_shift_complete
        assert not status.markers.mucus_shift_complete

    def test_relapse_keeps_fertile(self):
        mucus = {10: "S+", 11: "S+", 12: "S", 13: "S", 14: "S+", 15: "S", 16: "m", 17: "d"}
        status = calculate_fertility_status(build_observations({}, mucus), 17, make_cycle(), make_profile())
        ids = rule_ids(status)

        assert status.status == FertilityStatusType.FERTILE
        assert message(MessageKey.PEAK_RETURNED) in status.warnings
        assert "MUCUS_RESTART" in ids
        assert "MUCUS_BEFORE_TEMP" in ids


class TestPreOvulation:
    def test_infertile_inside_five_day_window(self):
        observations = build_observations({1: 36.3, 2: 36.4, 3: 36.35})
        status = calculate_fertility_status(observations, 3, make_cycle(), make_profile())

        assert status.status == FertilityStatusType.INFERTILE
        assert status.phase == CyclePhase.PRE_OVULATION
        assert status.explanation.for_locale(Locale.EN) == "Infertile period at the beginning of the cycle"
        assert data_fields(status)["last_infertile_day"].value == 5

    def test_mucus_on_day_three_ends_infertile_window(self):
        observations = build_observations(mucus={1: "d", 2: "d", 3: "m"})
        day_2 = calculate_fertility_status(observations, 2, make_cycle(), make_profile())
        day_3 = calculate_fertility_status(observations, 3, make_cycle(), make_profile())

        assert day_2.status == FertilityStatusType.INFERTILE
        assert day_3.status == FertilityStatusType.FERTILE
        assert day_3.markers.fertility_starts_day == 3

    def test_mucus_override_is_traced(self):
        profile = make_profile(cycle_count=12, earliest_first_higher_temps=[14] * 12)
        observations = build_observations(mucus={1: "d", 2: "d", 3: "m"})
        status = calculate_fertility_status(observations, 2, make_cycle(), profile)

        assert rule_ids(status)[:3] == ["START_MINUS8", "START_MINUS8_REQ", "START_MUCUS"]


class TestWatchdogs:
    def test_long_cycle_warning(self):
        status = calculate_fertility_status([], 61, make_cycle(), make_profile())
        assert message(MessageKey.LONG_CYCLE) in status.warnings
        assert message(MessageKey.AMENORRHEA) not in status.warnings

    def test_amenorrhea_replaces_long_cycle_warning(self):
        status = calculate_fertility_status([], 91, make_cycle(), make_profile())
        assert message(MessageKey.AMENORRHEA) in status.warnings
        assert message(MessageKey.LONG_CYCLE) not in status.warnings

    def test_no_warning_at_sixty_days(self):
        status = calculate_fertility_status([], 60, make_cycle(), make_profile())
        assert message(MessageKey.LONG_CYCLE) not in status.warnings


class TestCervixSign:
    def test_cervix_replaces_mucus(self):
        cervix = {
            11: ("open", "soft"), 12: ("closed", "hard"), 13: ("closed", "hard"), 14: ("closed", "hard"),
        }
        observations = build_observations(SHIFT_TEMPS, cervix=cervix)
        profile = make_profile(use_cervix_sign=True)

        day_13 = calculate_fertility_status(observations, 13, make_cycle(), profile)
        day_14 = calculate_fertility_status(observations, 14, make_cycle(), profile)

        assert day_13.status == FertilityStatusType.FERTILE
        assert day_14.status == FertilityStatusType.INFERTILE
        assert "CERVIX_SHIFT" in rule_ids(day_14)
        assert data_fields(day_14)["cervix_complete_day"].value == 14

    def test_incomplete_cervix_warns(self):
        observations = build_observations(SHIFT_TEMPS, cervix={11: ("open", "soft")})
        status = calculate_fertility_status(observations, 13, make_cycle(), make_profile(use_cervix_sign=True))

        assert status.status == FertilityStatusType.FERTILE
        assert message(MessageKey.NO_CERVIX_SHIFT) in status.warnings


class TestTimeline:
    def test_one_status_per_day(self):
        observations = build_observations(SHIFT_TEMPS, PEAK_14_MUCUS)
        statuses = evaluate_cycle_timeline(observations, make_cycle(), make_profile(), 17)

        assert len(statuses) == 17
        assert all(s.phase == CyclePhase.PRE_OVULATION for s in statuses[:5])
        assert statuses[15].status == FertilityStatusType.FERTILE
        assert statuses[16].status == FertilityStatusType.INFERTILE

    def test_each_day_only_sees_its_past(self):
        observations = build_observations(SHIFT_TEMPS, PEAK_14_MUCUS)
        engine = FertilityStatusEngine(observations, make_cycle(), make_profile())
        statuses = engine.timeline(15)

        # Peak day 14 is only confirmed by the decline on day 15
        assert statuses[13].markers.peak_day is None
        assert statuses[14].markers.peak_day == 14


class TestFingerprint:
    def test_stable_and_order_insensitive(self):
        observations = build_observations(SHIFT_TEMPS, PEAK_14_MUCUS)
        cycle, profile = make_cycle(), make_profile()

        assert input_fingerprint(observations, 16, cycle, profile) == \
            input_fingerprint(list(reversed(observations)), 16, cycle, profile)

    def test_changes_with_inputs(self):
        observations = build_observations(SHIFT_TEMPS, PEAK_14_MUCUS)
        cycle, profile = make_cycle(), make_profile()

        assert input_fingerprint(observations, 16, cycle, profile) != input_fingerprint(observations, 17, cycle, profile)
        assert input_fingerprint(observations, 16, cycle, profile) != \
            input_fingerprint(observations, 16, cycle, make_profile(shortest_cycle_length=28))
