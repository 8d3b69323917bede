"""Tests for the temperature shift evaluator."""

import pytest

from models import TemperatureException
from rules import evaluate_temperature_shift, get_valid_temperatures

from conftest import BASELINE, make_observation, temperatures


class TestValidTemperatures:
    def test_filters_out_excluded_readings(self):
        observations = [
            make_observation(1, 36.3),
            make_observation(2, 36.9, excluded=True),
            make_observation(3, 36.4),
        ]
        assert [r.day for r in get_valid_temperatures(observations)] == [1, 3]

    def test_filters_out_days_without_reading(self):
        observations = [make_observation(1, 36.3), make_observation(2, mucus="m"), make_observation(3, 36.4)]
        assert len(get_valid_temperatures(observations)) == 2

    def test_sorted_by_cycle_day(self):
        observations = [make_observation(3, 36.5), make_observation(1, 36.3), make_observation(2, 36.4)]
        assert [r.day for r in get_valid_temperatures(observations)] == [1, 2, 3]


class TestMainRule:
    def test_detects_shift(self):
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.5, 36.55, 36.65]))

        assert result.is_shift_complete
        assert result.cover_line_temp == pytest.approx(36.4)
        assert result.higher_temp_days == (7, 8, 9)
        assert result.exception_used == TemperatureException.NONE
        assert not result.cannot_evaluate

    def test_third_reading_exactly_two_tenths_above(self):
        # 36.4 + 0.2 must compare equal to 36.6
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.5, 36.55, 36.6]))
        assert result.is_shift_complete
        assert result.exception_used == TemperatureException.NONE

    def test_third_reading_not_high_enough(self):
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.5, 36.55, 36.55]))
        assert not result.is_shift_complete
        assert not result.cannot_evaluate

    def test_reading_equal_to_coverline_is_not_higher(self):
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.4, 36.4, 36.4]))
        assert not result.is_shift_complete

    def test_cannot_evaluate_with_insufficient_data(self):
        result = evaluate_temperature_shift(temperatures([36.3, 36.4, 36.35]))
        assert result.cannot_evaluate
        assert result.cannot_evaluate_reason
        assert not result.is_shift_complete

    def test_eight_readings_are_not_enough(self):
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.6, 36.7]))
        assert result.cannot_evaluate

    def test_complete_day_is_third_higher_reading(self):
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.5, 36.55, 36.65]))
        assert result.complete_day == 9
        assert result.first_higher_temp_day == 7


class TestFirstException:
    def test_fourth_reading_completes_shift(self):
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.5, 36.55, 36.55, 36.5]))

        assert result.is_shift_complete
        assert result.exception_used == TemperatureException.FIRST
        assert result.higher_temp_days == (7, 8, 9, 10)
        assert result.complete_day == 10

    def test_fourth_reading_on_coverline_fails(self):
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.5, 36.55, 36.55, 36.4]))
        assert not result.is_shift_complete

    def test_no_fourth_reading_available(self):
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.5, 36.55, 36.55]))
        assert not result.is_shift_complete


class TestSecondException:
    def test_one_reading_on_or_below_coverline_is_ignored(self):
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.5, 36.38, 36.65]))

        assert result.is_shift_complete
        assert result.exception_used == TemperatureException.SECOND
        assert result.higher_temp_days == (7, 9)
        assert 8 not in result.higher_temp_days
        assert result.complete_day == 9

    def test_two_readings_below_coverline_fail(self):
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.38, 36.35, 36.65]))
        assert not result.is_shift_complete

    def test_third_reading_must_still_be_two_tenths_above(self):
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.5, 36.38, 36.55]))
        assert not result.is_shift_complete

    def test_exceptions_are_not_combined(self):
        # A dip on the 2nd reading and a 3rd reading only 0.15 above would need both exceptions
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.5, 36.38, 36.55, 36.6]))
        assert not result.is_shift_complete


class TestWindowScan:
    def test_excluded_readings_are_skipped(self):
        observations = temperatures(BASELINE + [36.5]) + [
            make_observation(8, 36.9, excluded=True),
            make_observation(9, 36.55),
            make_observation(10, 36.65),
        ]
        result = evaluate_temperature_shift(observations)

        assert result.is_shift_complete
        assert 8 not in result.higher_temp_days
        assert result.higher_temp_days == (7, 9, 10)

    def test_first_matching_window_wins(self):
        # Two qualifying windows; only the earliest is reported
        values = BASELINE + [36.5, 36.55, 36.65] + [36.3] * 6 + [36.8, 36.9, 37.0]
        result = evaluate_temperature_shift(temperatures(values))
        assert result.higher_temp_days == (7, 8, 9)

    def test_main_rule_match_reports_no_exception(self):
        result = evaluate_temperature_shift(temperatures(BASELINE + [36.5, 36.55, 36.65, 36.7]))
        assert result.exception_used == TemperatureException.NONE
        assert len(result.higher_temp_days) == 3

    def test_later_baseline_window(self):
        values = [36.2, 36.25, 36.3, 36.2, 36.25, 36.3, 36.28, 36.3, 36.5, 36.45, 36.55]
        result = evaluate_temperature_shift(temperatures(values))
        assert result.is_shift_complete
        assert result.cover_line_temp == pytest.approx(36.3)
        assert result.higher_temp_days == (9, 10, 11)

    def test_no_shift_on_flat_curve(self):
        result = evaluate_temperature_shift(temperatures([36.3] * 20))
        assert not result.is_shift_complete
        assert not result.cannot_evaluate
        assert result.higher_temp_days == ()
