"""Tests for pace classification, calendar helpers and display formatting."""

from datetime import date, datetime

import pytest

from okr_core.engine.calendar import (
    days_between,
    get_current_quarter,
    get_quarter_dates,
    get_year_dates,
    quarter_status,
    start_of_week,
)
from okr_core.engine.pace import (
    classify_pace_status,
    compute_delta,
    compute_expected_progress,
    compute_expected_value,
    compute_pace_ratio,
    display_status,
    format_delta,
    format_forecast,
    format_pace_status,
    format_progress,
    format_value_with_unit,
    pace_status_for,
    pace_status_variant,
)
from okr_core.models.enums import KrDirection, KrType, PaceStatus, QuarterStatus

from tests.conftest import utc


class TestPaceThresholds:
    @pytest.mark.parametrize(
        "progress, expected_status",
        [
            (0.55, PaceStatus.AHEAD),
            (0.45, PaceStatus.ON_TRACK),
            (0.35, PaceStatus.AT_RISK),
            (0.30, PaceStatus.OFF_TRACK),
        ],
    )
    def test_boundaries_at_half_expected(self, progress, expected_status):
        ratio = compute_pace_ratio(progress, 0.5)
        assert classify_pace_status(ratio) == expected_status

    def test_exact_threshold_values(self):
        assert classify_pace_status(1.10) == PaceStatus.AHEAD
        assert classify_pace_status(1.0999) == PaceStatus.ON_TRACK
        assert classify_pace_status(0.90) == PaceStatus.ON_TRACK
        assert classify_pace_status(0.70) == PaceStatus.AT_RISK
        assert classify_pace_status(0.6999) == PaceStatus.OFF_TRACK

    def test_zero_expected_is_on_track(self):
        assert compute_pace_ratio(0.0, 0.0) == 1.0
        assert classify_pace_status(compute_pace_ratio(0.0, 0.0)) == PaceStatus.ON_TRACK

    def test_over_delivery_is_clamped_before_ratio(self):
        assert compute_pace_ratio(1.5, 0.5) == pytest.approx(2.0)

    def test_negative_progress_clamped_to_zero(self):
        assert compute_pace_ratio(-0.4, 0.5) == 0.0

    def test_status_for_aggregate_progress(self, midyear):
        assert pace_status_for(0.5, 2026, midyear) == PaceStatus.ON_TRACK
        assert pace_status_for(0.3, 2026, midyear) == PaceStatus.OFF_TRACK
        assert pace_status_for(0.0, 2026, utc(2026, 1, 1)) == PaceStatus.ON_TRACK


class TestExpectedProgress:
    def test_before_year_is_zero(self):
        assert compute_expected_progress(2026, utc(2025, 11, 1)) == 0.0

    def test_after_year_is_one(self):
        assert compute_expected_progress(2026, utc(2027, 2, 1)) == 1.0

    def test_jan_first_is_zero(self):
        assert compute_expected_progress(2026, utc(2026, 1, 1)) == 0.0

    def test_midyear_rounds_half_days_up(self, midyear):
        # 182.5 days elapsed rounds to 183; the year spans 364 day-steps.
        assert compute_expected_progress(2026, midyear) == pytest.approx(183 / 364)

    def test_expected_value_interpolates(self):
        assert compute_expected_value(0.25, 100, 200) == pytest.approx(125)
        assert compute_expected_value(0.5, 100, 50) == pytest.approx(75)


class TestCalendar:
    def test_days_between_half_up(self):
        assert days_between(utc(2026, 1, 1), utc(2026, 1, 1, 12)) == 1
        assert days_between(utc(2026, 1, 1), utc(2026, 1, 1, 11, 59)) == 0
        assert days_between(utc(2026, 1, 10), utc(2026, 1, 1)) == -9

    def test_naive_and_date_inputs_are_utc(self):
        assert days_between(date(2026, 1, 1), datetime(2026, 1, 3)) == 2

    def test_year_dates(self):
        window = get_year_dates(2026)
        assert window.start == utc(2026, 1, 1)
        assert window.end == utc(2026, 12, 31)

    @pytest.mark.parametrize(
        "quarter, start, end",
        [
            (1, utc(2026, 1, 1), utc(2026, 3, 31)),
            (2, utc(2026, 4, 1), utc(2026, 6, 30)),
            (3, utc(2026, 7, 1), utc(2026, 9, 30)),
            (4, utc(2026, 10, 1), utc(2026, 12, 31)),
        ],
    )
    def test_quarter_dates(self, quarter, start, end):
        window = get_quarter_dates(2026, quarter)
        assert (window.start, window.end) == (start, end)

    def test_quarter_out_of_range_raises(self):
        with pytest.raises(ValueError, match="quarter must be 1-4"):
            get_quarter_dates(2026, 5)

    def test_current_quarter(self):
        assert get_current_quarter(utc(2026, 3, 31)) == 1
        assert get_current_quarter(utc(2026, 10, 1)) == 4

    def test_quarter_status(self, midyear):
        assert quarter_status(2, 2026, midyear) == QuarterStatus.COMPLETED
        assert quarter_status(3, 2026, midyear) == QuarterStatus.ACTIVE
        assert quarter_status(4, 2026, midyear) == QuarterStatus.UPCOMING
        assert quarter_status(1, 2027, midyear) == QuarterStatus.UPCOMING
        assert quarter_status(4, 2025, midyear) == QuarterStatus.COMPLETED

    def test_week_starts_on_sunday(self):
        # 2026-01-01 is a Thursday.
        assert start_of_week(utc(2026, 1, 1, 15)) == utc(2025, 12, 28)
        assert start_of_week(utc(2026, 1, 4)) == utc(2026, 1, 4)


class TestDisplayHelpers:
    def test_complete_overrides_pace(self):
        assert display_status(1.0, PaceStatus.AT_RISK) == "complete"
        assert display_status(0.4, PaceStatus.AT_RISK) == "at_risk"

    def test_format_progress(self):
        assert format_progress(0.456) == "46%"
        assert format_progress(1.0) == "100%"

    def test_labels_and_variants(self):
        assert format_pace_status(PaceStatus.OFF_TRACK) == "Off Track"
        assert pace_status_variant(PaceStatus.AHEAD) == "success"

    def test_format_value_with_unit(self):
        assert format_value_with_unit(45.0, None, KrType.RATE) == "45.0%"
        assert format_value_with_unit(1500, "users", KrType.METRIC) == "1,500 users"
        assert format_value_with_unit(2.5, None, KrType.AVERAGE) == "2.5"

    def test_format_delta(self):
        assert format_delta(3, "pts") == "+3 pts"
        assert format_delta(-2.5, None) == "-2.5"

    def test_delta_direction(self):
        assert compute_delta(75, 50, KrDirection.DECREASE) == -25
        assert compute_delta(75, 50, KrDirection.INCREASE) == 25

    def test_format_forecast_against_target(self):
        assert format_forecast(120, 100, "users", KrType.METRIC) == "120 users (≥ 100 users)"
        assert format_forecast(45.0, 50, None, KrType.RATE) == "45.0% (< 50.0%)"
        assert format_forecast(None, 1, None, KrType.MILESTONE) == "—"
