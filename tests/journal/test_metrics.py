"""Tests for journal.metrics: BMI, growth deviation, weekly trend."""

from datetime import date

import pytest

from healthnote.journal.constants import GROWTH_STANDARD
from healthnote.journal.metrics import (
    BMIClass,
    BodyMeasures,
    GrowthLabel,
    child_mode_outgrown,
    age_in_months,
    age_in_years,
    bmi,
    classify_bmi,
    closest_reference,
    current_body_measures,
    dashboard_summary,
    growth_deviation,
    height_deviation,
    is_birthday,
    latest_body_log,
    recent_logs,
    weekly_trend,
)
from healthnote.journal.models import DailyLog, GrowthReferencePoint, UserProfile

TODAY = date(2025, 7, 10)


def _body(day, height=None, weight=None, log_id=""):
    return DailyLog(id=log_id, date=day, category="body", sub_data={"height": height, "weight": weight})


class TestBMI:
    def test_normal(self):
        value = bmi(170, 65)
        assert value == pytest.approx(22.49, abs=0.01)
        assert classify_bmi(value) == BMIClass.NORMAL

    @pytest.mark.parametrize("height,weight", [(0, 65), (None, 65), (170, 0), (170, None)])
    def test_undefined(self, height, weight):
        assert bmi(height, weight) is None
        assert classify_bmi(bmi(height, weight)) == BMIClass.UNKNOWN

    @pytest.mark.parametrize(
        "value,expected",
        [
            (18.49, BMIClass.UNDERWEIGHT),
            (18.5, BMIClass.NORMAL),
            (24.99, BMIClass.NORMAL),
            (25.0, BMIClass.OVERWEIGHT),
        ],
    )
    def test_band_edges(self, value, expected):
        assert classify_bmi(value) == expected


class TestBodyMeasures:
    def test_latest_by_date_not_insertion(self):
        logs = [_body(date(2025, 7, 5), 170, log_id="new"), _body(date(2025, 6, 1), 160, log_id="old")]
        assert latest_body_log(logs).id == "new"

    def test_same_day_first_inserted_wins(self):
        logs = [_body(TODAY, 170, log_id="first"), _body(TODAY, 171, log_id="second")]
        assert latest_body_log(logs).id == "first"

    def test_falls_back_to_profile_per_field(self, profile):
        logs = [_body(TODAY, height=165)]
        measures = current_body_measures(profile, logs)
        assert measures == BodyMeasures(height=165, weight=52.0)

    def test_no_logs_uses_profile(self, profile):
        assert current_body_measures(profile, []) == BodyMeasures(height=160.0, weight=52.0)

    def test_unset_profile_is_absent(self):
        p = UserProfile(name="New", birth_date=date(2000, 1, 1))
        assert current_body_measures(p, []) == BodyMeasures(height=None, weight=None)


class TestAge:
    def test_months_ignore_day(self):
        assert age_in_months(date(2023, 7, 31), date(2025, 7, 1)) == 24

    def test_months_across_year(self):
        assert age_in_months(date(2024, 11, 15), date(2025, 2, 1)) == 3

    def test_years_before_birthday(self):
        assert age_in_years(date(1990, 7, 11), TODAY) == 34
        assert age_in_years(date(1990, 7, 10), TODAY) == 35

    def test_birthday(self):
        assert is_birthday(date(2001, 7, 10), TODAY)
        assert not is_birthday(date(2001, 7, 11), TODAY)


class TestGrowth:
    def test_above(self):
        result = height_deviation(24, 92)
        assert result.reference.height == 87
        assert result.percent_diff == pytest.approx(5.75, abs=0.01)
        assert result.label == GrowthLabel.ABOVE

    def test_standard(self):
        result = height_deviation(24, 87)
        assert result.percent_diff == 0
        assert result.label == GrowthLabel.STANDARD

    def test_below(self):
        assert height_deviation(24, 80).label == GrowthLabel.BELOW

    def test_threshold_is_exclusive(self):
        ref = [GrowthReferencePoint(age_months=24, height=100, weight=12)]
        assert height_deviation(24, 105, ref).label == GrowthLabel.STANDARD
        assert height_deviation(24, 95, ref).label == GrowthLabel.STANDARD

    def test_tie_prefers_earlier_age(self):
        assert closest_reference(18).age_months == 12
        assert closest_reference(30).age_months == 24

    def test_beyond_table_uses_last_row(self):
        assert closest_reference(400).age_months == GROWTH_STANDARD[-1].age_months

    def test_empty_reference(self):
        with pytest.raises(ValueError):
            closest_reference(10, [])

    def test_only_in_child_mode(self, profile):
        assert growth_deviation(profile, BodyMeasures(100, 15), TODAY) is None

    def test_requires_both_measures(self):
        child = UserProfile(name="Mio", birth_date=date(2023, 7, 1), is_child_mode=True)
        assert growth_deviation(child, BodyMeasures(90, None), TODAY) is None

    def test_child(self):
        child = UserProfile(name="Mio", birth_date=date(2023, 7, 1), is_child_mode=True)
        result = growth_deviation(child, BodyMeasures(92, 13), TODAY)
        assert result.age_months == 24
        assert result.label == GrowthLabel.ABOVE


class TestWeeklyTrend:
    def test_single_mood_today(self):
        logs = [DailyLog(date=TODAY, category="mood", value=4)]
        trend = weekly_trend(logs, TODAY)
        assert len(trend) == 7
        assert [p.mood for p in trend] == [None] * 6 + [4]
        assert all(p.stress is None for p in trend)
        assert trend[0].day == date(2025, 7, 4)
        assert trend[-1].day == TODAY

    def test_first_entry_of_day_wins(self):
        logs = [
            DailyLog(date=TODAY, category="stress", value=8),
            DailyLog(date=TODAY, category="stress", value=2),
            DailyLog(date=TODAY, category="mood", value=1),
        ]
        last = weekly_trend(logs, TODAY)[-1]
        assert last.stress == 8
        assert last.mood == 1

    def test_ignores_out_of_window(self):
        logs = [DailyLog(date=date(2025, 7, 3), category="mood", value=5)]
        assert all(p.mood is None for p in weekly_trend(logs, TODAY))


def test_dashboard_summary(profile):
    logs = [_body(TODAY, 170, 65), DailyLog(date=TODAY, category="mood", value=3)]
    summary = dashboard_summary(profile, logs, TODAY)
    assert summary.bmi == pytest.approx(22.49, abs=0.01)
    assert summary.bmi_class == BMIClass.NORMAL
    assert summary.growth is None
    assert summary.trend[-1].mood == 3
    assert not summary.birthday
    assert [log.category for log in summary.recent] == ["mood", "body"]
    assert not summary.child_mode_outgrown


class TestRecentLogs:
    def test_newest_first_capped_at_five(self):
        logs = [DailyLog(id=str(i), date=TODAY, category="sleep", value=i) for i in range(8)]
        assert [log.id for log in recent_logs(logs)] == ["7", "6", "5", "4", "3"]

    def test_insertion_order_not_date(self):
        logs = [
            DailyLog(id="new-date", date=date(2025, 7, 9), category="mood", value=3),
            DailyLog(id="backdated", date=date(2025, 1, 1), category="mood", value=2),
        ]
        assert [log.id for log in recent_logs(logs)] == ["backdated", "new-date"]

    def test_empty(self):
        assert recent_logs([]) == []


class TestChildModeOutgrown:
    def test_adult_in_child_mode(self):
        p = UserProfile(name="Ren", birth_date=date(2007, 7, 10), is_child_mode=True)
        assert child_mode_outgrown(p, TODAY)

    def test_day_before_eighteenth_birthday(self):
        p = UserProfile(name="Ren", birth_date=date(2007, 7, 11), is_child_mode=True)
        assert not child_mode_outgrown(p, TODAY)

    def test_adult_mode_never_flagged(self, profile):
        assert not child_mode_outgrown(profile, TODAY)
