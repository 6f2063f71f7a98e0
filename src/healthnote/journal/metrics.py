"""
Derived metrics: pure functions over a profile and its logs.

BMI, the child-mode growth deviation, and the 7-day mood/stress trend.  No
I/O; ``today`` is always passed in.

The growth deviation compares height against a coarse bundled reference
curve.  It is an approximate visualization aid, not a clinical percentile.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import StrEnum

from .constants import GROWTH_STANDARD
from .models import Category, DailyLog, GrowthReferencePoint, UserProfile

BMI_UNDERWEIGHT_BELOW = 18.5
BMI_OVERWEIGHT_FROM = 25.0
GROWTH_SD_THRESHOLD = 5.0  # percent
TREND_DAYS = 7
RECENT_LOG_COUNT = 5
ADULT_AGE_YEARS = 18


class BMIClass(StrEnum):
    UNKNOWN = "unknown"
    UNDERWEIGHT = "underweight"
    NORMAL = "normal"
    OVERWEIGHT = "overweight"


class GrowthLabel(StrEnum):
    ABOVE = "+1 SD"
    BELOW = "-1 SD"
    STANDARD = "standard"


@dataclass(frozen=True)
class BodyMeasures:
    height: float | None
    weight: float | None


@dataclass(frozen=True)
class GrowthDeviation:
    age_months: int
    reference: GrowthReferencePoint
    percent_diff: float
    label: GrowthLabel


@dataclass(frozen=True)
class TrendPoint:
    """One day of the weekly chart. ``None`` means no entry that day."""

    day: date
    mood: float | None
    stress: float | None


# ── Body measures / BMI ──────────────────────────────────────────────


def latest_body_log(logs: Sequence[DailyLog]) -> DailyLog | None:
    """Most recent body log by date. Same-day ties go to the earlier-inserted entry."""
    body_logs = [log for log in logs if log.category == Category.BODY]
    if not body_logs:
        return None
    # sorted() is stable, so insertion order decides among equal dates
    return sorted(body_logs, key=lambda log: log.date, reverse=True)[0]


def current_body_measures(profile: UserProfile | None, logs: Sequence[DailyLog]) -> BodyMeasures:
    """Height/weight from the latest body log, falling back to the profile per field."""
    latest = latest_body_log(logs)
    height = latest.body_height if latest else None
    weight = latest.body_weight if latest else None
    if profile is not None:
        height = height or profile.height or None
        weight = weight or profile.weight or None
    return BodyMeasures(height=height, weight=weight)


def bmi(height_cm: float | None, weight_kg: float | None) -> float | None:
    """weight / (height in m)^2, or None when either measure is missing."""
    if not height_cm or not weight_kg:
        return None
    meters = height_cm / 100
    return weight_kg / (meters * meters)


def classify_bmi(value: float | None) -> BMIClass:
    if value is None:
        return BMIClass.UNKNOWN
    if value < BMI_UNDERWEIGHT_BELOW:
        return BMIClass.UNDERWEIGHT
    if value < BMI_OVERWEIGHT_FROM:
        return BMIClass.NORMAL
    return BMIClass.OVERWEIGHT


# ── Age ──────────────────────────────────────────────────────────────


def age_in_months(birth: date, today: date) -> int:
    """Whole months by calendar month only; the day of month is ignored."""
    return (today.year - birth.year) * 12 + (today.month - birth.month)


def age_in_years(birth: date, today: date) -> int:
    """Completed years, counting a birthday only once it has been reached."""
    years = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        years -= 1
    return years


def is_birthday(birth: date, today: date) -> bool:
    return (birth.month, birth.day) == (today.month, today.day)


def child_mode_outgrown(profile: UserProfile, today: date) -> bool:
    """Child mode is still on although the user is an adult; BMI would be the better view."""
    return profile.is_child_mode and age_in_years(profile.birth_date, today) >= ADULT_AGE_YEARS


# ── Growth deviation ─────────────────────────────────────────────────


def closest_reference(
    age_months: int,
    reference: Sequence[GrowthReferencePoint] = GROWTH_STANDARD,
) -> GrowthReferencePoint:
    """Reference row nearest in age. Equidistant rows resolve to the first one listed."""
    if not reference:
        raise ValueError("Reference curve is empty")
    best = reference[0]
    for point in reference[1:]:
        if abs(point.age_months - age_months) < abs(best.age_months - age_months):
            best = point
    return best


def growth_label(percent_diff: float) -> GrowthLabel:
    if percent_diff > GROWTH_SD_THRESHOLD:
        return GrowthLabel.ABOVE
    if percent_diff < -GROWTH_SD_THRESHOLD:
        return GrowthLabel.BELOW
    return GrowthLabel.STANDARD


def height_deviation(
    age_months: int,
    height_cm: float,
    reference: Sequence[GrowthReferencePoint] = GROWTH_STANDARD,
) -> GrowthDeviation:
    point = closest_reference(age_months, reference)
    diff = (height_cm - point.height) / point.height * 100
    return GrowthDeviation(age_months=age_months, reference=point, percent_diff=diff, label=growth_label(diff))


def growth_deviation(
    profile: UserProfile,
    measures: BodyMeasures,
    today: date,
    reference: Sequence[GrowthReferencePoint] = GROWTH_STANDARD,
) -> GrowthDeviation | None:
    """Child-mode height comparison, or None outside child mode or without both measures."""
    if not profile.is_child_mode or not measures.height or not measures.weight:
        return None
    return height_deviation(age_in_months(profile.birth_date, today), measures.height, reference)


# ── Weekly trend ─────────────────────────────────────────────────────


def _first_value(logs: Sequence[DailyLog], day: date, category: Category) -> float | None:
    for log in logs:
        if log.date == day and log.category == category:
            return log.value
    return None


def weekly_trend(logs: Sequence[DailyLog], today: date, days: int = TREND_DAYS) -> list[TrendPoint]:
    """Mood and stress for the *days* calendar days ending today, oldest first.

    Only the first entry per day and category counts, in collection order.
    """
    points = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        points.append(
            TrendPoint(
                day=day,
                mood=_first_value(logs, day, Category.MOOD),
                stress=_first_value(logs, day, Category.STRESS),
            )
        )
    return points


def recent_logs(logs: Sequence[DailyLog], limit: int = RECENT_LOG_COUNT) -> list[DailyLog]:
    """The last *limit* entries in collection order, newest first.

    Collection order is insertion order, so a back-dated entry still counts as recent.
    """
    if limit <= 0:
        return []
    return list(reversed(logs[-limit:]))


# ── Dashboard ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DashboardSummary:
    measures: BodyMeasures
    bmi: float | None
    bmi_class: BMIClass
    growth: GrowthDeviation | None
    trend: list[TrendPoint]
    birthday: bool
    recent: list[DailyLog] = field(default_factory=list)
    child_mode_outgrown: bool = False


def dashboard_summary(profile: UserProfile, logs: Sequence[DailyLog], today: date) -> DashboardSummary:
    measures = current_body_measures(profile, logs)
    value = bmi(measures.height, measures.weight)
    return DashboardSummary(
        measures=measures,
        bmi=value,
        bmi_class=classify_bmi(value),
        growth=growth_deviation(profile, measures, today),
        trend=weekly_trend(logs, today),
        birthday=is_birthday(profile.birth_date, today),
        recent=recent_logs(logs),
        child_mode_outgrown=child_mode_outgrown(profile, today),
    )
