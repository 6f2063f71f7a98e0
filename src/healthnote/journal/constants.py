"""Bundled, read-only reference data."""

from .models import Category, GrowthReferencePoint

CATEGORY_LABELS: dict[Category, str] = {
    Category.SLEEP: "Sleep",
    Category.MENTAL: "Mental",
    Category.EXERCISE: "Exercise",
    Category.FOOD: "Food",
    Category.MOOD: "Mood",
    Category.STRESS: "Stress",
    Category.BODY: "Body measurements",
}

# value -> label for the 1-5 mood scale
MOOD_LEVELS: dict[int, str] = {
    1: "awful",
    2: "bad",
    3: "okay",
    4: "good",
    5: "great",
}

SCORE_RANGE = (0.0, 10.0)  # sleep, stress, exercise, mental, food

# Simplified WHO-like standard, for visualization only. Not a clinical percentile table.
GROWTH_STANDARD: tuple[GrowthReferencePoint, ...] = (
    GrowthReferencePoint(age_months=0, height=50, weight=3.3),
    GrowthReferencePoint(age_months=12, height=75, weight=9.6),
    GrowthReferencePoint(age_months=24, height=87, weight=12.2),
    GrowthReferencePoint(age_months=36, height=96, weight=14.3),
    GrowthReferencePoint(age_months=48, height=103, weight=16.3),
    GrowthReferencePoint(age_months=60, height=110, weight=18.3),
    GrowthReferencePoint(age_months=72, height=116, weight=20.5),
    GrowthReferencePoint(age_months=84, height=122, weight=22.9),
    GrowthReferencePoint(age_months=96, height=128, weight=25.4),
    GrowthReferencePoint(age_months=108, height=133, weight=28.1),
    GrowthReferencePoint(age_months=120, height=138, weight=31.2),
    GrowthReferencePoint(age_months=132, height=143, weight=34.5),
    GrowthReferencePoint(age_months=144, height=149, weight=38.5),
)


def validate_value(category: Category, value: float) -> bool:
    """Check a log value against its category's scale."""
    if category == Category.MOOD:
        return value in MOOD_LEVELS
    if category == Category.BODY:
        return value == 0
    low, high = SCORE_RANGE
    return low <= value <= high
