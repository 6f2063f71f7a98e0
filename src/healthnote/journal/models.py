"""
Journal data models.

Dataclasses for the user profile, daily log entries, the growth reference
table and export bundles.  ``to_dict``/``from_dict`` convert to and from the
on-device JSON shape (camelCase keys), which is also the export file shape.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from healthnote.core.exceptions import ValidationError


class ThemeOption(StrEnum):
    """Display theme preference. Passed through untouched by the core."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class Category(StrEnum):
    SLEEP = "sleep"
    MENTAL = "mental"
    EXERCISE = "exercise"
    FOOD = "food"
    MOOD = "mood"
    STRESS = "stress"
    BODY = "body"


# ── Parsing helpers ──────────────────────────────────────────────────


def _parse_date(value: Any, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            # Tolerate full ISO timestamps; only the calendar date matters
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    raise ValidationError(f"{field_name} must be a YYYY-MM-DD date, got {value!r}")


def _parse_number(value: Any, field_name: str, *, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number, got {value!r}")
    return number


BODY_MEASURE_KEYS = ("height", "weight")


def _require_mapping(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(f"{what} must be an object, got {type(data).__name__}")
    return data


def new_log_id() -> str:
    """Generate a fresh, globally unique log identifier."""
    return str(uuid.uuid4())


# ── User profile ─────────────────────────────────────────────────────


@dataclass
class UserProfile:
    """The single profile owned by an identity.

    Attributes:
        name: Display name (non-empty).
        birth_date: Used only to derive age.
        theme: UI preference, stored and synced as-is.
        is_child_mode: Enables growth-deviation instead of BMI.
        height: Centimetres, 0 = unset.
        weight: Kilograms, 0 = unset.
    """

    name: str
    birth_date: date
    theme: ThemeOption = ThemeOption.SYSTEM
    is_child_mode: bool = False
    height: float = 0.0
    weight: float = 0.0

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError("Profile name must be a non-empty string")
        for field_name in ("height", "weight"):
            value = getattr(self, field_name)
            if not math.isfinite(value):
                raise ValidationError(f"Profile {field_name} must be a finite number, got {value!r}")
            if value < 0:
                raise ValidationError("Height and weight cannot be negative")
        self.theme = ThemeOption(self.theme)

    def with_body_measures(self, height: float | None = None, weight: float | None = None) -> UserProfile:
        """Return a copy with measures refreshed; missing or zero inputs keep current values."""
        return replace(self, height=height or self.height, weight=weight or self.weight)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "birthDate": self.birth_date.isoformat(),
            "theme": self.theme.value,
            "isChildMode": self.is_child_mode,
            "height": self.height,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: Any) -> UserProfile:
        data = _require_mapping(data, "Profile")
        if "name" not in data or "birthDate" not in data:
            raise ValidationError("Profile requires 'name' and 'birthDate'")
        try:
            theme = ThemeOption(data.get("theme") or ThemeOption.SYSTEM)
        except ValueError:
            raise ValidationError(f"Unknown theme {data.get('theme')!r}") from None
        return cls(
            name=data["name"],
            birth_date=_parse_date(data["birthDate"], "birthDate"),
            theme=theme,
            is_child_mode=bool(data.get("isChildMode", False)),
            height=_parse_number(data.get("height"), "height"),
            weight=_parse_number(data.get("weight"), "weight"),
        )


# ── Daily log ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DailyLog:
    """A journal entry. Immutable once saved.

    ``value`` is a 0-10 score for sleep/stress/exercise, 1-5 for mood and
    unused (0) for body, whose measurements live in ``sub_data``.
    An empty ``id`` means the entry has not been saved yet.
    """

    date: date
    category: Category
    value: float = 0.0
    note: str | None = None
    sub_data: dict[str, Any] | None = None
    id: str = ""

    def __post_init__(self):
        try:
            object.__setattr__(self, "category", Category(self.category))
        except ValueError:
            raise ValidationError(f"Unknown category {self.category!r}") from None
        if not math.isfinite(self.value):
            raise ValidationError(f"Log value must be a finite number, got {self.value!r}")
        if self.category == Category.BODY and self.sub_data:
            for key in BODY_MEASURE_KEYS:
                measure = _parse_number(self.sub_data.get(key), f"subData.{key}")
                # 0 means "not measured" and falls back to the profile
                if measure < 0:
                    raise ValidationError(f"subData.{key} cannot be negative, got {measure:g}")

    @property
    def has_id(self) -> bool:
        return bool(self.id)

    def with_id(self, log_id: str | None = None) -> DailyLog:
        return replace(self, id=log_id or new_log_id())

    def _measure(self, key: str) -> float | None:
        if self.category != Category.BODY or not self.sub_data:
            return None
        raw = self.sub_data.get(key)
        if raw is None or raw == "":
            return None
        try:
            measure = float(raw)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(measure) or measure <= 0:
            return None
        return measure

    @property
    def body_height(self) -> float | None:
        return self._measure("height")

    @property
    def body_weight(self) -> float | None:
        return self._measure("weight")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "category": self.category.value,
            "value": self.value,
            "note": self.note,
            "subData": self.sub_data,
        }

    @classmethod
    def from_dict(cls, data: Any) -> DailyLog:
        data = _require_mapping(data, "Log entry")
        if "date" not in data or "category" not in data:
            raise ValidationError("Log entry requires 'date' and 'category'")
        sub_data = data.get("subData")
        if sub_data is not None and not isinstance(sub_data, dict):
            raise ValidationError("subData must be an object")
        note = data.get("note")
        return cls(
            id=str(data.get("id") or ""),
            date=_parse_date(data["date"], "date"),
            category=data["category"],
            value=_parse_number(data.get("value"), "value"),
            note=None if note is None else str(note),
            sub_data=dict(sub_data) if sub_data is not None else None,
        )


# ── Reference data ───────────────────────────────────────────────────


@dataclass(frozen=True)
class GrowthReferencePoint:
    """One row of the bundled age -> height/weight reference curve."""

    age_months: int
    height: float
    weight: float


# ── Export bundle ────────────────────────────────────────────────────


@dataclass
class ExportBundle:
    """Snapshot of local state for moving between devices."""

    user: UserProfile | None
    logs: list[DailyLog] = field(default_factory=list)
    export_date: datetime = field(default_factory=lambda: datetime.now().astimezone())

    def to_dict(self) -> dict[str, Any]:
        return {
            "user": self.user.to_dict() if self.user else None,
            "logs": [log.to_dict() for log in self.logs],
            "exportDate": self.export_date.isoformat(),
        }
