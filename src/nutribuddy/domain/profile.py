"""Profile and goal domain models."""

from dataclasses import dataclass
from enum import StrEnum


class ActivityLevel(StrEnum):
    """Self-reported activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"

    @classmethod
    def parse(cls, raw: "str | ActivityLevel | None") -> "ActivityLevel":
        """Parse a free-form value, falling back to moderate."""
        if isinstance(raw, ActivityLevel):
            return raw
        cleaned = (raw or "").strip().lower()
        for level in cls:
            if level.value == cleaned:
                return level
        return cls.MODERATE


@dataclass(frozen=True)
class UserProfile:
    """Snapshot of the user's body metrics."""

    weight_kg: float | None = None
    height_cm: float | None = None
    age: float = 30
    activity_level: ActivityLevel = ActivityLevel.MODERATE


@dataclass(frozen=True)
class Goals:
    """Daily calorie and macro targets."""

    kcal: int
    protein_g: int
    carbs_g: int
    fat_g: int


class GoalSource(StrEnum):
    """Where a stored goal came from."""

    ESTIMATED = "estimated"
    OVERRIDE = "override"


@dataclass(frozen=True)
class StoredGoals:
    """Goals as persisted for a user."""

    goals: Goals
    source: GoalSource


@dataclass(frozen=True)
class ProfileMetrics:
    """Derived body metrics and the goals estimated from them."""

    goals: Goals
    bmi: float | None
    bmr: float
    tdee: int
