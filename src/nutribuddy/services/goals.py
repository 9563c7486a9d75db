"""Goal estimation from a user profile.

Macro policy: protein comes from bodyweight (1.6 g/kg, or 25% of calories
when weight is unknown), fat is a fixed 25% of calories, and carbs fill the
remaining calories. When the remainder is not positive, carbs fall back to
45% of calories.
"""

import logging
import math
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nutribuddy.domain.profile import (
    ActivityLevel,
    Goals,
    GoalSource,
    ProfileMetrics,
    StoredGoals,
    UserProfile,
)

DEFAULT_WEIGHT_KG = 70.0
DEFAULT_HEIGHT_CM = 170.0
DEFAULT_AGE = 30.0
FALLBACK_BMR = 1500.0

PROTEIN_G_PER_KG = 1.6
PROTEIN_KCAL_SHARE = 0.25
FAT_KCAL_SHARE = 0.25
CARBS_FALLBACK_KCAL_SHARE = 0.45

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

_ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
}

_logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return int(math.floor(value + 0.5))


def activity_multiplier(level: ActivityLevel | str | None) -> float:
    """Return the TDEE multiplier for an activity level."""
    return _ACTIVITY_MULTIPLIERS[ActivityLevel.parse(level)]


def compute_bmr(
    weight_kg: float | None, height_cm: float | None, age: float | None
) -> float:
    """Mifflin-St Jeor estimate with a single non-gendered constant."""
    weight = _positive_or(weight_kg, DEFAULT_WEIGHT_KG)
    height = _positive_or(height_cm, DEFAULT_HEIGHT_CM)
    years = _positive_or(age, DEFAULT_AGE)
    bmr = 10 * weight + 6.25 * height - 5 * years + 5
    if not math.isfinite(bmr) or bmr <= 0:
        return FALLBACK_BMR
    return bmr


def compute_bmi(weight_kg: float | None, height_cm: float | None) -> float | None:
    """Return BMI to one decimal, or None when weight or height is unknown."""
    weight = _positive_or(weight_kg, None)
    height = _positive_or(height_cm, None)
    if weight is None or height is None:
        return None
    meters = height / 100
    return round(weight / (meters * meters), 1)


def estimate_goals(profile: UserProfile) -> Goals:
    """Derive daily calorie and macro targets from a profile."""
    weight = _positive_or(profile.weight_kg, None)
    bmr = compute_bmr(profile.weight_kg, profile.height_cm, profile.age)
    kcal = max(1, round_half_up(bmr * activity_multiplier(profile.activity_level)))

    if weight is not None and math.isfinite(weight * PROTEIN_G_PER_KG):
        protein_g = round_half_up(weight * PROTEIN_G_PER_KG)
    else:
        protein_g = round_half_up(kcal * PROTEIN_KCAL_SHARE / KCAL_PER_G_PROTEIN)
    fat_g = round_half_up(kcal * FAT_KCAL_SHARE / KCAL_PER_G_FAT)

    remaining = kcal - protein_g * KCAL_PER_G_PROTEIN - fat_g * KCAL_PER_G_FAT
    if remaining > 0:
        carbs_g = round_half_up(remaining / KCAL_PER_G_CARBS)
    else:
        carbs_g = round_half_up(kcal * CARBS_FALLBACK_KCAL_SHARE / KCAL_PER_G_CARBS)

    return Goals(kcal=kcal, protein_g=protein_g, carbs_g=carbs_g, fat_g=fat_g)


def profile_metrics(profile: UserProfile) -> ProfileMetrics:
    """Return BMI, BMR, TDEE and the estimated goals for a profile."""
    bmr = compute_bmr(profile.weight_kg, profile.height_cm, profile.age)
    goals = estimate_goals(profile)
    return ProfileMetrics(
        goals=goals,
        bmi=compute_bmi(profile.weight_kg, profile.height_cm),
        bmr=round(bmr, 1),
        tdee=goals.kcal,
    )


def _positive_or(value: float | None, default: float | None) -> float | None:
    if value is None or not math.isfinite(value) or value <= 0:
        return default
    return float(value)


class GoalsRepository(Protocol):
    """Persistence interface for user goals."""

    def get_goals(self, user_id: UUID) -> StoredGoals | None:
        """Return stored goals for a user, if any."""

    def save_goals(self, user_id: UUID, goals: Goals, source: GoalSource) -> None:
        """Persist goals for a user."""


@dataclass
class GoalsService:
    """Resolves a user's goals, honoring explicit overrides."""

    repository: GoalsRepository

    def get_goals(self, user_id: UUID, profile: UserProfile) -> StoredGoals:
        """Return stored goals, or an unsaved estimate when none exist."""
        stored = self.repository.get_goals(user_id)
        if stored is not None:
            return stored
        return StoredGoals(goals=estimate_goals(profile), source=GoalSource.ESTIMATED)

    def override_goals(self, user_id: UUID, goals: Goals) -> StoredGoals:
        """Store user-supplied goals that take precedence over estimates."""
        self.repository.save_goals(user_id, goals, GoalSource.OVERRIDE)
        _logger.info("Goals overridden: user_id=%s kcal=%s", user_id, goals.kcal)
        return StoredGoals(goals=goals, source=GoalSource.OVERRIDE)

    def reestimate_goals(self, user_id: UUID, profile: UserProfile) -> StoredGoals:
        """Replace stored goals with a fresh estimate from the profile."""
        goals = estimate_goals(profile)
        self.repository.save_goals(user_id, goals, GoalSource.ESTIMATED)
        _logger.info("Goals re-estimated: user_id=%s kcal=%s", user_id, goals.kcal)
        return StoredGoals(goals=goals, source=GoalSource.ESTIMATED)
