"""Domain models for the rolling daily log."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DailyLog:
    """Running totals for a single calendar day."""

    date_key: str
    kcal: int = 0
    protein_g: int = 0
    carbs_g: int = 0
    fat_g: int = 0


@dataclass(frozen=True)
class DailyProgress:
    """Logged totals relative to goals, each clamped to [0, 1]."""

    kcal_ratio: float
    protein_ratio: float
    carbs_ratio: float
    fat_ratio: float
    kcal_percent: int
