"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParsedNutrients:
    """Raw quantities found in text; any field may be missing."""

    kcal: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None

    @property
    def has_any_macro(self) -> bool:
        return any(
            value is not None for value in (self.protein_g, self.carbs_g, self.fat_g)
        )


@dataclass(frozen=True)
class NutrientRecord:
    """Fully populated nutrient quantities for one logged item."""

    kcal: int
    protein_g: int
    carbs_g: int
    fat_g: int


@dataclass(frozen=True)
class SuggestedMeal:
    """Quick-add meal preset."""

    title: str
    kcal: int
    protein_g: int
    carbs_g: int
    fat_g: int

    def as_text(self) -> str:
        """Render the meal the way a user would type it."""
        return (
            f"{self.title} - {self.kcal} kcal, {self.protein_g}g protein, "
            f"{self.carbs_g}g carbs, {self.fat_g}g fat"
        )
