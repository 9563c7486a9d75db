"""Quick-add meal presets."""

from nutribuddy.domain.nutrition import SuggestedMeal

SUGGESTED_MEALS: tuple[SuggestedMeal, ...] = (
    SuggestedMeal(
        title="Grilled paneer bowl", kcal=420, protein_g=30, carbs_g=40, fat_g=10
    ),
    SuggestedMeal(
        title="Quinoa salad with roasted veg",
        kcal=350,
        protein_g=12,
        carbs_g=50,
        fat_g=10,
    ),
    SuggestedMeal(
        title="Chickpea curry + brown rice",
        kcal=560,
        protein_g=20,
        carbs_g=80,
        fat_g=12,
    ),
)


def suggested_meals() -> list[SuggestedMeal]:
    """Return the quick-add meals in display order."""
    return list(SUGGESTED_MEALS)
