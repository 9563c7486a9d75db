"""Best-effort nutrient extraction from free text."""

import logging
import re

from nutribuddy.domain.nutrition import NutrientRecord, ParsedNutrients
from nutribuddy.domain.profile import Goals
from nutribuddy.services.goals import (
    KCAL_PER_G_CARBS,
    KCAL_PER_G_FAT,
    KCAL_PER_G_PROTEIN,
    round_half_up,
)

DEFAULT_GOAL_KCAL = 2000

_KCAL_PATTERN = re.compile(r"\b(\d{2,5})\s*kcal", re.IGNORECASE)

_QUANTITY = r"(?<![\d.])(\d{1,4}(?:\.\d+)?)\s*g(?:rams?)?\b"
_KEYWORDS = {
    "protein_g": r"proteins?",
    "carbs_g": r"carb(?:s|ohydrates?)?",
    "fat_g": r"fats?",
}
# "30g protein", "30 grams of protein"
_QUANTITY_FIRST = {
    field: re.compile(rf"{_QUANTITY}\s*(?:of\s+)?{keyword}\b", re.IGNORECASE)
    for field, keyword in _KEYWORDS.items()
}
# "protein: 30g", "protein 30 g"
_KEYWORD_FIRST = {
    field: re.compile(rf"\b{keyword}\s*[:=-]?\s*{_QUANTITY}", re.IGNORECASE)
    for field, keyword in _KEYWORDS.items()
}

_PER_GRAM = {
    "protein_g": KCAL_PER_G_PROTEIN,
    "carbs_g": KCAL_PER_G_CARBS,
    "fat_g": KCAL_PER_G_FAT,
}

_logger = logging.getLogger(__name__)


def parse_nutrients(text: str | None) -> ParsedNutrients | None:
    """Find kcal and macro gram mentions in text.

    A gram quantity is only assigned to a macro when a macro keyword sits
    right next to it. Both "30g protein" and "protein: 30g" are read; the
    earliest mention of each macro wins and a number is never assigned to
    two macros. Returns None when nothing was found.
    """
    if not text:
        return None

    kcal_match = _KCAL_PATTERN.search(text)
    kcal = float(kcal_match.group(1)) if kcal_match else None
    macros = _match_macros(text)

    if kcal is None and not macros:
        return None
    return ParsedNutrients(
        kcal=kcal,
        protein_g=macros.get("protein_g"),
        carbs_g=macros.get("carbs_g"),
        fat_g=macros.get("fat_g"),
    )


def split_by_goal_ratio(kcal: float, goals: Goals) -> NutrientRecord:
    """Split calories into macros using the calorie mix of the goals.

    Carbs take whatever share of the goal calories protein and fat leave.
    """
    total = goals.kcal if goals.kcal > 0 else DEFAULT_GOAL_KCAL
    protein_kcal = max(0, goals.protein_g) * KCAL_PER_G_PROTEIN
    fat_kcal = max(0, goals.fat_g) * KCAL_PER_G_FAT
    carbs_kcal = max(0, total - protein_kcal - fat_kcal)
    basis = max(total, protein_kcal + fat_kcal)

    return _normalize(
        kcal=kcal,
        protein_g=kcal * protein_kcal / basis / KCAL_PER_G_PROTEIN,
        carbs_g=kcal * carbs_kcal / basis / KCAL_PER_G_CARBS,
        fat_g=kcal * fat_kcal / basis / KCAL_PER_G_FAT,
    )


def backfill_missing_macros(parsed: ParsedNutrients, goals: Goals) -> NutrientRecord:
    """Fill in kcal and missing macros from what was stated.

    Missing kcal is derived from the known macros. Calories not covered by
    the known macros are shared across the missing ones in proportion to
    their calorie weight in the goals.
    """
    known = {
        "protein_g": parsed.protein_g,
        "carbs_g": parsed.carbs_g,
        "fat_g": parsed.fat_g,
    }
    used = sum(
        grams * _PER_GRAM[field] for field, grams in known.items() if grams is not None
    )
    kcal = parsed.kcal if parsed.kcal is not None else used

    missing = [field for field, grams in known.items() if grams is None]
    goal_kcal = {
        "protein_g": max(0, goals.protein_g) * KCAL_PER_G_PROTEIN,
        "carbs_g": max(0, goals.carbs_g) * KCAL_PER_G_CARBS,
        "fat_g": max(0, goals.fat_g) * KCAL_PER_G_FAT,
    }
    remaining = max(0.0, kcal - used)
    missing_weight = sum(goal_kcal[field] for field in missing)

    filled = dict(known)
    for field in missing:
        if missing_weight > 0:
            share = goal_kcal[field] / missing_weight
            filled[field] = remaining * share / _PER_GRAM[field]
        else:
            filled[field] = 0.0

    return _normalize(kcal=kcal, **filled)


def extract_nutrients(text: str | None, goals: Goals) -> NutrientRecord | None:
    """Extract a fully populated nutrient record from text.

    Returns None when the text holds no recognizable nutrition numbers.
    """
    parsed = parse_nutrients(text)
    if parsed is None:
        _logger.info("No nutrition data found in text")
        return None
    if parsed.kcal is not None and not parsed.has_any_macro:
        return split_by_goal_ratio(parsed.kcal, goals)
    return backfill_missing_macros(parsed, goals)


def _match_macros(text: str) -> dict[str, float]:
    candidates = [
        (match.start(), match.span(1), field, float(match.group(1)))
        for patterns in (_QUANTITY_FIRST, _KEYWORD_FIRST)
        for field, pattern in patterns.items()
        for match in pattern.finditer(text)
    ]
    found: dict[str, float] = {}
    used_numbers: set[tuple[int, int]] = set()
    for _, number_span, field, value in sorted(candidates):
        if field in found or number_span in used_numbers:
            continue
        found[field] = value
        used_numbers.add(number_span)
    return found


def _normalize(
    *, kcal: float, protein_g: float, carbs_g: float, fat_g: float
) -> NutrientRecord:
    return NutrientRecord(
        kcal=max(0, round_half_up(kcal)),
        protein_g=max(0, round_half_up(protein_g)),
        carbs_g=max(0, round_half_up(carbs_g)),
        fat_g=max(0, round_half_up(fat_g)),
    )
