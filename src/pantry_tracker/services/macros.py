"""Recipe macro aggregation from pantry nutrient profiles."""

import math

from pantry_tracker.domain.inventory import (
    IngredientMass,
    InventoryLot,
    MacroTotals,
    round_half_up,
)
from pantry_tracker.services.matching import CanonicalIndex, canonicalize


def aggregate_macros(
    masses: list[IngredientMass], lots: list[InventoryLot], servings: float
) -> MacroTotals | None:
    """Compute per-serving macros weighted by the grams of each ingredient.

    Each name uses its best-matching active lot regardless of unit. Names with
    no match or no nutrient profile are skipped; ``None`` is returned when
    nothing contributed.
    """
    index = CanonicalIndex.build(lots, lambda lot: lot.name)
    calories = protein = carbs = fat = sugar = 0.0
    contributed = False
    for mass in masses:
        if not math.isfinite(mass.mass_g) or mass.mass_g <= 0:
            continue
        lot = index.best(canonicalize(mass.name), where=lambda item: item.active)
        if lot is None or lot.nutrients_per_100g is None:
            continue
        nutrients = lot.nutrients_per_100g
        factor = mass.mass_g / 100
        calories += nutrients.calories_kcal * factor
        protein += nutrients.protein_g * factor
        carbs += nutrients.carbs_g * factor
        fat += nutrients.fat_g * factor
        sugar += nutrients.sugar_g * factor
        contributed = True

    if not contributed:
        return None

    divisor = _serving_divisor(servings)
    return MacroTotals(
        calories_kcal=round_half_up(calories / divisor),
        protein_g=round_half_up(protein / divisor, 1),
        carbs_g=round_half_up(carbs / divisor, 1),
        fat_g=round_half_up(fat / divisor, 1),
        sugar_g=round_half_up(sugar / divisor, 1),
    )


def _serving_divisor(servings: float) -> int:
    if not math.isfinite(servings):
        return 1
    return max(1, math.floor(servings))
