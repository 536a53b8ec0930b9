"""Preparation of recipe ingredient lines for pantry consumption."""

import math
from dataclasses import dataclass

from pantry_tracker.domain.inventory import (
    IngredientMass,
    IngredientRequirement,
    Unit,
    round_half_up,
)
from pantry_tracker.domain.recipes import RecipeIngredient, RecipeIngredientAmount
from pantry_tracker.services.matching import canonicalize, unique_by_canonical

MAX_RECIPE_INGREDIENTS = 14


@dataclass
class _MergedAmount:
    amount_g: float
    quantity: float | None
    unit: Unit | None


def merge_recipe_ingredients(
    used_names: list[str],
    amounts: list[RecipeIngredientAmount],
    limit: int = MAX_RECIPE_INGREDIENTS,
) -> list[RecipeIngredient]:
    """Merge amount lines that share a canonical name.

    Output follows ``used_names`` order. Grams always add up; quantities only
    add when both lines agree on the unit.
    """
    names = unique_by_canonical(used_names, limit)
    known_keys = {canonicalize(name) for name in names}
    merged: dict[str, _MergedAmount] = {}
    for amount in amounts:
        key = canonicalize(amount.name)
        if not key or key not in known_keys:
            continue
        if not math.isfinite(amount.amount_g) or amount.amount_g <= 0:
            continue
        quantity = _positive_or_none(amount.quantity)
        existing = merged.get(key)
        if existing is None:
            merged[key] = _MergedAmount(amount.amount_g, quantity, amount.unit)
            continue
        existing.amount_g += amount.amount_g
        existing.quantity, existing.unit = _merge_quantity(
            existing.quantity, existing.unit, quantity, amount.unit
        )

    ingredients: list[RecipeIngredient] = []
    for name in names:
        entry = merged.get(canonicalize(name))
        if entry is None:
            continue
        amount_g = round_half_up(entry.amount_g)
        if amount_g <= 0:
            continue
        ingredients.append(
            RecipeIngredient(
                name=name,
                amount_g=amount_g,
                quantity=entry.quantity,
                unit=entry.unit,
            )
        )
    return ingredients[:limit]


def consumable_requirements(
    ingredients: list[RecipeIngredient],
) -> list[IngredientRequirement]:
    """Return the lines that carry a usable quantity and unit."""
    requirements: list[IngredientRequirement] = []
    for ingredient in ingredients:
        quantity = _positive_or_none(ingredient.quantity)
        if quantity is None or ingredient.unit is None:
            continue
        requirements.append(
            IngredientRequirement(
                name=ingredient.name, quantity=quantity, unit=ingredient.unit
            )
        )
    return requirements


def ingredient_masses(ingredients: list[RecipeIngredient]) -> list[IngredientMass]:
    """Return the gram amounts used for macro aggregation."""
    return [
        IngredientMass(name=ingredient.name, mass_g=ingredient.amount_g)
        for ingredient in ingredients
    ]


def _merge_quantity(
    quantity: float | None,
    unit: Unit | None,
    other_quantity: float | None,
    other_unit: Unit | None,
) -> tuple[float | None, Unit | None]:
    if unit is not None and other_unit is not None:
        merged_unit = unit if unit == other_unit else None
    else:
        merged_unit = unit if unit is not None else other_unit
    if quantity is not None and other_quantity is not None and merged_unit:
        return quantity + other_quantity, merged_unit
    return (quantity if quantity is not None else other_quantity), merged_unit


def _positive_or_none(value: float | None) -> float | None:
    if value is None or not math.isfinite(value) or value <= 0:
        return None
    return value
