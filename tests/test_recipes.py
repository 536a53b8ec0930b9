"""Tests for recipe ingredient preparation."""

from pantry_tracker.domain.inventory import IngredientMass, IngredientRequirement, Unit
from pantry_tracker.domain.recipes import RecipeIngredient, RecipeIngredientAmount
from pantry_tracker.services.recipes import (
    consumable_requirements,
    ingredient_masses,
    merge_recipe_ingredients,
)


def test_merge_sums_amounts_with_matching_units() -> None:
    merged = merge_recipe_ingredients(
        ["Olive Oil", "Tomatoes", "olive-oil"],
        [
            RecipeIngredientAmount("olive oil", 10.4, 10, Unit.MILLILITERS),
            RecipeIngredientAmount("Tomatoes", 240, 2, Unit.COUNT),
            RecipeIngredientAmount("Olive  Oil", 5.2, 5, Unit.MILLILITERS),
        ],
    )

    assert merged == [
        RecipeIngredient("Olive Oil", 16, 15, Unit.MILLILITERS),
        RecipeIngredient("Tomatoes", 240, 2, Unit.COUNT),
    ]


def test_merge_drops_unit_on_disagreement_and_keeps_first_quantity() -> None:
    merged = merge_recipe_ingredients(
        ["Butter"],
        [
            RecipeIngredientAmount("Butter", 20, 20, Unit.GRAMS),
            RecipeIngredientAmount("butter", 14, 1, Unit.COUNT),
        ],
    )

    assert merged == [RecipeIngredient("Butter", 34, 20, None)]


def test_merge_fills_missing_unit_and_quantity() -> None:
    merged = merge_recipe_ingredients(
        ["Flour"],
        [
            RecipeIngredientAmount("Flour", 100, None, None),
            RecipeIngredientAmount("Flour", 50, 50, Unit.GRAMS),
        ],
    )

    assert merged == [RecipeIngredient("Flour", 150, 50, Unit.GRAMS)]


def test_merge_skips_unknown_names_and_non_positive_amounts() -> None:
    merged = merge_recipe_ingredients(
        ["Salt", "Pepper"],
        [
            RecipeIngredientAmount("Salt", 0),
            RecipeIngredientAmount("Pepper", 0.4),
            RecipeIngredientAmount("Sugar", 30),
            RecipeIngredientAmount("Salt", float("nan")),
        ],
    )

    assert merged == []


def test_merge_respects_limit() -> None:
    names = [f"Spice {index}" for index in range(20)]
    amounts = [RecipeIngredientAmount(name, 5) for name in names]

    merged = merge_recipe_ingredients(names, amounts, limit=3)

    assert [item.name for item in merged] == ["Spice 0", "Spice 1", "Spice 2"]


def test_consumable_requirements_need_quantity_and_unit() -> None:
    ingredients = [
        RecipeIngredient("Eggs", 100, 2, Unit.COUNT),
        RecipeIngredient("Butter", 34, 20, None),
        RecipeIngredient("Salt", 2, None, Unit.GRAMS),
        RecipeIngredient("Milk", 250, 250, Unit.MILLILITERS),
    ]

    assert consumable_requirements(ingredients) == [
        IngredientRequirement("Eggs", 2, Unit.COUNT),
        IngredientRequirement("Milk", 250, Unit.MILLILITERS),
    ]


def test_ingredient_masses() -> None:
    ingredients = [RecipeIngredient("Eggs", 100, 2, Unit.COUNT)]

    assert ingredient_masses(ingredients) == [IngredientMass("Eggs", 100)]
