"""Domain models for recipe ingredient lines."""

from dataclasses import dataclass

from pantry_tracker.domain.inventory import Unit


@dataclass(frozen=True)
class RecipeIngredientAmount:
    """Raw amount line as produced by recipe generation."""

    name: str
    amount_g: float
    quantity: float | None = None
    unit: Unit | None = None


@dataclass(frozen=True)
class RecipeIngredient:
    """Ingredient line merged across duplicate spellings."""

    name: str
    amount_g: float
    quantity: float | None
    unit: Unit | None
