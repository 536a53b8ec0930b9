"""Domain models for pantry inventory and ingredient consumption."""

import math
from dataclasses import dataclass
from enum import StrEnum

_UNIT_ALIASES = {
    "count": "count",
    "g": "g",
    "gram": "g",
    "grams": "g",
    "ml": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
}


def round_half_up(value: float, places: int = 0) -> float:
    """Round to ``places`` decimals with halves rounded toward +inf."""
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


class Unit(StrEnum):
    """Unit a lot or requirement is measured in. Never converted."""

    COUNT = "count"
    GRAMS = "g"
    MILLILITERS = "ml"

    @classmethod
    def parse(cls, raw: object) -> "Unit":
        """Parse a stored or requested unit, defaulting missing values to count."""
        if raw is None:
            return cls.COUNT
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise ValueError(f"Unsupported unit: {raw!r}")
        cleaned = raw.strip().lower()
        if not cleaned:
            return cls.COUNT
        if cleaned not in _UNIT_ALIASES:
            raise ValueError(f"Unsupported unit: {raw!r}")
        return cls(_UNIT_ALIASES[cleaned])

    def round(self, value: float) -> float:
        """Round a quantity to this unit's granularity."""
        if self is Unit.COUNT:
            return round_half_up(value, 0)
        return round_half_up(value, 2)


@dataclass(frozen=True)
class NutrientsPer100g:
    """Fully populated nutrient profile per 100 grams."""

    calories_kcal: float
    protein_g: float
    carbs_g: float
    fat_g: float
    sugar_g: float


@dataclass
class InventoryLot:
    """One pantry record with its own remaining quantity."""

    id: str
    name: str
    quantity: float
    unit: Unit
    nutrients_per_100g: NutrientsPer100g | None = None
    active: bool = True
    image_url: str | None = None


@dataclass(frozen=True)
class IngredientRequirement:
    """One ingredient line a recipe needs from the pantry."""

    name: str
    quantity: float
    unit: Unit


@dataclass(frozen=True)
class IngredientMass:
    """Ingredient name with the grams a recipe uses."""

    name: str
    mass_g: float


@dataclass
class AllocationResult:
    """Counters for a whole consumption request."""

    updated: int = 0
    retired: int = 0
    unsatisfied: int = 0

    @property
    def advisory(self) -> str:
        """User-facing summary of the consumption outcome."""
        if self.unsatisfied > 0:
            return "Pantry updated (some items couldn't be matched)."
        return "Pantry updated."


@dataclass(frozen=True)
class MacroTotals:
    """Per-serving macro totals for a recipe."""

    calories_kcal: float | None
    protein_g: float | None
    carbs_g: float | None
    fat_g: float | None
    sugar_g: float | None
