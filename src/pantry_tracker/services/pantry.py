"""Pantry service exposed to the application layer."""

from dataclasses import dataclass

from pantry_tracker.domain.inventory import (
    AllocationResult,
    IngredientMass,
    IngredientRequirement,
    InventoryLot,
    MacroTotals,
)
from pantry_tracker.domain.recipes import RecipeIngredient
from pantry_tracker.services.allocation import AllocationEngine, LotStore
from pantry_tracker.services.macros import aggregate_macros
from pantry_tracker.services.matching import CanonicalIndex, canonicalize
from pantry_tracker.services.recipes import (
    consumable_requirements,
    ingredient_masses,
)


@dataclass
class PantryService:
    """Application service for pantry consumption and recipe nutrition."""

    store: LotStore
    engine: AllocationEngine

    def consume(
        self,
        requirements: list[IngredientRequirement],
        lots: list[InventoryLot] | None = None,
    ) -> AllocationResult:
        """Subtract requirements from the pantry."""
        return self.engine.consume(requirements, lots)

    def consume_recipe(self, ingredients: list[RecipeIngredient]) -> AllocationResult:
        """Subtract a recipe's consumable ingredient lines from the pantry."""
        return self.engine.consume(consumable_requirements(ingredients))

    def aggregate_macros(
        self,
        masses: list[IngredientMass],
        lots: list[InventoryLot] | None = None,
        servings: float = 1,
    ) -> MacroTotals | None:
        """Compute per-serving macros, reading the pantry when no lots are given."""
        resolved = self.store.list_active_lots() if lots is None else lots
        return aggregate_macros(masses, resolved, servings)

    def recipe_macros(
        self, ingredients: list[RecipeIngredient], servings: float
    ) -> MacroTotals | None:
        """Compute per-serving macros for merged recipe lines."""
        return self.aggregate_macros(ingredient_masses(ingredients), None, servings)

    @staticmethod
    def pick_image_url(name: str, lots: list[InventoryLot]) -> str | None:
        """Return the image of the best-matching active lot that has one."""
        index = CanonicalIndex.build(lots, lambda lot: lot.name)
        lot = index.best(
            canonicalize(name),
            where=lambda item: item.active and bool(item.image_url),
        )
        return lot.image_url if lot else None
