"""Allocation of recipe requirements against pantry lots."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pantry_tracker.domain.inventory import (
    AllocationResult,
    IngredientRequirement,
    InventoryLot,
)
from pantry_tracker.services.matching import CanonicalIndex, canonicalize

_logger = logging.getLogger(__name__)


class PantryStoreError(RuntimeError):
    """Raised when the pantry store fails to persist a change."""


class LotConflictError(PantryStoreError):
    """Raised when a lot changed between read and compare-and-set write."""

    def __init__(self, lot_id: str) -> None:
        super().__init__(f"Pantry lot {lot_id} was modified concurrently")
        self.lot_id = lot_id


class LotStore(Protocol):
    """Persistence interface for pantry lots."""

    def list_active_lots(self) -> list[InventoryLot]:
        """Return active lots in stable listing order."""

    def get_lot(self, lot_id: str) -> InventoryLot | None:
        """Return a fresh copy of a lot, if present."""

    def update_lot_quantity(
        self, lot_id: str, quantity: float, expected_quantity: float | None = None
    ) -> None:
        """Persist a new quantity, optionally guarded by the expected current one."""

    def retire_lot(self, lot_id: str, expected_quantity: float | None = None) -> None:
        """Zero a lot's quantity and mark it inactive in one write."""


@dataclass
class AllocationEngine:
    """Drains pantry lots to satisfy ingredient requirements."""

    store: LotStore
    max_conflict_retries: int = 3

    def consume(
        self,
        requirements: list[IngredientRequirement],
        lots: list[InventoryLot] | None = None,
    ) -> AllocationResult:
        """Consume every requirement from the pantry.

        Lots are read once (or taken from ``lots``) and mutated in place as they
        are drained. Unmatched and partially met requirements are counted in
        ``unsatisfied``; partial consumption is kept. Store failures propagate.
        """
        snapshot = self.store.list_active_lots() if lots is None else lots
        index = CanonicalIndex.build(snapshot, lambda lot: lot.name)
        result = AllocationResult()
        for requirement in requirements:
            remaining = self._allocate(requirement, index, result)
            if remaining > 0:
                result.unsatisfied += 1
                _logger.info(
                    "Requirement not fully met: name=%s unit=%s remaining=%s",
                    requirement.name,
                    requirement.unit,
                    remaining,
                )
        _logger.info(
            "Pantry consumption: requirements=%s updated=%s retired=%s unsatisfied=%s",
            len(requirements),
            result.updated,
            result.retired,
            result.unsatisfied,
        )
        return result

    def _allocate(
        self,
        requirement: IngredientRequirement,
        index: CanonicalIndex[InventoryLot],
        result: AllocationResult,
    ) -> float:
        """Drain matching lots in listing order and return the unmet quantity."""
        unit = requirement.unit
        remaining = unit.round(requirement.quantity)
        if remaining <= 0:
            return 0.0
        target = canonicalize(requirement.name)
        candidates = [
            lot
            for lot, _score in index.candidates(target)
            if lot.active and lot.unit == unit
        ]
        for lot in candidates:
            if remaining <= 0:
                break
            taken = self._drain(lot, remaining, result)
            remaining = unit.round(remaining - taken)
        return remaining

    def _drain(
        self, lot: InventoryLot, wanted: float, result: AllocationResult
    ) -> float:
        """Take up to ``wanted`` from a lot and persist it; return the amount taken."""
        attempt = 0
        while True:
            # The write guard compares against the stored value, not the rounded one.
            observed = lot.quantity
            available = lot.unit.round(observed)
            if not lot.active or available <= 0:
                return 0.0
            take = min(available, wanted)
            left = lot.unit.round(available - take)
            try:
                if left <= 0:
                    self.store.retire_lot(lot.id, expected_quantity=observed)
                else:
                    self.store.update_lot_quantity(
                        lot.id, left, expected_quantity=observed
                    )
            except LotConflictError:
                attempt += 1
                _logger.warning(
                    "Pantry lot conflict (attempt %s/%s): lot_id=%s",
                    attempt,
                    self.max_conflict_retries + 1,
                    lot.id,
                )
                if attempt > self.max_conflict_retries:
                    raise
                self._refresh(lot)
                continue
            if left <= 0:
                lot.quantity = 0.0
                lot.active = False
                result.retired += 1
            else:
                lot.quantity = left
                result.updated += 1
            return take

    def _refresh(self, lot: InventoryLot) -> None:
        """Reload a lot's quantity and state after a write conflict."""
        fresh = self.store.get_lot(lot.id)
        if fresh is None:
            lot.quantity = 0.0
            lot.active = False
            return
        lot.quantity = fresh.quantity
        lot.active = fresh.active
