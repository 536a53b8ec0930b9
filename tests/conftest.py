"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from uuid import uuid4

import pytest

from pantry_tracker.config import Settings
from pantry_tracker.containers import AppContainer
from pantry_tracker.domain.inventory import InventoryLot, NutrientsPer100g, Unit
from pantry_tracker.services.allocation import (
    AllocationEngine,
    LotConflictError,
    LotStore,
    PantryStoreError,
)
from pantry_tracker.services.pantry import PantryService


def make_lot(
    name: str,
    quantity: float,
    unit: Unit = Unit.GRAMS,
    nutrients: NutrientsPer100g | None = None,
    image_url: str | None = None,
) -> InventoryLot:
    return InventoryLot(
        id=str(uuid4()),
        name=name,
        quantity=quantity,
        unit=unit,
        nutrients_per_100g=nutrients,
        image_url=image_url,
    )


@dataclass
class InMemoryLotStore(LotStore):
    """In-memory lot store with compare-and-set semantics for tests."""

    lots: dict[str, InventoryLot] = field(default_factory=dict)
    writes: list[tuple[str, str, float]] = field(default_factory=list)
    concurrent_changes: dict[str, list[float]] = field(default_factory=dict)
    failing_ids: set[str] = field(default_factory=set)

    @classmethod
    def with_lots(cls, *lots: InventoryLot) -> "InMemoryLotStore":
        return cls(lots={lot.id: replace(lot) for lot in lots})

    def list_active_lots(self) -> list[InventoryLot]:
        return [replace(lot) for lot in self.lots.values() if lot.active]

    def get_lot(self, lot_id: str) -> InventoryLot | None:
        lot = self.lots.get(lot_id)
        return replace(lot) if lot else None

    def update_lot_quantity(
        self, lot_id: str, quantity: float, expected_quantity: float | None = None
    ) -> None:
        self._check(lot_id, expected_quantity)
        self.lots[lot_id].quantity = quantity
        self.writes.append(("update", lot_id, quantity))

    def retire_lot(self, lot_id: str, expected_quantity: float | None = None) -> None:
        self._check(lot_id, expected_quantity)
        self.lots[lot_id].quantity = 0
        self.lots[lot_id].active = False
        self.writes.append(("retire", lot_id, 0))

    def _check(self, lot_id: str, expected_quantity: float | None) -> None:
        if lot_id in self.failing_ids or lot_id not in self.lots:
            raise PantryStoreError(f"Failed to update pantry lot {lot_id}")
        pending = self.concurrent_changes.get(lot_id)
        if pending:
            self.lots[lot_id].quantity = pending.pop(0)
        if (
            expected_quantity is not None
            and self.lots[lot_id].quantity != expected_quantity
        ):
            raise LotConflictError(lot_id)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        api_token="api-token",
    )


@pytest.fixture
def lot_store() -> InMemoryLotStore:
    return InMemoryLotStore()


@pytest.fixture
def pantry_service(lot_store: InMemoryLotStore) -> PantryService:
    return PantryService(store=lot_store, engine=AllocationEngine(store=lot_store))


@pytest.fixture
def container(settings: Settings, pantry_service: PantryService) -> AppContainer:
    return AppContainer(settings=settings, pantry_service=pantry_service)
