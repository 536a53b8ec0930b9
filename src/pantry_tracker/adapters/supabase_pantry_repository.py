"""Supabase implementation for pantry lots."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from pantry_tracker.domain.inventory import InventoryLot, NutrientsPer100g, Unit
from pantry_tracker.services.allocation import (
    LotConflictError,
    LotStore,
    PantryStoreError,
)

_LOT_COLUMNS = (
    "id,name,quantity,quantity_unit,image_url,deleted_at,"
    "calories_kcal_100g,protein_g_100g,carbs_g_100g,fat_g_100g,sugar_g_100g"
)

_logger = logging.getLogger(__name__)


@dataclass
class SupabasePantryRepository(LotStore):
    """Supabase-backed repository for pantry lots."""

    client: Client
    table: str = "pantry_items"

    def list_active_lots(self) -> list[InventoryLot]:
        """Return lots that are not soft-deleted, newest first."""
        response = (
            self.client.table(self.table)
            .select(_LOT_COLUMNS)
            .is_("deleted_at", "null")
            .order("added_date", desc=True)
            .execute()
        )
        lots: list[InventoryLot] = []
        for row in response.data or []:
            lot = _parse_lot_or_none(row)
            if lot is not None:
                lots.append(lot)
        return lots

    def get_lot(self, lot_id: str) -> InventoryLot | None:
        """Return a lot by id, if present."""
        response = (
            self.client.table(self.table)
            .select(_LOT_COLUMNS)
            .eq("id", lot_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_lot_or_none(response.data[0])

    def update_lot_quantity(
        self, lot_id: str, quantity: float, expected_quantity: float | None = None
    ) -> None:
        """Persist a lot's quantity, guarded by the expected current quantity."""
        self._write(lot_id, {"quantity": quantity}, expected_quantity)

    def retire_lot(self, lot_id: str, expected_quantity: float | None = None) -> None:
        """Zero a lot and soft-delete it in a single update."""
        payload = {
            "quantity": 0,
            "deleted_at": datetime.now(tz=UTC).isoformat(),
        }
        self._write(lot_id, payload, expected_quantity)

    def _write(
        self,
        lot_id: str,
        payload: dict[str, object],
        expected_quantity: float | None,
    ) -> None:
        query = self.client.table(self.table).update(payload).eq("id", lot_id)
        if expected_quantity is not None:
            query = query.eq("quantity", expected_quantity).is_("deleted_at", "null")
        response = query.execute()
        if response.data:
            return
        if expected_quantity is not None and self.get_lot(lot_id) is not None:
            raise LotConflictError(lot_id)
        raise PantryStoreError(f"Failed to update pantry lot {lot_id}")


def _parse_lot_or_none(row: dict[str, object]) -> InventoryLot | None:
    try:
        return _parse_lot(row)
    except (KeyError, TypeError, ValueError) as exc:
        _logger.warning("Skipping pantry row id=%s: %s", row.get("id"), exc)
        return None


def _parse_lot(row: dict[str, object]) -> InventoryLot:
    """Parse a pantry row into a domain model."""
    quantity = row.get("quantity")
    if not isinstance(quantity, int | float) or isinstance(quantity, bool):
        raise ValueError(f"invalid quantity {quantity!r}")
    if quantity < 0:
        raise ValueError(f"negative quantity {quantity!r}")
    image_url = row.get("image_url")
    return InventoryLot(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        quantity=float(quantity),
        unit=Unit.parse(row.get("quantity_unit")),
        nutrients_per_100g=_parse_nutrients(row),
        active=row.get("deleted_at") is None,
        image_url=image_url if isinstance(image_url, str) and image_url else None,
    )


def _parse_nutrients(row: dict[str, object]) -> NutrientsPer100g | None:
    """Return a nutrient profile only when every field is numeric."""
    keys = (
        "calories_kcal_100g",
        "protein_g_100g",
        "carbs_g_100g",
        "fat_g_100g",
        "sugar_g_100g",
    )
    values = [row.get(key) for key in keys]
    if not all(
        isinstance(value, int | float) and not isinstance(value, bool)
        for value in values
    ):
        return None
    calories, protein, carbs, fat, sugar = (float(value) for value in values)
    return NutrientsPer100g(
        calories_kcal=calories,
        protein_g=protein,
        carbs_g=carbs,
        fat_g=fat,
        sugar_g=sugar,
    )
