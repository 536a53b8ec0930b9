"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from pantry_tracker.adapters.supabase_pantry_repository import (
    SupabasePantryRepository,
)
from pantry_tracker.config import Settings
from pantry_tracker.services.allocation import AllocationEngine
from pantry_tracker.services.pantry import PantryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    pantry_service: PantryService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    pantry_repository = SupabasePantryRepository(
        supabase_client, table=resolved_settings.pantry_table
    )
    engine = AllocationEngine(
        store=pantry_repository,
        max_conflict_retries=resolved_settings.max_conflict_retries,
    )
    return AppContainer(
        settings=resolved_settings,
        pantry_service=PantryService(store=pantry_repository, engine=engine),
    )
