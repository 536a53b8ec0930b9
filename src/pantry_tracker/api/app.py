"""FastAPI application factory."""

import logging
from dataclasses import asdict

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from pantry_tracker.api.models import (
    ConsumeRequest,
    ConsumeResponse,
    MacrosPerServing,
    MacrosRequest,
    MacrosResponse,
)
from pantry_tracker.app_logging import configure_logging
from pantry_tracker.containers import AppContainer
from pantry_tracker.domain.inventory import IngredientMass, IngredientRequirement
from pantry_tracker.services.allocation import PantryStoreError


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.exception_handler(PantryStoreError)
    async def pantry_store_error(
        request: Request, exc: PantryStoreError
    ) -> JSONResponse:
        logger.error("Pantry store failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"ok": False, "error": "Could not update pantry. Try again."},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/pantry/consume", dependencies=[Depends(require_token)])
    def consume(body: ConsumeRequest, request: Request) -> ConsumeResponse:
        """Subtract a recipe's ingredients from the pantry."""
        state_container: AppContainer = request.app.state.container
        requirements = [
            IngredientRequirement(
                name=item.name, quantity=item.quantity, unit=item.quantity_unit
            )
            for item in body.ingredients
        ]
        result = state_container.pantry_service.consume(requirements)
        return ConsumeResponse(
            ok=True,
            updated=result.updated,
            retired=result.retired,
            skipped=result.unsatisfied,
            message=result.advisory,
        )

    @app.post("/recipes/macros", dependencies=[Depends(require_token)])
    def recipe_macros(body: MacrosRequest, request: Request) -> MacrosResponse:
        """Compute per-serving macros from pantry nutrient profiles."""
        state_container: AppContainer = request.app.state.container
        masses = [
            IngredientMass(name=item.name, mass_g=item.amount_g)
            for item in body.ingredients
        ]
        totals = state_container.pantry_service.aggregate_macros(
            masses, servings=body.servings
        )
        if totals is None:
            return MacrosResponse(macros_per_serving=None)
        return MacrosResponse(macros_per_serving=MacrosPerServing(**asdict(totals)))

    return app
