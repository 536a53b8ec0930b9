"""Pydantic models for pantry API payloads."""

from pydantic import BaseModel, Field, field_validator

from pantry_tracker.domain.inventory import Unit


class ConsumeIngredient(BaseModel):
    """Ingredient line to subtract from the pantry."""

    name: str
    quantity: float = Field(gt=0, allow_inf_nan=False)
    quantity_unit: Unit

    @field_validator("quantity_unit", mode="before")
    @classmethod
    def _parse_unit(cls, value: object) -> Unit:
        return Unit.parse(value)


class ConsumeRequest(BaseModel):
    """Request body for recipe consumption."""

    ingredients: list[ConsumeIngredient] = Field(default_factory=list)


class ConsumeResponse(BaseModel):
    """Outcome of a consumption request."""

    ok: bool
    updated: int
    retired: int
    skipped: int
    message: str


class IngredientAmount(BaseModel):
    """Ingredient name with grams used by a recipe."""

    name: str
    amount_g: float = Field(allow_inf_nan=False)


class MacrosRequest(BaseModel):
    """Request body for recipe macro computation."""

    servings: float = Field(default=1, allow_inf_nan=False)
    ingredients: list[IngredientAmount] = Field(default_factory=list)


class MacrosPerServing(BaseModel):
    """Per-serving macro totals."""

    calories_kcal: float | None
    protein_g: float | None
    carbs_g: float | None
    fat_g: float | None
    sugar_g: float | None


class MacrosResponse(BaseModel):
    """Macro computation outcome; ``None`` when no ingredient had a profile."""

    macros_per_serving: MacrosPerServing | None
