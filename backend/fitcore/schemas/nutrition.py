"""Nutrition schemas."""
import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Meal(BaseModel):
    """A logged meal. Macros are fixed at creation."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(..., min_length=1)
    calories: int = Field(..., ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    timestamp: datetime


class FoodCandidate(BaseModel):
    """Food record returned by a lookup, with values per 100g."""

    model_config = ConfigDict(frozen=True)

    name: str
    calories_per_100g: float = Field(..., ge=0)
    protein_per_100g: float = Field(default=0.0, ge=0)
    carbs_per_100g: float = Field(default=0.0, ge=0)
    fat_per_100g: float = Field(default=0.0, ge=0)


class ScaledServing(BaseModel):
    """Macros for a concrete serving weight."""
    grams: float
    calories: int
    protein: float
    carbs: float
    fat: float


class DailyTotals(BaseModel):
    """Sum of today's meals."""
    calories: int = 0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    meals_count: int = 0


class MacroProgress(BaseModel):
    """Consumption of a single macro against its target."""
    current: float
    target: float
    fraction: float


class ProgressBand(str, enum.Enum):
    """Classification of calorie progress against the adjusted target."""
    NOMINAL = "nominal"  # below 90%
    NEAR_LIMIT = "near_limit"  # 90% up to 105%
    OVER_LIMIT = "over_limit"  # 105% and above
