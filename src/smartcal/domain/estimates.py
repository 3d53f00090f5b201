"""Models for AI nutrition estimates."""

from pydantic import BaseModel, Field


class EstimatedFood(BaseModel):
    """Single food item estimated by the language model."""

    name: str
    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)


class FoodTextEstimate(BaseModel):
    """Structured output for a meal text estimate."""

    items: list[EstimatedFood] = Field(min_length=1)


class ImageEstimate(EstimatedFood):
    """Structured output for a food photo estimate."""

    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    note: str | None = None
