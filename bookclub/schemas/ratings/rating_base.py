from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class RatingIn(BaseModel):
    storyline: int = Field(..., ge=1, le=5)
    characters: int = Field(..., ge=1, le=5)
    spice: int = Field(..., ge=1, le=5)


class AverageRatings(BaseModel):
    storyline: float = 0
    characters: float = 0
    spice: float = 0


class ReviewOut(BaseModel):
    user_id: UUID
    user_name: str
    storyline: int
    characters: int
    spice: int
    rated_at: datetime
