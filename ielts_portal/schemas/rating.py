# ielts_portal/schemas/rating.py
from datetime import datetime

from pydantic import Field

from ielts_portal.schemas.base import CamelModel


class RatingCreate(CamelModel):
    student_id: int
    mentor_id: int
    score: int = Field(ge=1, le=5)
    comment: str | None = None


class RatingPublic(CamelModel):
    id: int = Field(serialization_alias="ratingId")
    student_id: int | None = None
    student_name: str | None = None
    mentor_id: int | None = None
    mentor_name: str | None = None
    score: int
    comment: str | None = None
    created_at: datetime | None = None


class AverageRating(CamelModel):
    mentor_id: int
    average_score: float
    total_ratings: int
