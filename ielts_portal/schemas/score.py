# ielts_portal/schemas/score.py
from decimal import ROUND_HALF_UP, Decimal

from pydantic import Field, field_validator

from ielts_portal.schemas.base import CamelModel


class CriterionScore(CamelModel):
    score: int = Field(ge=0, le=9)
    feedback: str = ""


class WritingScoreResult(CamelModel):
    """Band scores returned by the AI examiner, one per IELTS criterion."""
    overall_band: Decimal = Field(ge=0, le=9)
    task_achievement: CriterionScore
    coherence_cohesion: CriterionScore
    lexical_resource: CriterionScore
    grammatical_range: CriterionScore
    general_feedback: str = ""

    @field_validator("overall_band")
    @classmethod
    def round_to_half_band(cls, v: Decimal) -> Decimal:
        # IELTS bands move in 0.5 steps
        return (v * 2).quantize(Decimal("1"), rounding=ROUND_HALF_UP) / 2


class GradeSubmission(CamelModel):
    mentor_score: Decimal = Field(ge=0, le=10)
    feedback_content: str = ""
    status: str = "Graded"
    mentor_id: int
