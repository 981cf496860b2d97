# ielts_portal/schemas/submission.py
from datetime import datetime

from pydantic import Field, field_validator

from ielts_portal.schemas.answers import EXAM_TYPES
from ielts_portal.schemas.base import CamelModel


class SubmissionCreate(CamelModel):
    user_id: int
    exam_type: str
    exam_id: int
    exam_course_id: int | None = None
    answers: str  # JSON string, shape depends on exam_type
    total_word_count: int | None = Field(default=None, ge=0)
    time_spent: int | None = Field(default=None, ge=0)  # seconds
    submitted_at: datetime | None = None

    @field_validator("exam_type")
    @classmethod
    def normalise_exam_type(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in EXAM_TYPES:
            raise ValueError(f"examType must be one of: {', '.join(EXAM_TYPES)}")
        return v


class SubmissionPublic(CamelModel):
    id: int = Field(serialization_alias="submissionId")
    user_id: int | None = None
    exam_course_id: int | None = None
    exam_type: str
    exam_id: int | None = None
    answers: str | None = None
    total_word_count: int | None = None
    time_spent: int | None = None
    submitted_at: datetime | None = None

    # AI scoring (writing)
    ai_score: float | None = None
    ai_task_achievement_score: int | None = None
    ai_task_achievement_feedback: str | None = None
    ai_coherence_cohesion_score: int | None = None
    ai_coherence_cohesion_feedback: str | None = None
    ai_lexical_resource_score: int | None = None
    ai_lexical_resource_feedback: str | None = None
    ai_grammatical_range_score: int | None = None
    ai_grammatical_range_feedback: str | None = None
    ai_general_feedback: str | None = None

    mentor_score: float | None = None
    status: str


class SubmissionHistoryItem(SubmissionPublic):
    """A row of the student's history page."""
    exam_title: str | None = None
    course_title: str | None = None
    course_code: str | None = None
    reply_count: int = 0
    time_spent_formatted: str
    score_formatted: str


class MentorQueueItem(SubmissionPublic):
    student_name: str | None = None


class RescoreResponse(CamelModel):
    submission_id: int
    job_id: str


class QuestionResult(CamelModel):
    question_id: int
    user_answer: str | None = None
    correct_answer: str | None = None
    is_correct: bool
    points: int


class SubmissionResult(CamelModel):
    submission_id: int
    user_id: int | None = None
    exam_type: str
    exam_id: int | None = None
    exam_course_id: int | None = None
    time_spent: int | None = None
    submitted_at: datetime | None = None
    score: float
    correct_answers: int
    total_questions: int
    question_results: list[QuestionResult] = []
