# ielts_portal/schemas/exam_set.py
from datetime import datetime

from pydantic import Field

from ielts_portal.schemas.base import CamelModel


class ExamSetCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    target_questions: int = Field(default=5, ge=0)
    reading_context: str | None = None
    reading_image: str | None = None
    listening_image: str | None = None


class ExamSetUpdate(CamelModel):
    exam_set_title: str = Field(min_length=1, max_length=255)
    total_questions: int = Field(default=5, ge=0)


class ExamSetSummary(CamelModel):
    exam_set_id: int
    exam_set_title: str
    exam_set_code: str
    exam_type: str
    total_questions: int  # target
    question_count: int  # live count of items
    context: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None


class AvailableExamsSummary(CamelModel):
    total_reading: int
    total_listening: int
    total_speaking: int
    total_writing: int
    total_exams: int


class AvailableExams(CamelModel):
    reading: list[ExamSetSummary] = []
    listening: list[ExamSetSummary] = []
    speaking: list[ExamSetSummary] = []
    writing: list[ExamSetSummary] = []
    summary: AvailableExamsSummary


class CourseExams(CamelModel):
    course_id: int
    course_title: str
    course_code: str
    exam_type: str
    exams: list[ExamSetSummary] = []
    total_exams: int
