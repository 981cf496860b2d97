# ielts_portal/schemas/exam_course.py
from datetime import datetime

from pydantic import Field, field_validator

from ielts_portal.schemas.answers import EXAM_TYPES
from ielts_portal.schemas.base import CamelModel
from ielts_portal.schemas.exam_set import ExamSetSummary


class ExamCourseCreate(CamelModel):
    course_title: str = Field(min_length=1, max_length=200)
    course_code: str | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=1000)
    exam_type: str
    exam_set_ids: list[int] = Field(min_length=1)

    @field_validator("exam_type")
    @classmethod
    def check_exam_type(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in EXAM_TYPES:
            raise ValueError(f"examType must be one of: {', '.join(EXAM_TYPES)}")
        return v


class ExamCourseUpdate(CamelModel):
    course_title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=1000)
    exam_set_ids: list[int] = Field(min_length=1)


class ExamCourseCreated(CamelModel):
    id: int = Field(serialization_alias="examCourseId")
    course_title: str
    course_code: str
    description: str
    exam_type: str
    created_at: datetime | None = None
    exam_set_count: int


class ExamCoursePublic(CamelModel):
    id: int = Field(serialization_alias="examCourseId")
    course_title: str
    course_code: str
    description: str
    exam_type: str
    created_at: datetime | None = None

    reading_exam_sets_count: int = 0
    listening_exam_sets_count: int = 0
    speaking_exam_sets_count: int = 0
    writing_exam_sets_count: int = 0
    total_exam_sets: int = 0


class ExamCourseDetail(CamelModel):
    id: int = Field(serialization_alias="examCourseId")
    course_title: str
    course_code: str
    description: str
    exam_type: str
    created_at: datetime | None = None

    reading_exam_sets: list[ExamSetSummary] = []
    listening_exam_sets: list[ExamSetSummary] = []
    speaking_exam_sets: list[ExamSetSummary] = []
    writing_exam_sets: list[ExamSetSummary] = []


class ExamCourseDeleteResult(CamelModel):
    success: bool
    message: str
    deleted_exam_course_id: int
    deleted_submissions_count: int = 0
    deleted_assignments_count: int = 0
    deleted_at: datetime
