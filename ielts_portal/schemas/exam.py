# ielts_portal/schemas/exam.py
from datetime import datetime

from pydantic import Field

from ielts_portal.schemas.base import CamelModel


# Reading

class ReadingExamBase(CamelModel):
    exam_set_id: int | None = None
    question_text: str
    option_a: str | None = None
    option_b: str | None = None
    option_c: str | None = None
    option_d: str | None = None
    option_e: str | None = None
    option_f: str | None = None
    option_g: str | None = None
    option_h: str | None = None
    answer_fill: str | None = None
    correct_answer: str


class ReadingExamCreate(ReadingExamBase):
    pass


class ReadingExamUpdate(CamelModel):
    exam_set_id: int | None = None
    question_text: str | None = None
    option_a: str | None = None
    option_b: str | None = None
    option_c: str | None = None
    option_d: str | None = None
    option_e: str | None = None
    option_f: str | None = None
    option_g: str | None = None
    option_h: str | None = None
    answer_fill: str | None = None
    correct_answer: str | None = None


class ReadingExamPublic(ReadingExamBase):
    id: int = Field(serialization_alias="readingExamId")
    created_at: datetime | None = None


# Listening

class ListeningExamBase(CamelModel):
    exam_set_id: int | None = None
    audio_url: str
    question_text: str | None = None
    option_a: str | None = None
    option_b: str | None = None
    option_c: str | None = None
    option_d: str | None = None
    answer_fill: str | None = None
    correct_answer: str


class ListeningExamCreate(ListeningExamBase):
    pass


class ListeningExamUpdate(CamelModel):
    exam_set_id: int | None = None
    audio_url: str | None = None
    question_text: str | None = None
    option_a: str | None = None
    option_b: str | None = None
    option_c: str | None = None
    option_d: str | None = None
    answer_fill: str | None = None
    correct_answer: str | None = None


class ListeningExamPublic(ListeningExamBase):
    id: int = Field(serialization_alias="listeningExamId")
    created_at: datetime | None = None


# Speaking

class SpeakingExamBase(CamelModel):
    exam_set_id: int | None = None
    question_text: str


class SpeakingExamCreate(SpeakingExamBase):
    pass


class SpeakingExamUpdate(CamelModel):
    exam_set_id: int | None = None
    question_text: str | None = None


class SpeakingExamPublic(SpeakingExamBase):
    id: int = Field(serialization_alias="speakingExamId")
    created_at: datetime | None = None


# Writing

class WritingExamBase(CamelModel):
    exam_set_id: int | None = None

    task1_title: str | None = None
    task1_description: str | None = None
    task1_image_url: str | None = None
    task1_requirements: str | None = None
    task1_min_words: int = Field(default=150, ge=0)
    task1_max_time: int = Field(default=20, ge=0)

    task2_title: str | None = None
    task2_question: str | None = None
    task2_context: str | None = None
    task2_requirements: str | None = None
    task2_min_words: int = Field(default=250, ge=0)
    task2_max_time: int = Field(default=40, ge=0)

    total_time_minutes: int = Field(default=60, ge=0)
    instructions: str | None = None
    question_text: str | None = None


class WritingExamCreate(WritingExamBase):
    pass


class WritingExamUpdate(CamelModel):
    exam_set_id: int | None = None
    task1_title: str | None = None
    task1_description: str | None = None
    task1_image_url: str | None = None
    task1_requirements: str | None = None
    task1_min_words: int | None = Field(default=None, ge=0)
    task1_max_time: int | None = Field(default=None, ge=0)
    task2_title: str | None = None
    task2_question: str | None = None
    task2_context: str | None = None
    task2_requirements: str | None = None
    task2_min_words: int | None = Field(default=None, ge=0)
    task2_max_time: int | None = Field(default=None, ge=0)
    total_time_minutes: int | None = Field(default=None, ge=0)
    instructions: str | None = None
    question_text: str | None = None


class WritingExamPublic(WritingExamBase):
    id: int = Field(serialization_alias="writingExamId")
    created_at: datetime | None = None
