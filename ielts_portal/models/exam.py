# ielts_portal/models/exam.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func
from ielts_portal.db.base import Base


class ReadingExam(Base):
    __tablename__ = "reading_exams"

    id = Column(Integer, primary_key=True, index=True)
    exam_set_id = Column(Integer, ForeignKey("exam_sets.id"), nullable=True, index=True)

    question_text = Column(Text, nullable=False)
    option_a = Column(Text, nullable=True)
    option_b = Column(Text, nullable=True)
    option_c = Column(Text, nullable=True)
    option_d = Column(Text, nullable=True)
    option_e = Column(Text, nullable=True)
    option_f = Column(Text, nullable=True)
    option_g = Column(Text, nullable=True)
    option_h = Column(Text, nullable=True)
    answer_fill = Column(Text, nullable=True)
    correct_answer = Column(String(500), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ListeningExam(Base):
    __tablename__ = "listening_exams"

    id = Column(Integer, primary_key=True, index=True)
    exam_set_id = Column(Integer, ForeignKey("exam_sets.id"), nullable=True, index=True)

    audio_url = Column(String(500), nullable=False)
    question_text = Column(Text, nullable=True)
    option_a = Column(Text, nullable=True)
    option_b = Column(Text, nullable=True)
    option_c = Column(Text, nullable=True)
    option_d = Column(Text, nullable=True)
    answer_fill = Column(Text, nullable=True)
    correct_answer = Column(String(500), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class SpeakingExam(Base):
    __tablename__ = "speaking_exams"

    id = Column(Integer, primary_key=True, index=True)
    exam_set_id = Column(Integer, ForeignKey("exam_sets.id"), nullable=True, index=True)

    question_text = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class WritingExam(Base):
    __tablename__ = "writing_exams"

    id = Column(Integer, primary_key=True, index=True)
    exam_set_id = Column(Integer, ForeignKey("exam_sets.id"), nullable=True, index=True)

    # Task 1: chart / graph / diagram description
    task1_title = Column(String(255), nullable=True)
    task1_description = Column(Text, nullable=True)
    task1_image_url = Column(String(500), nullable=True)
    task1_requirements = Column(Text, nullable=True)
    task1_min_words = Column(Integer, nullable=False, default=150)
    task1_max_time = Column(Integer, nullable=False, default=20)  # minutes

    # Task 2: essay
    task2_title = Column(String(255), nullable=True)
    task2_question = Column(Text, nullable=True)
    task2_context = Column(Text, nullable=True)
    task2_requirements = Column(Text, nullable=True)
    task2_min_words = Column(Integer, nullable=False, default=250)
    task2_max_time = Column(Integer, nullable=False, default=40)

    total_time_minutes = Column(Integer, nullable=False, default=60)
    instructions = Column(Text, nullable=True)

    # single-prompt rows created before the two-task layout
    question_text = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
