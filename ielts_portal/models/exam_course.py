# ielts_portal/models/exam_course.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func
from ielts_portal.db.base import Base


class ExamCourse(Base):
    __tablename__ = "exam_courses"

    id = Column(Integer, primary_key=True, index=True)
    course_title = Column(String(200), nullable=False)
    course_code = Column(String(50), nullable=False)
    description = Column(Text, nullable=False, default="")
    exam_type = Column(String(20), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ExamCourseExamSet(Base):
    __tablename__ = "exam_course_exam_sets"

    id = Column(Integer, primary_key=True, index=True)
    exam_course_id = Column(Integer, ForeignKey("exam_courses.id"), nullable=False, index=True)
    exam_set_id = Column(Integer, ForeignKey("exam_sets.id"), nullable=False, index=True)
    exam_set_type = Column(String(20), nullable=False)

    assigned_at = Column(DateTime(timezone=True), server_default=func.now())
