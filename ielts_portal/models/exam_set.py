# ielts_portal/models/exam_set.py
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func
from ielts_portal.db.base import Base


class ExamSet(Base):
    __tablename__ = "exam_sets"

    id = Column(Integer, primary_key=True, index=True)
    exam_type = Column(String(20), nullable=False, index=True)  # reading / listening / speaking / writing

    exam_set_code = Column(String(50), nullable=False)
    exam_set_title = Column(String(255), nullable=False)

    # target count only; the real count comes from the item tables
    total_questions = Column(Integer, nullable=False, default=5)

    # reading passage / listening picture
    context = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
