# ielts_portal/models/submission.py
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Numeric,
    ForeignKey,
)
from ielts_portal.db.base import Base

STATUS_SUBMITTED = "Submitted"
STATUS_AI_SCORED = "AI Scored"
STATUS_AI_SCORING_FAILED = "AI Scoring Failed"
STATUS_GRADED = "Graded"


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    exam_course_id = Column(Integer, ForeignKey("exam_courses.id"), nullable=True, index=True)

    exam_type = Column(String(20), nullable=False, index=True)  # reading / listening / speaking / writing
    # exam set id for reading/listening/speaking, writing exam id for writing
    exam_id = Column(Integer, nullable=True, index=True)

    answers = Column(Text, nullable=True)
    total_word_count = Column(Integer, nullable=True)
    time_spent = Column(Integer, nullable=True)  # seconds
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    # Submitted -> AI Scored / AI Scoring Failed -> Graded
    status = Column(String(30), nullable=False, default=STATUS_SUBMITTED, index=True)

    # AI scoring (writing only)
    ai_score = Column(Numeric(3, 1), nullable=True)
    ai_task_achievement_score = Column(Integer, nullable=True)
    ai_task_achievement_feedback = Column(Text, nullable=True)
    ai_coherence_cohesion_score = Column(Integer, nullable=True)
    ai_coherence_cohesion_feedback = Column(Text, nullable=True)
    ai_lexical_resource_score = Column(Integer, nullable=True)
    ai_lexical_resource_feedback = Column(Text, nullable=True)
    ai_grammatical_range_score = Column(Integer, nullable=True)
    ai_grammatical_range_feedback = Column(Text, nullable=True)
    ai_general_feedback = Column(Text, nullable=True)

    # mentor grading
    mentor_score = Column(Numeric(4, 1), nullable=True)
