"""initial schema

Revision ID: 0001
Revises:
Create Date: 2025-10-12 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"))


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("portrait_url", sa.String(500), nullable=True),
        sa.Column("experience", sa.Text(), nullable=True),
        sa.Column("approved", sa.Boolean(), nullable=True),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "exam_sets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("exam_type", sa.String(20), nullable=False),
        sa.Column("exam_set_code", sa.String(50), nullable=False),
        sa.Column("exam_set_title", sa.String(255), nullable=False),
        sa.Column("total_questions", sa.Integer(), nullable=False),
        sa.Column("context", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        _created_at(),
    )
    op.create_index("ix_exam_sets_id", "exam_sets", ["id"])
    op.create_index("ix_exam_sets_exam_type", "exam_sets", ["exam_type"])

    op.create_table(
        "reading_exams",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("exam_set_id", sa.Integer(), sa.ForeignKey("exam_sets.id"), nullable=True),
        sa.Column("question_text", sa.Text(), nullable=False),
        *[sa.Column(f"option_{c}", sa.Text(), nullable=True) for c in "abcdefgh"],
        sa.Column("answer_fill", sa.Text(), nullable=True),
        sa.Column("correct_answer", sa.String(500), nullable=False),
        _created_at(),
    )
    op.create_index("ix_reading_exams_id", "reading_exams", ["id"])
    op.create_index("ix_reading_exams_exam_set_id", "reading_exams", ["exam_set_id"])

    op.create_table(
        "listening_exams",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("exam_set_id", sa.Integer(), sa.ForeignKey("exam_sets.id"), nullable=True),
        sa.Column("audio_url", sa.String(500), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=True),
        *[sa.Column(f"option_{c}", sa.Text(), nullable=True) for c in "abcd"],
        sa.Column("answer_fill", sa.Text(), nullable=True),
        sa.Column("correct_answer", sa.String(500), nullable=False),
        _created_at(),
    )
    op.create_index("ix_listening_exams_id", "listening_exams", ["id"])
    op.create_index("ix_listening_exams_exam_set_id", "listening_exams", ["exam_set_id"])

    op.create_table(
        "speaking_exams",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("exam_set_id", sa.Integer(), sa.ForeignKey("exam_sets.id"), nullable=True),
        sa.Column("question_text", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_speaking_exams_id", "speaking_exams", ["id"])
    op.create_index("ix_speaking_exams_exam_set_id", "speaking_exams", ["exam_set_id"])

    op.create_table(
        "writing_exams",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("exam_set_id", sa.Integer(), sa.ForeignKey("exam_sets.id"), nullable=True),
        sa.Column("task1_title", sa.String(255), nullable=True),
        sa.Column("task1_description", sa.Text(), nullable=True),
        sa.Column("task1_image_url", sa.String(500), nullable=True),
        sa.Column("task1_requirements", sa.Text(), nullable=True),
        sa.Column("task1_min_words", sa.Integer(), nullable=False, server_default="150"),
        sa.Column("task1_max_time", sa.Integer(), nullable=False, server_default="20"),
        sa.Column("task2_title", sa.String(255), nullable=True),
        sa.Column("task2_question", sa.Text(), nullable=True),
        sa.Column("task2_context", sa.Text(), nullable=True),
        sa.Column("task2_requirements", sa.Text(), nullable=True),
        sa.Column("task2_min_words", sa.Integer(), nullable=False, server_default="250"),
        sa.Column("task2_max_time", sa.Integer(), nullable=False, server_default="40"),
        sa.Column("total_time_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column("question_text", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_writing_exams_id", "writing_exams", ["id"])
    op.create_index("ix_writing_exams_exam_set_id", "writing_exams", ["exam_set_id"])

    op.create_table(
        "exam_courses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("course_title", sa.String(200), nullable=False),
        sa.Column("course_code", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("exam_type", sa.String(20), nullable=False),
        _created_at(),
    )
    op.create_index("ix_exam_courses_id", "exam_courses", ["id"])

    op.create_table(
        "exam_course_exam_sets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("exam_course_id", sa.Integer(), sa.ForeignKey("exam_courses.id"), nullable=False),
        sa.Column("exam_set_id", sa.Integer(), sa.ForeignKey("exam_sets.id"), nullable=False),
        sa.Column("exam_set_type", sa.String(20), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_exam_course_exam_sets_id", "exam_course_exam_sets", ["id"])
    op.create_index("ix_exam_course_exam_sets_exam_course_id", "exam_course_exam_sets", ["exam_course_id"])
    op.create_index("ix_exam_course_exam_sets_exam_set_id", "exam_course_exam_sets", ["exam_set_id"])

    op.create_table(
        "submissions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("exam_course_id", sa.Integer(), sa.ForeignKey("exam_courses.id"), nullable=True),
        sa.Column("exam_type", sa.String(20), nullable=False),
        sa.Column("exam_id", sa.Integer(), nullable=True),
        sa.Column("answers", sa.Text(), nullable=True),
        sa.Column("total_word_count", sa.Integer(), nullable=True),
        sa.Column("time_spent", sa.Integer(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(30), nullable=False),
        sa.Column("ai_score", sa.Numeric(3, 1), nullable=True),
        sa.Column("ai_task_achievement_score", sa.Integer(), nullable=True),
        sa.Column("ai_task_achievement_feedback", sa.Text(), nullable=True),
        sa.Column("ai_coherence_cohesion_score", sa.Integer(), nullable=True),
        sa.Column("ai_coherence_cohesion_feedback", sa.Text(), nullable=True),
        sa.Column("ai_lexical_resource_score", sa.Integer(), nullable=True),
        sa.Column("ai_lexical_resource_feedback", sa.Text(), nullable=True),
        sa.Column("ai_grammatical_range_score", sa.Integer(), nullable=True),
        sa.Column("ai_grammatical_range_feedback", sa.Text(), nullable=True),
        sa.Column("ai_general_feedback", sa.Text(), nullable=True),
        sa.Column("mentor_score", sa.Numeric(4, 1), nullable=True),
    )
    op.create_index("ix_submissions_id", "submissions", ["id"])
    op.create_index("ix_submissions_user_id", "submissions", ["user_id"])
    op.create_index("ix_submissions_exam_course_id", "submissions", ["exam_course_id"])
    op.create_index("ix_submissions_exam_type", "submissions", ["exam_type"])
    op.create_index("ix_submissions_exam_id", "submissions", ["exam_id"])
    op.create_index("ix_submissions_status", "submissions", ["status"])

    op.create_table(
        "feedbacks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("submission_id", sa.Integer(), sa.ForeignKey("submissions.id"), nullable=True),
        sa.Column("mentor_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("feedback_text", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_feedbacks_id", "feedbacks", ["id"])
    op.create_index("ix_feedbacks_submission_id", "feedbacks", ["submission_id"])

    op.create_table(
        "feedback_replies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("feedback_id", sa.Integer(), sa.ForeignKey("feedbacks.id"), nullable=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("reply_text", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_feedback_replies_id", "feedback_replies", ["id"])
    op.create_index("ix_feedback_replies_feedback_id", "feedback_replies", ["feedback_id"])

    op.create_table(
        "tips",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("mentor_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_tips_id", "tips", ["id"])
    op.create_index("ix_tips_mentor_id", "tips", ["mentor_id"])

    op.create_table(
        "ratings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("mentor_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_ratings_id", "ratings", ["id"])
    op.create_index("ix_ratings_student_id", "ratings", ["student_id"])
    op.create_index("ix_ratings_mentor_id", "ratings", ["mentor_id"])


def downgrade() -> None:
    for table in (
        "ratings",
        "tips",
        "feedback_replies",
        "feedbacks",
        "submissions",
        "exam_course_exam_sets",
        "exam_courses",
        "writing_exams",
        "speaking_exams",
        "listening_exams",
        "reading_exams",
        "exam_sets",
        "users",
    ):
        op.drop_table(table)
