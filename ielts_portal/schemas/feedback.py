# ielts_portal/schemas/feedback.py
from datetime import datetime

from pydantic import Field, field_validator

from ielts_portal.schemas.base import CamelModel


class FeedbackReplyCreate(CamelModel):
    feedback_id: int
    user_id: int
    reply_text: str

    @field_validator("reply_text")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("replyText must not be empty")
        return v


class FeedbackReplyPublic(CamelModel):
    id: int = Field(serialization_alias="replyId")
    feedback_id: int
    user_id: int | None = None
    user_name: str | None = None
    reply_text: str
    created_at: datetime | None = None


class FeedbackPublic(CamelModel):
    id: int = Field(serialization_alias="feedbackId")
    submission_id: int
    mentor_id: int | None = None
    mentor_name: str | None = None
    feedback_text: str | None = None
    created_at: datetime | None = None
    replies: list[FeedbackReplyPublic] = []
