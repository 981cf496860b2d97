# ielts_portal/schemas/tip.py
from datetime import datetime

from pydantic import Field

from ielts_portal.schemas.base import CamelModel


class TipCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)


class TipUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)


class TipAuthor(CamelModel):
    id: int
    name: str
    avatar: str | None = None


class TipPublic(CamelModel):
    id: int = Field(serialization_alias="tipId")
    title: str
    content: str
    created_at: datetime | None = None
    mentor: TipAuthor | None = None
