# ielts_portal/schemas/user.py
from datetime import date, datetime
from typing import Literal

from pydantic import EmailStr, Field

from ielts_portal.schemas.base import CamelModel

USER_ROLES = ("student", "mentor", "admin")
USER_STATUSES = ("Active", "Banned", "Suspended", "Inactive")


class UserPublic(CamelModel):
    id: int = Field(serialization_alias="userId")
    full_name: str
    email: EmailStr
    role: str
    status: str | None = None
    portrait_url: str | None = None
    experience: str | None = None
    approved: bool | None = None
    email_confirmed: bool | None = None
    gender: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserFilter(CamelModel):
    role: str | None = None
    status: str | None = None
    approved: bool | None = None
    gender: str | None = None
    search_term: str | None = None  # name or email
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)
    sort_by: Literal["fullName", "email", "createdAt"] = "createdAt"
    sort_direction: Literal["asc", "desc"] = "desc"


class PaginatedUsers(CamelModel):
    users: list[UserPublic] = []
    total_count: int
    page: int
    page_size: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool


class RoleUpdate(CamelModel):
    role: Literal["student", "mentor", "admin"]


class StatusUpdate(CamelModel):
    status: Literal["Active", "Banned", "Suspended", "Inactive"]
    reason: str | None = None


class ApprovalUpdate(CamelModel):
    approved: bool


class BanRequest(CamelModel):
    reason: str = Field(min_length=1)


class MentorManagement(CamelModel):
    id: int = Field(serialization_alias="userId")
    full_name: str
    email: EmailStr
    status: str
    approved: bool | None = None
    experience: str | None = None
    portrait_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    total_students: int = 0
    average_rating: float = 0.0


class MentorStatistics(CamelModel):
    total_mentors: int
    active_mentors: int
    banned_mentors: int
    pending_approval: int
    approved_mentors: int
