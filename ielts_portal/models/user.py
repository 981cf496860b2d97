# ielts_portal/models/user.py
from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text
from sqlalchemy.sql import func
from ielts_portal.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="student", index=True)  # student / mentor / admin
    status = Column(String(20), nullable=False, default="Active")  # Active / Banned / Suspended / Inactive

    portrait_url = Column(String(500), nullable=True)
    experience = Column(Text, nullable=True)
    approved = Column(Boolean, nullable=True)
    gender = Column(String(20), nullable=True)
    address = Column(String(255), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    email_confirmed = Column(Boolean, nullable=False, default=False)

    # current refresh token; replaced on every login and refresh
    refresh_token = Column(String(512), nullable=True)
    refresh_token_expires_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
