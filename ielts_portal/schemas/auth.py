# ielts_portal/schemas/auth.py
from datetime import date

from pydantic import BaseModel, EmailStr, Field

from ielts_portal.schemas.base import CamelModel


class Token(BaseModel):
    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"


class TokenData(BaseModel):
    email: EmailStr | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1, max_length=100)
    role: str = Field(default="student", pattern="^(student|mentor)$")
    experience: str | None = None  # mentors describe themselves at sign up


class UpdateProfileRequest(CamelModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=100)
    portrait_url: str | None = None
    experience: str | None = None
    gender: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    password: str | None = Field(default=None, min_length=6)


class RefreshTokenRequest(CamelModel):
    user_id: int
    refresh_token: str


class ConfirmRegisterRequest(CamelModel):
    user_id: int
    otp_code: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    email: EmailStr
    otp: str
    new_password: str = Field(min_length=6)
    confirm_new_password: str


class MessageResponse(BaseModel):
    message: str
