# ielts_portal/services/auth_service.py
"""
Token issuing and the one-time-code flows behind /Auth.

Refresh tokens are signed JWTs; the latest one is also stored on the
user, so issuing a new one revokes the previous. One-time codes are kept
in user_otps, one live code per user and purpose.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ielts_portal.core.config import settings
from ielts_portal.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    get_password_hash,
)
from ielts_portal.models.user import User
from ielts_portal.models.user_otp import OTP_PURPOSE_REGISTER, OTP_PURPOSE_RESET, UserOtp
from ielts_portal.schemas.auth import ResetPasswordRequest, Token
from ielts_portal.services import user_service
from ielts_portal.services.mail_service import MailSender

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _is_expired(value: datetime | None) -> bool:
    return value is None or _as_utc(value) <= datetime.now(timezone.utc)


# Tokens

def issue_tokens(db: Session, user: User) -> Token:
    access_token = create_access_token(
        data={"sub": user.email, "role": user.role},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    refresh_token = create_refresh_token(data={"sub": user.email})

    user.refresh_token = refresh_token
    user.refresh_token_expires_at = datetime.now(timezone.utc) + timedelta(
        days=settings.REFRESH_TOKEN_EXPIRE_DAYS
    )
    db.add(user)
    db.commit()
    return Token(access_token=access_token, refresh_token=refresh_token)


def validate_refresh_token(db: Session, *, user_id: int, refresh_token: str) -> Optional[User]:
    """The user the token belongs to, or None when it is unknown, stale or replaced."""
    payload = decode_refresh_token(refresh_token)
    if payload is None:
        return None

    user = db.get(User, user_id)
    if user is None or user.email != payload.get("sub"):
        return None
    if user.refresh_token != refresh_token or _is_expired(user.refresh_token_expires_at):
        return None
    return user


# One-time codes

def create_otp(db: Session, *, user: User, purpose: str) -> str:
    db.query(UserOtp).filter(UserOtp.user_id == user.id, UserOtp.purpose == purpose).delete(
        synchronize_session=False
    )
    code = f"{secrets.randbelow(900000) + 100000}"
    db.add(
        UserOtp(
            user_id=user.id,
            purpose=purpose,
            otp_code=code,
            expires_at=datetime.now(timezone.utc) + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
        )
    )
    db.commit()
    return code


def consume_otp(db: Session, *, user_id: int, purpose: str, code: str) -> bool:
    """True when the code matches the user's live code; a matching code is used up."""
    otp = (
        db.query(UserOtp)
        .filter(UserOtp.user_id == user_id, UserOtp.purpose == purpose)
        .order_by(UserOtp.id.desc())
        .first()
    )
    if otp is None or otp.otp_code != code.strip() or _is_expired(otp.expires_at):
        return False
    db.delete(otp)
    db.commit()
    return True


def send_registration_otp(db: Session, *, user: User, mail: MailSender) -> None:
    code = create_otp(db, user=user, purpose=OTP_PURPOSE_REGISTER)
    mail.send(user.email, "Confirm your registration", f"Your OTP code is: {code}")
    logger.info(f"Sent registration code to user {user.id}")


def confirm_registration(db: Session, *, user_id: int, otp_code: str) -> bool:
    if not consume_otp(db, user_id=user_id, purpose=OTP_PURPOSE_REGISTER, code=otp_code):
        return False
    user = db.get(User, user_id)
    if user is None:
        return False
    user.email_confirmed = True
    db.add(user)
    db.commit()
    logger.info(f"User {user_id} confirmed their email")
    return True


def start_password_reset(db: Session, *, email: str, mail: MailSender) -> bool:
    """False when no account uses the email."""
    user = user_service.get_user_by_email(db, email)
    if user is None:
        return False
    code = create_otp(db, user=user, purpose=OTP_PURPOSE_RESET)
    mail.send(user.email, "Password Reset OTP", f"Your OTP: {code}")
    logger.info(f"Sent password reset code to user {user.id}")
    return True


def reset_password(db: Session, *, obj_in: ResetPasswordRequest) -> bool:
    if obj_in.new_password != obj_in.confirm_new_password:
        return False
    user = user_service.get_user_by_email(db, obj_in.email)
    if user is None:
        return False
    if not consume_otp(db, user_id=user.id, purpose=OTP_PURPOSE_RESET, code=obj_in.otp):
        return False

    user.password_hash = get_password_hash(obj_in.new_password)
    # sessions started with the old password end here
    user.refresh_token = None
    user.refresh_token_expires_at = None
    db.add(user)
    db.commit()
    logger.info(f"Password reset for user {user.id}")
    return True
