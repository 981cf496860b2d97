# ielts_portal/api/endpoints/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from ielts_portal.core.security import authenticate_user, get_current_user
from ielts_portal.db.session import get_db
from ielts_portal.models.user import User
from ielts_portal.schemas.auth import (
    ConfirmRegisterRequest,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RefreshTokenRequest,
    RegisterRequest,
    ResetPasswordRequest,
    Token,
    UpdateProfileRequest,
)
from ielts_portal.schemas.user import UserPublic
from ielts_portal.services import auth_service, user_service
from ielts_portal.services.mail_service import MailError, MailSender, get_mail_sender

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/Auth", tags=["auth"])


def _check_not_banned(user: User) -> None:
    if user.status == "Banned":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is banned")


def _issue_token(db: Session, user: User | None) -> Token:
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    _check_not_banned(user)
    return auth_service.issue_tokens(db, user)


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register_user(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    mail: MailSender = Depends(get_mail_sender),
):
    if user_service.get_user_by_email(db, payload.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )
    user = user_service.create_user(db, obj_in=payload)
    # the account works without confirmation, so a mail outage does not fail sign up
    try:
        auth_service.send_registration_otp(db, user=user, mail=mail)
    except MailError:
        logger.error(f"Could not send registration code to user {user.id}", exc_info=True)
    return user


@router.post("/confirm-register", response_model=MessageResponse)
def confirm_register(payload: ConfirmRegisterRequest, db: Session = Depends(get_db)):
    if not auth_service.confirm_registration(db, user_id=payload.user_id, otp_code=payload.otp_code):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired OTP")
    return MessageResponse(message="Registration confirmed")


# JSON body login, used by the frontends
@router.post("/login", response_model=Token)
def login_for_access_token(payload: LoginRequest, db: Session = Depends(get_db)):
    return _issue_token(db, authenticate_user(db, payload.email, payload.password))


# OAuth2 form login for the docs "Authorize" button; username is the email
@router.post("/token", response_model=Token)
def login_for_access_token_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    return _issue_token(db, authenticate_user(db, form_data.username, form_data.password))


@router.post("/refresh-token", response_model=Token)
def refresh_token(payload: RefreshTokenRequest, db: Session = Depends(get_db)):
    user = auth_service.validate_refresh_token(
        db, user_id=payload.user_id, refresh_token=payload.refresh_token
    )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    _check_not_banned(user)
    return auth_service.issue_tokens(db, user)


@router.get("/me", response_model=UserPublic)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/update-profile", response_model=UserPublic)
def update_profile(
    payload: UpdateProfileRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.update_profile(db, user=current_user, obj_in=payload)


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    payload: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    mail: MailSender = Depends(get_mail_sender),
):
    try:
        found = auth_service.start_password_reset(db, email=payload.email, mail=mail)
    except MailError:
        logger.error(f"Could not send password reset code to {payload.email}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not send email, try again later",
        )
    if not found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email not found")
    return MessageResponse(message="OTP sent to email")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    if not auth_service.reset_password(db, obj_in=payload):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request. Check email, OTP or password match.",
        )
    return MessageResponse(message="Password has been reset")
