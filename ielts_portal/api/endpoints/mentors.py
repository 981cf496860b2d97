# ielts_portal/api/endpoints/mentors.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ielts_portal.core.security import get_current_admin
from ielts_portal.db.session import get_db
from ielts_portal.models.user import User
from ielts_portal.schemas.user import BanRequest, MentorManagement, MentorStatistics, StatusUpdate
from ielts_portal.services import user_service

router = APIRouter(prefix="/Mentor", tags=["mentors"])


def _get_mentor_or_404(db: Session, mentor_id: int) -> User:
    mentor = user_service.get_mentor(db, mentor_id)
    if not mentor:
        raise HTTPException(status_code=404, detail="Mentor not found")
    return mentor


@router.get("/management", response_model=List[MentorManagement])
def list_mentor_management(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return user_service.list_mentor_management(db)


@router.get("/management/{mentor_id}", response_model=MentorManagement)
def get_mentor_management(
    mentor_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return user_service.to_mentor_management(db, _get_mentor_or_404(db, mentor_id))


@router.post("/{mentor_id}/ban", response_model=MentorManagement)
def ban_mentor(
    mentor_id: int,
    payload: BanRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    mentor = _get_mentor_or_404(db, mentor_id)
    mentor = user_service.set_status(db, user=mentor, status="Banned", reason=payload.reason)
    return user_service.to_mentor_management(db, mentor)


@router.post("/{mentor_id}/unban", response_model=MentorManagement)
def unban_mentor(
    mentor_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    mentor = _get_mentor_or_404(db, mentor_id)
    mentor = user_service.set_status(db, user=mentor, status="Active")
    return user_service.to_mentor_management(db, mentor)


@router.put("/{mentor_id}/status", response_model=MentorManagement)
def update_mentor_status(
    mentor_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    mentor = _get_mentor_or_404(db, mentor_id)
    mentor = user_service.set_status(db, user=mentor, status=payload.status, reason=payload.reason)
    return user_service.to_mentor_management(db, mentor)


@router.get("/statistics", response_model=MentorStatistics)
def mentor_statistics(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return user_service.mentor_statistics(db)
