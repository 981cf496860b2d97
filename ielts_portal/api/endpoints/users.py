# ielts_portal/api/endpoints/users.py
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ielts_portal.core.security import get_current_admin
from ielts_portal.db.session import get_db
from ielts_portal.models.user import User
from ielts_portal.schemas.user import (
    ApprovalUpdate,
    PaginatedUsers,
    RoleUpdate,
    StatusUpdate,
    UserFilter,
    UserPublic,
)
from ielts_portal.services import user_service

router = APIRouter(prefix="/User", tags=["users"])


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = user_service.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/", response_model=PaginatedUsers)
def list_users(
    role: str | None = None,
    status: str | None = None,
    approved: bool | None = None,
    gender: str | None = None,
    search_term: str | None = Query(default=None, alias="searchTerm"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100, alias="pageSize"),
    sort_by: Literal["fullName", "email", "createdAt"] = Query(default="createdAt", alias="sortBy"),
    sort_direction: Literal["asc", "desc"] = Query(default="desc", alias="sortDirection"),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    filters = UserFilter(
        role=role,
        status=status,
        approved=approved,
        gender=gender,
        search_term=search_term,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )
    return user_service.list_users(db, filters=filters)


@router.get("/students", response_model=List[UserPublic])
def list_students(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return user_service.list_users_by_role(db, role="student")


@router.get("/mentors", response_model=List[UserPublic])
def list_mentors(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return user_service.list_users_by_role(db, role="mentor")


@router.get("/{user_id}", response_model=UserPublic)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return _get_user_or_404(db, user_id)


@router.put("/{user_id}/role", response_model=UserPublic)
def update_role(
    user_id: int,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user = _get_user_or_404(db, user_id)
    return user_service.set_role(db, user=user, role=payload.role)


@router.put("/{user_id}/status", response_model=UserPublic)
def update_status(
    user_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user = _get_user_or_404(db, user_id)
    return user_service.set_status(db, user=user, status=payload.status, reason=payload.reason)


@router.put("/{user_id}/approve", response_model=UserPublic)
def update_approval(
    user_id: int,
    payload: ApprovalUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user = _get_user_or_404(db, user_id)
    return user_service.set_approved(db, user=user, approved=payload.approved)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user = _get_user_or_404(db, user_id)
    if user.id == current_admin.id:
        raise HTTPException(status_code=400, detail="Admins cannot delete their own account")
    user_service.delete_user(db, user=user)
