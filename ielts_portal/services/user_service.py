# ielts_portal/services/user_service.py
import logging
import math
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ielts_portal.core.security import get_password_hash
from ielts_portal.models.feedback import Feedback
from ielts_portal.models.rating import Rating
from ielts_portal.models.submission import Submission
from ielts_portal.models.user import User
from ielts_portal.schemas.auth import RegisterRequest, UpdateProfileRequest
from ielts_portal.schemas.user import (
    MentorManagement,
    MentorStatistics,
    PaginatedUsers,
    UserFilter,
    UserPublic,
)

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "fullName": User.full_name,
    "email": User.email,
    "createdAt": User.created_at,
}


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, *, obj_in: RegisterRequest) -> User:
    user = User(
        email=obj_in.email,
        full_name=obj_in.full_name,
        password_hash=get_password_hash(obj_in.password),
        role=obj_in.role,
        status="Active",
        experience=obj_in.experience,
        # mentors wait for an admin before they show up to students
        approved=False if obj_in.role == "mentor" else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered {user.role} {user.id} ({user.email})")
    return user


def update_profile(db: Session, *, user: User, obj_in: UpdateProfileRequest) -> User:
    update_data = obj_in.model_dump(exclude_unset=True)
    password = update_data.pop("password", None)
    for field, value in update_data.items():
        setattr(user, field, value)
    if password:
        user.password_hash = get_password_hash(password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def list_users(db: Session, *, filters: UserFilter) -> PaginatedUsers:
    q = db.query(User)
    if filters.role:
        q = q.filter(User.role == filters.role)
    if filters.status:
        q = q.filter(User.status == filters.status)
    if filters.approved is not None:
        q = q.filter(User.approved == filters.approved)
    if filters.gender:
        q = q.filter(User.gender == filters.gender)
    if filters.search_term:
        pattern = f"%{filters.search_term}%"
        q = q.filter(or_(User.full_name.ilike(pattern), User.email.ilike(pattern)))

    total_count = q.count()

    column = _SORT_COLUMNS[filters.sort_by]
    if filters.sort_direction == "desc":
        q = q.order_by(column.desc(), User.id.desc())
    else:
        q = q.order_by(column.asc(), User.id.asc())

    users = q.offset((filters.page - 1) * filters.page_size).limit(filters.page_size).all()
    total_pages = math.ceil(total_count / filters.page_size)

    return PaginatedUsers(
        users=[UserPublic.model_validate(u) for u in users],
        total_count=total_count,
        page=filters.page,
        page_size=filters.page_size,
        total_pages=total_pages,
        has_previous_page=filters.page > 1,
        has_next_page=filters.page < total_pages,
    )


def list_users_by_role(db: Session, *, role: str) -> List[User]:
    return (
        db.query(User)
        .filter(User.role == role)
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )


def set_role(db: Session, *, user: User, role: str) -> User:
    user.role = role
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_status(db: Session, *, user: User, status: str, reason: str | None = None) -> User:
    user.status = status
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} status set to {status}. Reason: {reason or 'No reason provided'}")
    return user


def set_approved(db: Session, *, user: User, approved: bool) -> User:
    user.approved = approved
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, *, user: User) -> None:
    user_id = user.id
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user_id}")


# Mentor management

def get_mentor(db: Session, mentor_id: int) -> Optional[User]:
    user = db.get(User, mentor_id)
    if user is None or user.role != "mentor":
        return None
    return user


def _students_graded(db: Session, mentor_id: int) -> int:
    return (
        db.query(func.count(func.distinct(Submission.user_id)))
        .join(Feedback, Feedback.submission_id == Submission.id)
        .filter(Feedback.mentor_id == mentor_id)
        .scalar()
    )


def _average_rating(db: Session, mentor_id: int) -> float:
    avg = db.query(func.avg(Rating.score)).filter(Rating.mentor_id == mentor_id).scalar()
    return round(float(avg), 2) if avg is not None else 0.0


def to_mentor_management(db: Session, mentor: User) -> MentorManagement:
    return MentorManagement(
        id=mentor.id,
        full_name=mentor.full_name,
        email=mentor.email,
        status=mentor.status or "Active",
        approved=mentor.approved,
        experience=mentor.experience,
        portrait_url=mentor.portrait_url,
        created_at=mentor.created_at,
        updated_at=mentor.updated_at,
        total_students=_students_graded(db, mentor.id),
        average_rating=_average_rating(db, mentor.id),
    )


def list_mentor_management(db: Session) -> List[MentorManagement]:
    return [to_mentor_management(db, m) for m in list_users_by_role(db, role="mentor")]


def mentor_statistics(db: Session) -> MentorStatistics:
    mentors = list_users_by_role(db, role="mentor")
    return MentorStatistics(
        total_mentors=len(mentors),
        active_mentors=sum(1 for m in mentors if m.status == "Active"),
        banned_mentors=sum(1 for m in mentors if m.status == "Banned"),
        pending_approval=sum(1 for m in mentors if m.approved is False),
        approved_mentors=sum(1 for m in mentors if m.approved is True),
    )
