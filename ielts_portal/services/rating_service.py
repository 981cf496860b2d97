# ielts_portal/services/rating_service.py
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from ielts_portal.models.rating import Rating
from ielts_portal.models.user import User
from ielts_portal.schemas.rating import AverageRating, RatingCreate, RatingPublic


def create_rating(db: Session, *, obj_in: RatingCreate) -> Rating:
    rating = Rating(
        student_id=obj_in.student_id,
        mentor_id=obj_in.mentor_id,
        score=obj_in.score,
        comment=obj_in.comment,
    )
    db.add(rating)
    db.commit()
    db.refresh(rating)
    return rating


def _list_ratings(db: Session, *criteria) -> List[RatingPublic]:
    student = aliased(User)
    mentor = aliased(User)
    rows = (
        db.query(Rating, student.full_name, mentor.full_name)
        .outerjoin(student, Rating.student_id == student.id)
        .outerjoin(mentor, Rating.mentor_id == mentor.id)
        .filter(*criteria)
        .order_by(Rating.created_at.desc(), Rating.id.desc())
        .all()
    )
    return [
        RatingPublic(
            id=r.id,
            student_id=r.student_id,
            student_name=student_name,
            mentor_id=r.mentor_id,
            mentor_name=mentor_name,
            score=r.score,
            comment=r.comment,
            created_at=r.created_at,
        )
        for r, student_name, mentor_name in rows
    ]


def list_ratings_for_mentor(db: Session, *, mentor_id: int) -> List[RatingPublic]:
    return _list_ratings(db, Rating.mentor_id == mentor_id)


def list_ratings_by_student(db: Session, *, student_id: int) -> List[RatingPublic]:
    return _list_ratings(db, Rating.student_id == student_id)


def average_for_mentor(db: Session, *, mentor_id: int) -> AverageRating:
    avg, total = (
        db.query(func.avg(Rating.score), func.count(Rating.id))
        .filter(Rating.mentor_id == mentor_id)
        .one()
    )
    return AverageRating(
        mentor_id=mentor_id,
        average_score=round(float(avg), 2) if avg is not None else 0.0,
        total_ratings=total,
    )
