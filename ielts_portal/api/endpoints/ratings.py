# ielts_portal/api/endpoints/ratings.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ielts_portal.db.session import get_db
from ielts_portal.schemas.rating import AverageRating, RatingCreate, RatingPublic
from ielts_portal.services import rating_service, user_service

router = APIRouter(prefix="/Rating", tags=["ratings"])


@router.post("/", response_model=RatingPublic, status_code=status.HTTP_201_CREATED)
def create_rating(obj_in: RatingCreate, db: Session = Depends(get_db)):
    if not user_service.get_mentor(db, obj_in.mentor_id):
        raise HTTPException(status_code=404, detail="Mentor not found")
    if not user_service.get_user(db, obj_in.student_id):
        raise HTTPException(status_code=404, detail="Student not found")
    rating = rating_service.create_rating(db, obj_in=obj_in)
    return RatingPublic.model_validate(rating)


@router.get("/mentor/{mentor_id}", response_model=List[RatingPublic])
def list_mentor_ratings(mentor_id: int, db: Session = Depends(get_db)):
    return rating_service.list_ratings_for_mentor(db, mentor_id=mentor_id)


@router.get("/student/{student_id}", response_model=List[RatingPublic])
def list_student_ratings(student_id: int, db: Session = Depends(get_db)):
    return rating_service.list_ratings_by_student(db, student_id=student_id)


@router.get("/mentor/{mentor_id}/average", response_model=AverageRating)
def mentor_average(mentor_id: int, db: Session = Depends(get_db)):
    return rating_service.average_for_mentor(db, mentor_id=mentor_id)
