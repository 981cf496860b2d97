# ielts_portal/api/endpoints/exam_sets.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ielts_portal.core.security import get_current_mentor
from ielts_portal.db.session import get_db
from ielts_portal.models.exam_set import ExamSet
from ielts_portal.models.user import User
from ielts_portal.schemas.answers import EXAM_TYPES
from ielts_portal.schemas.exam_set import ExamSetCreate, ExamSetSummary, ExamSetUpdate
from ielts_portal.services import exam_set_service

router = APIRouter(prefix="/ExamSet", tags=["exam-sets"])


def normalise_exam_type(exam_type: str) -> str:
    exam_type = exam_type.strip().lower()
    if exam_type not in EXAM_TYPES:
        raise HTTPException(status_code=400, detail=f"Unknown exam type: {exam_type}")
    return exam_type


def get_exam_set_or_404(db: Session, exam_set_id: int, exam_type: str) -> ExamSet:
    exam_set = exam_set_service.get_exam_set(db, exam_set_id, exam_type)
    if not exam_set:
        raise HTTPException(status_code=404, detail="Exam set not found")
    return exam_set


@router.get("/{exam_type}", response_model=List[ExamSetSummary])
def list_exam_sets(exam_type: str, db: Session = Depends(get_db)):
    exam_type = normalise_exam_type(exam_type)
    return [
        exam_set_service.to_summary(db, s)
        for s in exam_set_service.list_exam_sets(db, exam_type=exam_type)
    ]


@router.get("/{exam_type}/{exam_set_id}", response_model=ExamSetSummary)
def get_exam_set(exam_type: str, exam_set_id: int, db: Session = Depends(get_db)):
    exam_set = get_exam_set_or_404(db, exam_set_id, normalise_exam_type(exam_type))
    return exam_set_service.to_summary(db, exam_set)


@router.post("/{exam_type}", response_model=ExamSetSummary, status_code=status.HTTP_201_CREATED)
def create_exam_set(
    exam_type: str,
    obj_in: ExamSetCreate,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
):
    exam_set = exam_set_service.create_exam_set(
        db, exam_type=normalise_exam_type(exam_type), obj_in=obj_in
    )
    return exam_set_service.to_summary(db, exam_set)


@router.put("/{exam_type}/{exam_set_id}", response_model=ExamSetSummary)
def update_exam_set(
    exam_type: str,
    exam_set_id: int,
    obj_in: ExamSetUpdate,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
):
    exam_set = get_exam_set_or_404(db, exam_set_id, normalise_exam_type(exam_type))
    exam_set = exam_set_service.update_exam_set(db, db_obj=exam_set, obj_in=obj_in)
    return exam_set_service.to_summary(db, exam_set)


@router.delete("/{exam_type}/{exam_set_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exam_set(
    exam_type: str,
    exam_set_id: int,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
):
    exam_set = get_exam_set_or_404(db, exam_set_id, normalise_exam_type(exam_type))
    exam_set_service.delete_exam_set(db, db_obj=exam_set)
