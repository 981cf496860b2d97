# ielts_portal/api/endpoints/exams.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ielts_portal.db.session import get_db
from ielts_portal.schemas.exam_set import AvailableExams, CourseExams
from ielts_portal.services import exam_course_service

router = APIRouter(prefix="/Exam", tags=["exams"])


@router.get("/available", response_model=AvailableExams)
def list_available_exams(db: Session = Depends(get_db)):
    """Every exam set, grouped by skill, for the student exam picker."""
    return exam_course_service.list_available_exams(db)


@router.get("/course/{course_id}", response_model=CourseExams)
def list_course_exams(course_id: int, db: Session = Depends(get_db)):
    course = exam_course_service.get_exam_course(db, course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Exam course not found")
    return exam_course_service.list_course_exams(db, course)
