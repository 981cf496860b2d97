# ielts_portal/api/endpoints/exam_courses.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ielts_portal.api.endpoints.exam_sets import normalise_exam_type
from ielts_portal.core.security import get_current_mentor
from ielts_portal.db.session import get_db
from ielts_portal.models.exam_course import ExamCourse
from ielts_portal.models.user import User
from ielts_portal.schemas.exam_course import (
    ExamCourseCreate,
    ExamCourseCreated,
    ExamCourseDeleteResult,
    ExamCourseDetail,
    ExamCoursePublic,
    ExamCourseUpdate,
)
from ielts_portal.schemas.exam_set import ExamSetSummary
from ielts_portal.services import exam_course_service, exam_set_service

router = APIRouter(prefix="/ExamCourse", tags=["exam-courses"])


def _get_course_or_404(db: Session, course_id: int) -> ExamCourse:
    course = exam_course_service.get_exam_course(db, course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Exam course not found")
    return course


@router.get("/", response_model=List[ExamCoursePublic])
def list_exam_courses(db: Session = Depends(get_db)):
    return exam_course_service.list_exam_courses(db)


@router.get("/available-examsets/{exam_type}", response_model=List[ExamSetSummary])
def list_available_exam_sets(exam_type: str, db: Session = Depends(get_db)):
    exam_type = normalise_exam_type(exam_type)
    return [
        exam_set_service.to_summary(db, s)
        for s in exam_set_service.list_exam_sets(db, exam_type=exam_type)
    ]


@router.get("/{course_id}", response_model=ExamCourseDetail)
def get_exam_course(course_id: int, db: Session = Depends(get_db)):
    return exam_course_service.get_exam_course_detail(db, _get_course_or_404(db, course_id))


@router.post("/", response_model=ExamCourseCreated, status_code=status.HTTP_201_CREATED)
def create_exam_course(
    obj_in: ExamCourseCreate,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
):
    course = exam_course_service.create_exam_course(db, obj_in=obj_in)
    public = exam_course_service.to_public(db, course)
    return ExamCourseCreated(
        id=course.id,
        course_title=course.course_title,
        course_code=course.course_code,
        description=course.description or "",
        exam_type=course.exam_type,
        created_at=course.created_at,
        exam_set_count=public.total_exam_sets,
    )


@router.put("/{course_id}", response_model=ExamCourseDetail)
def update_exam_course(
    course_id: int,
    obj_in: ExamCourseUpdate,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
):
    course = _get_course_or_404(db, course_id)
    course = exam_course_service.update_exam_course(db, course=course, obj_in=obj_in)
    return exam_course_service.get_exam_course_detail(db, course)


@router.delete("/{course_id}", response_model=ExamCourseDeleteResult)
def delete_exam_course(
    course_id: int,
    reason: str | None = None,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
):
    course = _get_course_or_404(db, course_id)
    return exam_course_service.delete_exam_course(db, course=course, reason=reason)
