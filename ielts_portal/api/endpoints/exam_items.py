# ielts_portal/api/endpoints/exam_items.py
"""
CRUD routers for the four exam item tables.

Each item type gets its own controller path (/ReadingExam, /ListeningExam,
...) but the handlers are identical apart from the model and schemas.
"""

from typing import List, Type

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ielts_portal.core.security import get_current_mentor
from ielts_portal.db.session import get_db
from ielts_portal.models.exam import ListeningExam, ReadingExam, SpeakingExam, WritingExam
from ielts_portal.models.user import User
from ielts_portal.schemas.exam import (
    ListeningExamCreate,
    ListeningExamPublic,
    ListeningExamUpdate,
    ReadingExamCreate,
    ReadingExamPublic,
    ReadingExamUpdate,
    SpeakingExamCreate,
    SpeakingExamPublic,
    SpeakingExamUpdate,
    WritingExamCreate,
    WritingExamPublic,
    WritingExamUpdate,
)
from ielts_portal.services import exam_service, exam_set_service


def _check_exam_set(db: Session, exam_set_id: int | None, exam_type: str) -> None:
    if exam_set_id is None:
        return
    if exam_set_service.get_exam_set(db, exam_set_id, exam_type) is None:
        raise HTTPException(
            status_code=400,
            detail=f"Exam set {exam_set_id} not found for {exam_type} exams",
        )


def build_item_router(
    *,
    prefix: str,
    exam_type: str,
    model,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    public_schema: Type[BaseModel],
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[f"{exam_type}-exams"])
    not_found = f"{exam_type.capitalize()} exam not found"

    def get_or_404(db: Session, item_id: int):
        item = exam_service.get_item(db, model, item_id)
        if not item:
            raise HTTPException(status_code=404, detail=not_found)
        return item

    @router.get("/", response_model=List[public_schema])
    def list_items(db: Session = Depends(get_db)):
        return exam_service.list_items(db, model)

    @router.get("/examset/{exam_set_id}", response_model=List[public_schema])
    def list_items_for_exam_set(exam_set_id: int, db: Session = Depends(get_db)):
        return exam_service.list_items_for_exam_set(db, model, exam_set_id=exam_set_id)

    @router.get("/{item_id}", response_model=public_schema)
    def get_item(item_id: int, db: Session = Depends(get_db)):
        return get_or_404(db, item_id)

    @router.post("/", response_model=public_schema, status_code=status.HTTP_201_CREATED)
    def create_item(
        obj_in: create_schema,
        db: Session = Depends(get_db),
        current_mentor: User = Depends(get_current_mentor),
    ):
        _check_exam_set(db, obj_in.exam_set_id, exam_type)
        return exam_service.create_item(db, model, obj_in=obj_in)

    @router.put("/{item_id}", response_model=public_schema)
    def update_item(
        item_id: int,
        obj_in: update_schema,
        db: Session = Depends(get_db),
        current_mentor: User = Depends(get_current_mentor),
    ):
        item = get_or_404(db, item_id)
        if "exam_set_id" in obj_in.model_fields_set:
            _check_exam_set(db, obj_in.exam_set_id, exam_type)
        return exam_service.update_item(db, db_obj=item, obj_in=obj_in)

    @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_item(
        item_id: int,
        db: Session = Depends(get_db),
        current_mentor: User = Depends(get_current_mentor),
    ):
        exam_service.delete_item(db, db_obj=get_or_404(db, item_id))

    return router


reading_router = build_item_router(
    prefix="/ReadingExam",
    exam_type="reading",
    model=ReadingExam,
    create_schema=ReadingExamCreate,
    update_schema=ReadingExamUpdate,
    public_schema=ReadingExamPublic,
)

listening_router = build_item_router(
    prefix="/ListeningExam",
    exam_type="listening",
    model=ListeningExam,
    create_schema=ListeningExamCreate,
    update_schema=ListeningExamUpdate,
    public_schema=ListeningExamPublic,
)

speaking_router = build_item_router(
    prefix="/SpeakingExam",
    exam_type="speaking",
    model=SpeakingExam,
    create_schema=SpeakingExamCreate,
    update_schema=SpeakingExamUpdate,
    public_schema=SpeakingExamPublic,
)

writing_router = build_item_router(
    prefix="/WritingExam",
    exam_type="writing",
    model=WritingExam,
    create_schema=WritingExamCreate,
    update_schema=WritingExamUpdate,
    public_schema=WritingExamPublic,
)


@writing_router.get("/course/{course_id}", response_model=WritingExamPublic)
def get_writing_exam_for_course(course_id: int, db: Session = Depends(get_db)):
    exam = exam_service.get_writing_exam_for_course(db, exam_course_id=course_id)
    if exam is None:
        raise HTTPException(status_code=404, detail=f"Writing exam for course ID {course_id} not found")
    return exam
