# ielts_portal/services/exam_service.py
from typing import List, Optional, Type

from pydantic import BaseModel
from sqlalchemy.orm import Session

from ielts_portal.db.base import Base
from ielts_portal.models.exam import WritingExam
from ielts_portal.models.exam_course import ExamCourseExamSet


def get_item(db: Session, model: Type[Base], item_id: int) -> Optional[Base]:
    return db.get(model, item_id)


def list_items(db: Session, model: Type[Base]) -> List[Base]:
    return db.query(model).order_by(model.id.asc()).all()


def list_items_for_exam_set(db: Session, model: Type[Base], *, exam_set_id: int) -> List[Base]:
    return (
        db.query(model)
        .filter(model.exam_set_id == exam_set_id)
        .order_by(model.id.asc())
        .all()
    )


def get_writing_exam_for_course(db: Session, *, exam_course_id: int) -> Optional[WritingExam]:
    """First writing exam of the earliest writing set assigned to the course."""
    return (
        db.query(WritingExam)
        .join(ExamCourseExamSet, ExamCourseExamSet.exam_set_id == WritingExam.exam_set_id)
        .filter(
            ExamCourseExamSet.exam_course_id == exam_course_id,
            ExamCourseExamSet.exam_set_type == "writing",
        )
        .order_by(ExamCourseExamSet.id.asc(), WritingExam.id.asc())
        .first()
    )


def create_item(db: Session, model: Type[Base], *, obj_in: BaseModel) -> Base:
    db_obj = model(**obj_in.model_dump())
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def update_item(db: Session, *, db_obj: Base, obj_in: BaseModel) -> Base:
    update_data = obj_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def delete_item(db: Session, *, db_obj: Base) -> None:
    db.delete(db_obj)
    db.commit()
