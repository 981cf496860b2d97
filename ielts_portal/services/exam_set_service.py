# ielts_portal/services/exam_set_service.py
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ielts_portal.models.exam import ListeningExam, ReadingExam, SpeakingExam, WritingExam
from ielts_portal.models.exam_course import ExamCourseExamSet
from ielts_portal.models.exam_set import ExamSet
from ielts_portal.schemas.exam_set import ExamSetCreate, ExamSetSummary, ExamSetUpdate

logger = logging.getLogger(__name__)

ITEM_MODELS = {
    "reading": ReadingExam,
    "listening": ListeningExam,
    "speaking": SpeakingExam,
    "writing": WritingExam,
}

_CODE_PREFIXES = {
    "reading": "RS",
    "listening": "LS",
    "speaking": "SS",
    "writing": "WS",
}


def question_count(db: Session, exam_set: ExamSet) -> int:
    item_model = ITEM_MODELS[exam_set.exam_type]
    return (
        db.query(func.count(item_model.id))
        .filter(item_model.exam_set_id == exam_set.id)
        .scalar()
    )


def to_summary(db: Session, exam_set: ExamSet) -> ExamSetSummary:
    return ExamSetSummary(
        exam_set_id=exam_set.id,
        exam_set_title=exam_set.exam_set_title,
        exam_set_code=exam_set.exam_set_code,
        exam_type=exam_set.exam_type,
        total_questions=exam_set.total_questions,
        question_count=question_count(db, exam_set),
        context=exam_set.context,
        image_url=exam_set.image_url,
        created_at=exam_set.created_at,
    )


def get_exam_set(db: Session, exam_set_id: int, exam_type: str | None = None) -> Optional[ExamSet]:
    exam_set = db.get(ExamSet, exam_set_id)
    if exam_set is None:
        return None
    if exam_type is not None and exam_set.exam_type != exam_type:
        return None
    return exam_set


def list_exam_sets(db: Session, *, exam_type: str) -> List[ExamSet]:
    return (
        db.query(ExamSet)
        .filter(ExamSet.exam_type == exam_type)
        .order_by(ExamSet.created_at.desc(), ExamSet.id.desc())
        .all()
    )


def list_exam_sets_by_ids(db: Session, *, exam_type: str, ids: List[int]) -> List[ExamSet]:
    if not ids:
        return []
    return (
        db.query(ExamSet)
        .filter(ExamSet.exam_type == exam_type, ExamSet.id.in_(ids))
        .order_by(ExamSet.id.asc())
        .all()
    )


def create_exam_set(db: Session, *, exam_type: str, obj_in: ExamSetCreate) -> ExamSet:
    # passage for reading sets, picture for listening sets
    image_url = obj_in.reading_image if exam_type == "reading" else None
    if exam_type == "listening":
        image_url = obj_in.listening_image

    db_obj = ExamSet(
        exam_type=exam_type,
        exam_set_code=f"{_CODE_PREFIXES[exam_type]}_{datetime.now():%Y%m%d%H%M%S}",
        exam_set_title=obj_in.title,
        total_questions=obj_in.target_questions,
        context=obj_in.reading_context if exam_type == "reading" else None,
        image_url=image_url,
    )
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def update_exam_set(db: Session, *, db_obj: ExamSet, obj_in: ExamSetUpdate) -> ExamSet:
    db_obj.exam_set_title = obj_in.exam_set_title
    db_obj.total_questions = obj_in.total_questions
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def delete_exam_set(db: Session, *, db_obj: ExamSet) -> None:
    """Remove the set together with its items and course assignments."""
    exam_set_id, exam_type = db_obj.id, db_obj.exam_type
    item_model = ITEM_MODELS[exam_type]
    items = (
        db.query(item_model)
        .filter(item_model.exam_set_id == exam_set_id)
        .delete(synchronize_session=False)
    )
    assignments = (
        db.query(ExamCourseExamSet)
        .filter(ExamCourseExamSet.exam_set_id == exam_set_id)
        .delete(synchronize_session=False)
    )
    db.delete(db_obj)
    db.commit()
    logger.info(
        f"Deleted {exam_type} exam set {exam_set_id} "
        f"({items} items, {assignments} course assignments)"
    )
