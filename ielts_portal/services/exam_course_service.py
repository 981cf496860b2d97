# ielts_portal/services/exam_course_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ielts_portal.models.exam_course import ExamCourse, ExamCourseExamSet
from ielts_portal.models.feedback import Feedback, FeedbackReply
from ielts_portal.models.submission import Submission
from ielts_portal.schemas.answers import EXAM_TYPES
from ielts_portal.schemas.exam_course import (
    ExamCourseCreate,
    ExamCourseDeleteResult,
    ExamCourseDetail,
    ExamCoursePublic,
    ExamCourseUpdate,
)
from ielts_portal.schemas.exam_set import AvailableExams, AvailableExamsSummary, CourseExams
from ielts_portal.services import exam_set_service

logger = logging.getLogger(__name__)


def get_exam_course(db: Session, exam_course_id: int) -> Optional[ExamCourse]:
    return db.get(ExamCourse, exam_course_id)


def _assigned_set_ids(db: Session, exam_course_id: int, exam_type: str | None = None) -> List[int]:
    q = db.query(ExamCourseExamSet.exam_set_id).filter(
        ExamCourseExamSet.exam_course_id == exam_course_id
    )
    if exam_type is not None:
        q = q.filter(ExamCourseExamSet.exam_set_type == exam_type)
    return [row[0] for row in q.order_by(ExamCourseExamSet.id.asc()).all()]


def to_public(db: Session, course: ExamCourse) -> ExamCoursePublic:
    counts = dict(
        db.query(ExamCourseExamSet.exam_set_type, func.count(ExamCourseExamSet.id))
        .filter(ExamCourseExamSet.exam_course_id == course.id)
        .group_by(ExamCourseExamSet.exam_set_type)
        .all()
    )
    return ExamCoursePublic(
        id=course.id,
        course_title=course.course_title,
        course_code=course.course_code,
        description=course.description or "",
        exam_type=course.exam_type,
        created_at=course.created_at,
        reading_exam_sets_count=counts.get("reading", 0),
        listening_exam_sets_count=counts.get("listening", 0),
        speaking_exam_sets_count=counts.get("speaking", 0),
        writing_exam_sets_count=counts.get("writing", 0),
        total_exam_sets=sum(counts.values()),
    )


def list_exam_courses(db: Session) -> List[ExamCoursePublic]:
    courses = db.query(ExamCourse).order_by(ExamCourse.created_at.desc(), ExamCourse.id.desc()).all()
    return [to_public(db, c) for c in courses]


def get_exam_course_detail(db: Session, course: ExamCourse) -> ExamCourseDetail:
    exam_type = course.exam_type.lower()
    set_ids = _assigned_set_ids(db, course.id, exam_type)
    summaries = [
        exam_set_service.to_summary(db, s)
        for s in exam_set_service.list_exam_sets_by_ids(db, exam_type=exam_type, ids=set_ids)
    ]
    detail = ExamCourseDetail(
        id=course.id,
        course_title=course.course_title,
        course_code=course.course_code,
        description=course.description or "",
        exam_type=course.exam_type,
        created_at=course.created_at,
    )
    setattr(detail, f"{exam_type}_exam_sets", summaries)
    return detail


def _assign_exam_sets(db: Session, *, exam_course_id: int, exam_set_ids: List[int], exam_type: str) -> None:
    """Add missing assignments; unknown or wrong-type set ids are skipped."""
    valid_ids = {
        s.id for s in exam_set_service.list_exam_sets_by_ids(db, exam_type=exam_type, ids=exam_set_ids)
    }
    existing = set(_assigned_set_ids(db, exam_course_id, exam_type))
    for exam_set_id in dict.fromkeys(exam_set_ids):
        if exam_set_id not in valid_ids:
            logger.warning(f"Skipping {exam_type} exam set {exam_set_id}: not found")
            continue
        if exam_set_id in existing:
            continue
        db.add(
            ExamCourseExamSet(
                exam_course_id=exam_course_id,
                exam_set_id=exam_set_id,
                exam_set_type=exam_type,
            )
        )


def create_exam_course(db: Session, *, obj_in: ExamCourseCreate) -> ExamCourse:
    course = ExamCourse(
        course_title=obj_in.course_title,
        course_code=obj_in.course_code or f"EC_{datetime.now():%Y%m%d%H%M%S}",
        description=obj_in.description or "",
        exam_type=obj_in.exam_type,
    )
    db.add(course)
    db.flush()  # need the id for the join rows

    _assign_exam_sets(
        db,
        exam_course_id=course.id,
        exam_set_ids=obj_in.exam_set_ids,
        exam_type=obj_in.exam_type,
    )
    db.commit()
    db.refresh(course)
    return course


def update_exam_course(db: Session, *, course: ExamCourse, obj_in: ExamCourseUpdate) -> ExamCourse:
    course.course_title = obj_in.course_title
    course.description = obj_in.description

    # replace the assignment list wholesale
    exam_type = course.exam_type.lower()
    (
        db.query(ExamCourseExamSet)
        .filter(
            ExamCourseExamSet.exam_course_id == course.id,
            ExamCourseExamSet.exam_set_type == exam_type,
        )
        .delete(synchronize_session=False)
    )
    _assign_exam_sets(
        db,
        exam_course_id=course.id,
        exam_set_ids=obj_in.exam_set_ids,
        exam_type=exam_type,
    )
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


def delete_exam_course(db: Session, *, course: ExamCourse, reason: str | None = None) -> ExamCourseDeleteResult:
    """
    Delete a course and everything hanging off it.

    Order: feedback threads of its submissions, the submissions, the
    exam set assignments, then the course row. One commit for all of it.
    """
    course_id = course.id
    course_title = course.course_title

    submission_ids = [
        row[0]
        for row in db.query(Submission.id).filter(Submission.exam_course_id == course_id).all()
    ]
    if submission_ids:
        feedback_ids = [
            row[0]
            for row in db.query(Feedback.id).filter(Feedback.submission_id.in_(submission_ids)).all()
        ]
        if feedback_ids:
            (
                db.query(FeedbackReply)
                .filter(FeedbackReply.feedback_id.in_(feedback_ids))
                .delete(synchronize_session=False)
            )
            (
                db.query(Feedback)
                .filter(Feedback.id.in_(feedback_ids))
                .delete(synchronize_session=False)
            )
        (
            db.query(Submission)
            .filter(Submission.id.in_(submission_ids))
            .delete(synchronize_session=False)
        )

    assignments_count = (
        db.query(ExamCourseExamSet)
        .filter(ExamCourseExamSet.exam_course_id == course_id)
        .delete(synchronize_session=False)
    )

    db.delete(course)
    db.commit()

    logger.info(
        f"Deleted exam course {course_id}: {len(submission_ids)} submissions, "
        f"{assignments_count} assignments. Reason: {reason or 'No reason provided'}"
    )
    return ExamCourseDeleteResult(
        success=True,
        message=f"Successfully deleted exam course '{course_title}'",
        deleted_exam_course_id=course_id,
        deleted_submissions_count=len(submission_ids),
        deleted_assignments_count=assignments_count,
        deleted_at=datetime.now(timezone.utc),
    )


def find_course_for_exam_set(db: Session, *, exam_set_id: int, exam_type: str) -> Optional[int]:
    row = (
        db.query(ExamCourseExamSet.exam_course_id)
        .filter(
            ExamCourseExamSet.exam_set_id == exam_set_id,
            ExamCourseExamSet.exam_set_type == exam_type,
        )
        .order_by(ExamCourseExamSet.id.asc())
        .first()
    )
    return row[0] if row else None


def list_available_exams(db: Session) -> AvailableExams:
    grouped = {
        exam_type: [
            exam_set_service.to_summary(db, s)
            for s in exam_set_service.list_exam_sets(db, exam_type=exam_type)
        ]
        for exam_type in EXAM_TYPES
    }
    return AvailableExams(
        **grouped,
        summary=AvailableExamsSummary(
            total_reading=len(grouped["reading"]),
            total_listening=len(grouped["listening"]),
            total_speaking=len(grouped["speaking"]),
            total_writing=len(grouped["writing"]),
            total_exams=sum(len(v) for v in grouped.values()),
        ),
    )


def list_course_exams(db: Session, course: ExamCourse) -> CourseExams:
    exams = []
    assignments = (
        db.query(ExamCourseExamSet)
        .filter(ExamCourseExamSet.exam_course_id == course.id)
        .order_by(ExamCourseExamSet.id.asc())
        .all()
    )
    for assignment in assignments:
        exam_set = exam_set_service.get_exam_set(
            db, assignment.exam_set_id, assignment.exam_set_type.lower()
        )
        if exam_set is not None:
            exams.append(exam_set_service.to_summary(db, exam_set))

    return CourseExams(
        course_id=course.id,
        course_title=course.course_title,
        course_code=course.course_code,
        exam_type=course.exam_type,
        exams=exams,
        total_exams=len(exams),
    )
