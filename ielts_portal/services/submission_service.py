# ielts_portal/services/submission_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy import func
from sqlalchemy.orm import Session

from ielts_portal.models.exam import WritingExam
from ielts_portal.models.exam_course import ExamCourse
from ielts_portal.models.exam_set import ExamSet
from ielts_portal.models.feedback import Feedback, FeedbackReply
from ielts_portal.models.submission import STATUS_GRADED, STATUS_SUBMITTED, Submission
from ielts_portal.models.user import User
from ielts_portal.schemas.answers import decode_answers, encode_speaking_paths
from ielts_portal.schemas.submission import (
    MentorQueueItem,
    SubmissionCreate,
    SubmissionHistoryItem,
    SubmissionPublic,
)
from ielts_portal.services import exam_course_service, file_storage, writing_scoring_service
from ielts_portal.workers.queue import enqueue_rescore_task

logger = logging.getLogger(__name__)


class SubmissionError(Exception):
    pass


class InvalidSubmission(SubmissionError):
    pass


class ExamCourseNotFound(SubmissionError):
    pass


def _exam_set_id_for(db: Session, *, exam_type: str, exam_id: int | None) -> Optional[int]:
    """Writing submissions point at a WritingExam; the rest point at the set."""
    if exam_id is None:
        return None
    if exam_type == "writing":
        exam = db.get(WritingExam, exam_id)
        return exam.exam_set_id if exam else None
    return exam_id


def resolve_exam_course(
    db: Session,
    *,
    exam_type: str,
    exam_id: int | None,
    exam_course_id: int | None = None,
) -> Optional[int]:
    """
    Pick the course a submission belongs to.

    An explicit course id wins and must exist with the same exam type.
    Otherwise the first course that has the target exam set assigned is
    used, and no match leaves the submission without a course.
    """
    if exam_course_id is not None:
        course = db.get(ExamCourse, exam_course_id)
        if course is None:
            raise ExamCourseNotFound(f"Exam course {exam_course_id} not found")
        if course.exam_type.lower() != exam_type:
            raise InvalidSubmission(
                f"Exam course {exam_course_id} is a {course.exam_type} course, "
                f"not {exam_type}"
            )
        return course.id

    exam_set_id = _exam_set_id_for(db, exam_type=exam_type, exam_id=exam_id)
    if exam_set_id is None:
        return None
    return exam_course_service.find_course_for_exam_set(
        db, exam_set_id=exam_set_id, exam_type=exam_type
    )


def create_submission(db: Session, *, obj_in: SubmissionCreate) -> Submission:
    """
    Store a reading / listening / writing submission.

    Writing submissions are AI-scored before this returns; a scoring
    failure is recorded on the row and never raised.
    """
    if obj_in.exam_type in ("reading", "listening"):
        try:
            decode_answers(obj_in.exam_type, obj_in.answers)
        except ValueError as e:
            raise InvalidSubmission(f"Invalid answers: {e}") from e

    exam_course_id = resolve_exam_course(
        db,
        exam_type=obj_in.exam_type,
        exam_id=obj_in.exam_id,
        exam_course_id=obj_in.exam_course_id,
    )

    submission = Submission(
        user_id=obj_in.user_id,
        exam_course_id=exam_course_id,
        exam_type=obj_in.exam_type,
        exam_id=obj_in.exam_id,
        answers=obj_in.answers,
        total_word_count=obj_in.total_word_count,
        time_spent=obj_in.time_spent,
        submitted_at=obj_in.submitted_at or datetime.now(timezone.utc),
        status=STATUS_SUBMITTED,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)
    logger.info(
        f"Created {submission.exam_type} submission {submission.id} "
        f"for user {submission.user_id} (course {submission.exam_course_id})"
    )

    if submission.exam_type == "writing":
        submission = writing_scoring_service.score_writing_submission(db, submission)
    return submission


def create_speaking_submission(
    db: Session,
    *,
    user_id: int,
    exam_set_id: int,
    audio_files: List[UploadFile],
) -> Submission:
    if not audio_files:
        raise InvalidSubmission("At least one audio file is required")

    submission = Submission(
        user_id=user_id,
        exam_course_id=resolve_exam_course(db, exam_type="speaking", exam_id=exam_set_id),
        exam_type="speaking",
        exam_id=exam_set_id,
        answers="",
        submitted_at=datetime.now(timezone.utc),
        status=STATUS_SUBMITTED,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)

    # file names carry the submission id, so the row has to exist first
    submission_id = submission.id
    paths = []
    try:
        for f in audio_files:
            paths.append(file_storage.save_speaking_audio(submission_id, f))
        submission.answers = encode_speaking_paths(paths)
        db.add(submission)
        db.commit()
        db.refresh(submission)
    except Exception:
        logger.error(
            f"Storing audio for speaking submission {submission_id} failed, removing it",
            exc_info=True,
        )
        db.rollback()
        for path in paths:
            file_storage.delete_upload(path)
        db.delete(submission)
        db.commit()
        raise
    logger.info(
        f"Created speaking submission {submission.id} for user {user_id} "
        f"with {len(paths)} audio files"
    )
    return submission


def get_submission(db: Session, submission_id: int) -> Optional[Submission]:
    return db.get(Submission, submission_id)


def list_submissions_for_user(db: Session, *, user_id: int) -> List[Submission]:
    return (
        db.query(Submission)
        .filter(Submission.user_id == user_id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .all()
    )


def list_submissions_for_exam(db: Session, *, exam_type: str, exam_id: int) -> List[Submission]:
    return (
        db.query(Submission)
        .filter(
            func.lower(Submission.exam_type) == exam_type.lower(),
            Submission.exam_id == exam_id,
        )
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .all()
    )


def format_time_spent(seconds: int | None) -> str:
    seconds = max(seconds or 0, 0)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_score(submission: Submission) -> str:
    score = submission.ai_score if submission.ai_score is not None else submission.mentor_score
    if score is None:
        return "Not Graded"
    return f"{float(score):.1f}/10"


def exam_title(db: Session, submission: Submission) -> str:
    exam_type = (submission.exam_type or "").lower()
    fallback = f"{exam_type.capitalize()} Exam"

    exam_set_id = _exam_set_id_for(db, exam_type=exam_type, exam_id=submission.exam_id)
    exam_set = db.get(ExamSet, exam_set_id) if exam_set_id is not None else None
    return exam_set.exam_set_title if exam_set else fallback


def _reply_count(db: Session, submission_id: int) -> int:
    return (
        db.query(func.count(FeedbackReply.id))
        .join(Feedback, FeedbackReply.feedback_id == Feedback.id)
        .filter(Feedback.submission_id == submission_id)
        .scalar()
    )


def list_submission_history(db: Session, *, user_id: int) -> List[SubmissionHistoryItem]:
    items = []
    for sub in list_submissions_for_user(db, user_id=user_id):
        course = db.get(ExamCourse, sub.exam_course_id) if sub.exam_course_id else None
        items.append(
            SubmissionHistoryItem(
                **SubmissionPublic.model_validate(sub).model_dump(),
                exam_title=exam_title(db, sub),
                course_title=course.course_title if course else None,
                course_code=course.course_code if course else None,
                reply_count=_reply_count(db, sub.id),
                time_spent_formatted=format_time_spent(sub.time_spent),
                score_formatted=format_score(sub),
            )
        )
    return items


def list_pending_for_mentor(db: Session) -> List[MentorQueueItem]:
    """Writing and speaking work still waiting for a mentor, oldest first."""
    rows = (
        db.query(Submission, User.full_name)
        .outerjoin(User, Submission.user_id == User.id)
        .filter(
            Submission.exam_type.in_(("writing", "speaking")),
            Submission.status != STATUS_GRADED,
        )
        .order_by(Submission.submitted_at.asc(), Submission.id.asc())
        .all()
    )
    return [
        MentorQueueItem(
            **SubmissionPublic.model_validate(sub).model_dump(),
            student_name=student_name,
        )
        for sub, student_name in rows
    ]


def request_rescore(submission: Submission) -> str:
    """Queue another AI pass for a writing submission; returns the RQ job id."""
    if submission.exam_type != "writing":
        raise InvalidSubmission("Only writing submissions can be re-scored")
    if submission.status == STATUS_GRADED:
        raise InvalidSubmission("Submission has already been graded by a mentor")

    job_id = enqueue_rescore_task(submission.id)
    logger.info(f"Enqueued re-scoring job {job_id} for submission {submission.id}")
    return job_id
