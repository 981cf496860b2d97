# ielts_portal/services/grading_service.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ielts_portal.models.feedback import Feedback, FeedbackReply
from ielts_portal.models.submission import Submission
from ielts_portal.models.user import User
from ielts_portal.schemas.feedback import FeedbackPublic, FeedbackReplyCreate, FeedbackReplyPublic
from ielts_portal.schemas.score import GradeSubmission

logger = logging.getLogger(__name__)


def get_feedback_for_submission(db: Session, submission_id: int) -> Optional[Feedback]:
    return (
        db.query(Feedback)
        .filter(Feedback.submission_id == submission_id)
        .order_by(Feedback.id.asc())
        .first()
    )


def grade_submission(
    db: Session,
    *,
    submission: Submission,
    grade_in: GradeSubmission,
) -> Submission:
    """
    Mentor grading: store the score and upsert the submission's feedback.

    A submission keeps a single feedback row; grading again rewrites it.
    Concurrent graders are not detected, the last commit wins.
    """
    submission.mentor_score = grade_in.mentor_score
    submission.status = grade_in.status

    feedback = get_feedback_for_submission(db, submission.id)
    if feedback is None:
        feedback = Feedback(submission_id=submission.id)
    feedback.feedback_text = grade_in.feedback_content
    feedback.mentor_id = grade_in.mentor_id

    db.add(submission)
    db.add(feedback)
    db.commit()
    db.refresh(submission)
    logger.info(
        f"Submission {submission.id} graded {submission.mentor_score} "
        f"by mentor {grade_in.mentor_id}"
    )
    return submission


def _user_names(db: Session, user_ids) -> dict:
    ids = {uid for uid in user_ids if uid is not None}
    if not ids:
        return {}
    return dict(db.query(User.id, User.full_name).filter(User.id.in_(ids)).all())


def get_feedback_thread(db: Session, submission_id: int) -> Optional[FeedbackPublic]:
    feedback = get_feedback_for_submission(db, submission_id)
    if feedback is None:
        return None

    replies = (
        db.query(FeedbackReply)
        .filter(FeedbackReply.feedback_id == feedback.id)
        .order_by(FeedbackReply.created_at.asc(), FeedbackReply.id.asc())
        .all()
    )
    names = _user_names(db, [feedback.mentor_id] + [r.user_id for r in replies])

    return FeedbackPublic(
        id=feedback.id,
        submission_id=feedback.submission_id,
        mentor_id=feedback.mentor_id,
        mentor_name=names.get(feedback.mentor_id),
        feedback_text=feedback.feedback_text,
        created_at=feedback.created_at,
        replies=[
            FeedbackReplyPublic(
                id=r.id,
                feedback_id=r.feedback_id,
                user_id=r.user_id,
                user_name=names.get(r.user_id),
                reply_text=r.reply_text,
                created_at=r.created_at,
            )
            for r in replies
        ],
    )


def add_feedback_reply(db: Session, *, reply_in: FeedbackReplyCreate) -> Optional[FeedbackReplyPublic]:
    """Returns None when the feedback does not exist."""
    feedback = db.get(Feedback, reply_in.feedback_id)
    if feedback is None:
        return None

    reply = FeedbackReply(
        feedback_id=feedback.id,
        user_id=reply_in.user_id,
        reply_text=reply_in.reply_text,
    )
    db.add(reply)
    db.commit()
    db.refresh(reply)

    user = db.get(User, reply.user_id) if reply.user_id is not None else None
    return FeedbackReplyPublic(
        id=reply.id,
        feedback_id=reply.feedback_id,
        user_id=reply.user_id,
        user_name=user.full_name if user else None,
        reply_text=reply.reply_text,
        created_at=reply.created_at,
    )
