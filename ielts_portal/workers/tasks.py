"""
Re-scoring tasks for the RQ worker.

Runs the same AI writing adapter as the request path, with its own session.
"""

import logging

from ielts_portal.db.session import SessionLocal
from ielts_portal.models.submission import STATUS_GRADED, Submission
from ielts_portal.services.writing_scoring_service import (
    SubmissionAlreadyGraded,
    record_scoring_failure,
    run_ai_scoring,
)

logger = logging.getLogger(__name__)


def _skipped(submission: Submission) -> dict:
    logger.info(f"Re-scoring skipped: submission {submission.id} is already graded")
    return {
        "status": "skipped",
        "submission_id": submission.id,
        "submission_status": submission.status,
        "message": "already graded",
    }


def rescore_writing_task(submission_id: int) -> dict:
    """
    Worker task: AI-score a writing submission again.

    Graded submissions are left alone. A failed attempt keeps any earlier
    AI result on the row and is reported in the returned dictionary.

    Returns:
        Dictionary with the outcome, kept as the RQ job result
    """
    db = SessionLocal()
    try:
        submission = db.get(Submission, submission_id)
        if submission is None:
            logger.error(f"Re-scoring skipped: submission {submission_id} not found")
            return {
                "status": "error",
                "submission_id": submission_id,
                "message": f"Submission {submission_id} not found",
            }
        if submission.status == STATUS_GRADED:
            return _skipped(submission)

        logger.info(f"Starting re-scoring task for submission {submission_id}")
        try:
            submission = run_ai_scoring(db, submission)
        except SubmissionAlreadyGraded:
            db.rollback()
            return _skipped(db.get(Submission, submission_id))
        except Exception as e:
            logger.error(f"Re-scoring failed for submission {submission_id}", exc_info=True)
            db.rollback()
            submission = record_scoring_failure(db, submission_id)
            return {
                "status": "error",
                "submission_id": submission_id,
                "submission_status": submission.status if submission else None,
                "message": str(e),
            }

        logger.info(
            f"Completed re-scoring task for submission {submission_id}: "
            f"status={submission.status}, band={submission.ai_score}"
        )
        return {
            "status": "success",
            "submission_id": submission.id,
            "submission_status": submission.status,
            "ai_score": float(submission.ai_score) if submission.ai_score is not None else None,
        }
    finally:
        db.close()
