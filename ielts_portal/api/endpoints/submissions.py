# ielts_portal/api/endpoints/submissions.py
from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from ielts_portal.api.endpoints.exam_sets import normalise_exam_type
from ielts_portal.core.security import get_current_mentor
from ielts_portal.db.session import get_db
from ielts_portal.models.submission import Submission
from ielts_portal.models.user import User
from ielts_portal.schemas.feedback import FeedbackPublic, FeedbackReplyCreate, FeedbackReplyPublic
from ielts_portal.schemas.score import GradeSubmission
from ielts_portal.schemas.submission import (
    MentorQueueItem,
    RescoreResponse,
    SubmissionCreate,
    SubmissionHistoryItem,
    SubmissionPublic,
    SubmissionResult,
)
from ielts_portal.services import grading_service, result_service, submission_service
from ielts_portal.services.submission_service import ExamCourseNotFound, InvalidSubmission

router = APIRouter(prefix="/Submission", tags=["submissions"])


def _get_submission_or_404(db: Session, submission_id: int) -> Submission:
    sub = submission_service.get_submission(db, submission_id)
    if not sub:
        raise HTTPException(status_code=404, detail="Submission not found")
    return sub


@router.post("/", response_model=SubmissionPublic, status_code=status.HTTP_201_CREATED)
def create_submission(obj_in: SubmissionCreate, db: Session = Depends(get_db)):
    """
    Store a reading, listening or writing submission.

    Writing submissions come back already AI-scored, or marked
    "AI Scoring Failed" when the scoring service could not be used.
    """
    try:
        return submission_service.create_submission(db, obj_in=obj_in)
    except ExamCourseNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidSubmission as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/speaking", response_model=SubmissionPublic, status_code=status.HTTP_201_CREATED)
def create_speaking_submission(
    user_id: int = Form(alias="userId"),
    exam_set_id: int = Form(alias="examSetId"),
    audio_files: List[UploadFile] = File(alias="audioFiles"),
    db: Session = Depends(get_db),
):
    try:
        return submission_service.create_speaking_submission(
            db, user_id=user_id, exam_set_id=exam_set_id, audio_files=audio_files
        )
    except InvalidSubmission as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/mentor", response_model=List[MentorQueueItem])
def list_pending_for_mentor(
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
):
    """Writing and speaking submissions not yet graded, oldest first."""
    return submission_service.list_pending_for_mentor(db)


@router.get("/user/{user_id}/history", response_model=List[SubmissionHistoryItem])
def get_user_submission_history(user_id: int, db: Session = Depends(get_db)):
    return submission_service.list_submission_history(db, user_id=user_id)


@router.get("/user/{user_id}", response_model=List[SubmissionPublic])
def get_user_submissions(user_id: int, db: Session = Depends(get_db)):
    return submission_service.list_submissions_for_user(db, user_id=user_id)


@router.get("/exam/{exam_type}/{exam_id}", response_model=List[SubmissionPublic])
def get_exam_submissions(exam_type: str, exam_id: int, db: Session = Depends(get_db)):
    return submission_service.list_submissions_for_exam(
        db, exam_type=normalise_exam_type(exam_type), exam_id=exam_id
    )


@router.get("/feedback/{submission_id}", response_model=FeedbackPublic)
def get_feedback(submission_id: int, db: Session = Depends(get_db)):
    thread = grading_service.get_feedback_thread(db, submission_id)
    if thread is None:
        raise HTTPException(status_code=404, detail="Feedback not found")
    return thread


@router.post("/feedback/reply", response_model=FeedbackReplyPublic, status_code=status.HTTP_201_CREATED)
def add_feedback_reply(reply_in: FeedbackReplyCreate, db: Session = Depends(get_db)):
    reply = grading_service.add_feedback_reply(db, reply_in=reply_in)
    if reply is None:
        raise HTTPException(status_code=404, detail="Feedback not found")
    return reply


@router.get("/{submission_id}", response_model=SubmissionPublic)
def get_submission(submission_id: int, db: Session = Depends(get_db)):
    return _get_submission_or_404(db, submission_id)


@router.get("/{submission_id}/result", response_model=SubmissionResult)
def get_submission_result(submission_id: int, db: Session = Depends(get_db)):
    """Score a reading or listening submission against the answer keys."""
    try:
        return result_service.compute_submission_result(db, submission_id)
    except result_service.SubmissionNotFound:
        raise HTTPException(status_code=404, detail="Submission not found")
    except result_service.ResultNotAvailable as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{submission_id}/grade", response_model=SubmissionPublic)
def grade_submission(
    submission_id: int,
    grade_in: GradeSubmission,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
):
    sub = _get_submission_or_404(db, submission_id)
    return grading_service.grade_submission(db, submission=sub, grade_in=grade_in)


@router.post("/{submission_id}/rescore", response_model=RescoreResponse, status_code=status.HTTP_202_ACCEPTED)
def rescore_submission(
    submission_id: int,
    db: Session = Depends(get_db),
    current_mentor: User = Depends(get_current_mentor),
):
    """Queue another AI scoring pass; the worker updates the row later."""
    sub = _get_submission_or_404(db, submission_id)
    try:
        job_id = submission_service.request_rescore(sub)
    except InvalidSubmission as e:
        raise HTTPException(status_code=400, detail=str(e))
    return RescoreResponse(submission_id=sub.id, job_id=job_id)
