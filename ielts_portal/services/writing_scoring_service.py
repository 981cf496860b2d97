# ielts_portal/services/writing_scoring_service.py
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ielts_portal.models.exam import WritingExam
from ielts_portal.models.submission import (
    STATUS_AI_SCORED,
    STATUS_AI_SCORING_FAILED,
    STATUS_GRADED,
    Submission,
)
from ielts_portal.schemas.answers import decode_answers
from ielts_portal.services import ai_client

logger = logging.getLogger(__name__)

WRITING_TYPE_TASK1 = "Task 1 only"
WRITING_TYPE_TASK2 = "Task 2 only"
WRITING_TYPE_BOTH = "Task 1 + Task 2"
WRITING_TYPE_GENERIC = "IELTS Academic Writing"

SCORING_UNAVAILABLE_MESSAGE = (
    "AI scoring service is currently unavailable. Your submission has been saved "
    "and will be reviewed manually by our instructors."
)


class WritingScoringError(Exception):
    pass


class SubmissionAlreadyGraded(WritingScoringError):
    pass


def _has_task1(exam: WritingExam) -> bool:
    return bool((exam.task1_description or "").strip())


def _has_task2(exam: WritingExam) -> bool:
    return bool((exam.task2_question or "").strip())


def _section(header: str, *lines: Optional[str]) -> str:
    body = [header] + [line.strip() for line in lines if line and line.strip()]
    return "\n".join(body)


def build_prompt(exam: WritingExam) -> str:
    """Flatten the two writing tasks into the single prompt the examiner sees."""
    sections = []
    if _has_task1(exam):
        sections.append(
            _section(
                "Task 1:",
                exam.task1_title,
                exam.task1_description,
                exam.task1_requirements,
                f"Write at least {exam.task1_min_words} words.",
            )
        )
    if _has_task2(exam):
        sections.append(
            _section(
                "Task 2:",
                exam.task2_title,
                exam.task2_question,
                exam.task2_context,
                exam.task2_requirements,
                f"Write at least {exam.task2_min_words} words.",
            )
        )
    if not sections:
        # single-prompt rows from before the two-task layout
        return (exam.question_text or "").strip()
    return "\n\n".join(sections)


def classify_writing_type(exam: WritingExam) -> str:
    task1, task2 = _has_task1(exam), _has_task2(exam)
    if task1 and task2:
        return WRITING_TYPE_BOTH
    if task1:
        return WRITING_TYPE_TASK1
    if task2:
        return WRITING_TYPE_TASK2
    return WRITING_TYPE_GENERIC


def extract_response(raw_answers: str | None) -> str:
    """
    Pull the student's text out of the stored answers.

    Anything that does not decode as writing answers is scored as-is.
    """
    raw_answers = raw_answers or ""
    try:
        answers = decode_answers("writing", raw_answers)
    except ValueError:
        return raw_answers

    task1 = answers.task1.answer.strip() if answers.task1 else ""
    task2 = answers.task2.answer.strip() if answers.task2 else ""
    if task1 and task2:
        return f"Task 1:\n{task1}\n\nTask 2:\n{task2}"
    if task1 or task2:
        return task1 or task2
    return raw_answers


def _apply_result(submission: Submission, result) -> None:
    submission.ai_score = result.overall_band
    submission.ai_task_achievement_score = result.task_achievement.score
    submission.ai_task_achievement_feedback = result.task_achievement.feedback
    submission.ai_coherence_cohesion_score = result.coherence_cohesion.score
    submission.ai_coherence_cohesion_feedback = result.coherence_cohesion.feedback
    submission.ai_lexical_resource_score = result.lexical_resource.score
    submission.ai_lexical_resource_feedback = result.lexical_resource.feedback
    submission.ai_grammatical_range_score = result.grammatical_range.score
    submission.ai_grammatical_range_feedback = result.grammatical_range.feedback
    submission.ai_general_feedback = result.general_feedback
    submission.status = STATUS_AI_SCORED


def run_ai_scoring(db: Session, submission: Submission) -> Submission:
    """
    Score one writing submission and store the bands on it.

    Raises on any problem; callers that must not fail use
    score_writing_submission instead. A row a mentor has graded is never
    overwritten, including one graded while the AI call was in flight.
    """
    if submission.status == STATUS_GRADED:
        raise SubmissionAlreadyGraded(f"submission {submission.id} is already graded")

    exam: Optional[WritingExam] = db.get(WritingExam, submission.exam_id)
    if exam is None:
        raise WritingScoringError(
            f"writing exam {submission.exam_id} for submission {submission.id} not found"
        )

    prompt = build_prompt(exam)
    response = extract_response(submission.answers)
    writing_type = classify_writing_type(exam)

    logger.info(
        f"Starting AI scoring for submission {submission.id} ({writing_type}), "
        f"prompt length {len(prompt)}, response length {len(response)}"
    )
    result = ai_client.score_writing(prompt, response, writing_type)

    db.refresh(submission)
    if submission.status == STATUS_GRADED:
        raise SubmissionAlreadyGraded(
            f"submission {submission.id} was graded while AI scoring ran"
        )

    _apply_result(submission, result)
    db.add(submission)
    db.commit()
    db.refresh(submission)
    logger.info(f"AI scoring completed for submission {submission.id}: band {submission.ai_score}")
    return submission


def record_scoring_failure(db: Session, submission_id: int) -> Optional[Submission]:
    """
    Mark a submission "AI Scoring Failed".

    Rows that already carry AI bands or a mentor grade keep them; only
    rows that were never scored get the failed status and the review note.
    """
    submission = db.get(Submission, submission_id)
    if submission is None:
        return None
    if submission.status in (STATUS_AI_SCORED, STATUS_GRADED):
        logger.warning(
            f"Keeping previous result of submission {submission_id} ({submission.status}) "
            f"after failed AI scoring"
        )
        return submission

    submission.status = STATUS_AI_SCORING_FAILED
    submission.ai_general_feedback = SCORING_UNAVAILABLE_MESSAGE
    db.add(submission)
    db.commit()
    db.refresh(submission)
    return submission


def score_writing_submission(db: Session, submission: Submission) -> Submission:
    """
    Run AI scoring and never raise.

    On failure the submission stays saved, is marked "AI Scoring Failed"
    and carries a note that a mentor will review it.
    """
    submission_id = submission.id
    try:
        return run_ai_scoring(db, submission)
    except SubmissionAlreadyGraded:
        logger.info(f"AI scoring skipped for submission {submission_id}: already graded")
        db.rollback()
        return db.get(Submission, submission_id)
    except Exception:
        logger.error(f"AI scoring failed for submission {submission_id}", exc_info=True)
        db.rollback()

    return record_scoring_failure(db, submission_id)
