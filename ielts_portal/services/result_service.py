# ielts_portal/services/result_service.py
"""
Reading / listening result reconciliation.

Results are never stored: every call re-reads the submission and the
exam items and recomputes, so the same data always gives the same result.
"""

import re
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from ielts_portal.models.submission import Submission
from ielts_portal.schemas.answers import decode_answers
from ielts_portal.schemas.submission import QuestionResult, SubmissionResult
from ielts_portal.services import exam_service
from ielts_portal.services.exam_set_service import ITEM_MODELS

_MULTIPLE_CHOICE_KEYS = "ABCD"
_ALTERNATIVE_SEPARATORS = re.compile(r"[,;|]")


class ResultError(Exception):
    pass


class SubmissionNotFound(ResultError):
    pass


class ResultNotAvailable(ResultError):
    pass


def _normalise(answer: str | None) -> str:
    return (answer or "").strip().upper()


def is_answer_correct(user_answer: str | None, correct_answer: str | None) -> bool:
    user = _normalise(user_answer)
    correct = _normalise(correct_answer)
    if not user or not correct:
        return False

    # single letter keys are multiple choice and must match exactly
    if len(correct) == 1 and correct in _MULTIPLE_CHOICE_KEYS:
        return user == correct

    if user == correct:
        return True
    alternatives = {a.strip() for a in _ALTERNATIVE_SEPARATORS.split(correct)}
    alternatives.discard("")
    return user in alternatives


def _percentage(correct: int, total: int) -> float:
    if total == 0:
        return 0.0
    score = Decimal(correct) * 100 / Decimal(total)
    return float(score.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def compute_submission_result(db: Session, submission_id: int) -> SubmissionResult:
    submission = db.get(Submission, submission_id)
    if submission is None:
        raise SubmissionNotFound(f"Submission {submission_id} not found")

    exam_type = (submission.exam_type or "").lower()
    if exam_type not in ("reading", "listening"):
        raise ResultNotAvailable(f"Results are only computed for reading and listening, not {exam_type}")

    try:
        answers = decode_answers(exam_type, submission.answers)
    except ValueError as e:
        raise ResultNotAvailable(f"Stored answers cannot be read: {e}") from e

    items = exam_service.list_items_for_exam_set(
        db, ITEM_MODELS[exam_type], exam_set_id=submission.exam_id
    )
    items_by_id = {item.id: item for item in items}

    # a question answered twice counts once, with its last answer
    latest = {}
    for selection in answers.selections:
        latest[selection.question_id] = selection

    question_results = []
    for selection in latest.values():
        item = items_by_id.get(selection.question_id)
        if item is None:
            continue
        user_answer = selection.selected_answer or selection.fill_answer or ""
        correct = is_answer_correct(user_answer, item.correct_answer)
        question_results.append(
            QuestionResult(
                question_id=selection.question_id,
                user_answer=user_answer,
                correct_answer=item.correct_answer or "",
                is_correct=correct,
                points=1 if correct else 0,
            )
        )

    correct_count = sum(r.points for r in question_results)
    return SubmissionResult(
        submission_id=submission.id,
        user_id=submission.user_id,
        exam_type=exam_type,
        exam_id=submission.exam_id,
        exam_course_id=submission.exam_course_id,
        time_spent=submission.time_spent,
        submitted_at=submission.submitted_at,
        score=_percentage(correct_count, len(items)),
        correct_answers=correct_count,
        total_questions=len(items),
        question_results=question_results,
    )
