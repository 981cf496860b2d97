# ielts_portal/schemas/answers.py
"""
Typed views over the ``Submission.answers`` column.

The column itself stays a JSON string, but every reader goes through
``decode_answers`` so the per-type shape is checked in one place:

- reading / listening: ``{"type": "reading", "selections": [...]}``
  (a bare list of selections or ``{"answers": [...]}`` is accepted too)
- writing: ``{"type": "writing", "task1": {"answer": ...}, "task2": {...}}``
  (the untagged ``{"task1": ..., "task2": ...}`` object is accepted too)
- speaking: ``{"type": "speaking", "audioPaths": [...]}`` or the
  ``;``-joined path string written by the speaking upload
"""

import json
from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter, ValidationError

from ielts_portal.schemas.base import CamelModel

EXAM_TYPES = ("reading", "listening", "speaking", "writing")
SPEAKING_PATH_SEPARATOR = ";"


class AnswerSelection(CamelModel):
    question_id: int
    selected_answer: str | None = None  # multiple choice letter
    fill_answer: str | None = None  # fill in the blank


class ReadingAnswers(CamelModel):
    type: Literal["reading", "listening"] = "reading"
    selections: list[AnswerSelection] = []


class WritingTaskAnswer(CamelModel):
    answer: str = ""
    word_count: int | None = None


class WritingAnswers(CamelModel):
    type: Literal["writing"] = "writing"
    task1: WritingTaskAnswer | None = None
    task2: WritingTaskAnswer | None = None


class SpeakingAnswers(CamelModel):
    type: Literal["speaking"] = "speaking"
    audio_paths: list[str] = []


SubmissionAnswers = Annotated[
    Union[ReadingAnswers, WritingAnswers, SpeakingAnswers],
    Field(discriminator="type"),
]

_answers_adapter = TypeAdapter(SubmissionAnswers)


def _tag(exam_type: str, payload):
    """Bring the legacy untagged shapes into the tagged form."""
    if exam_type in ("reading", "listening"):
        if isinstance(payload, list):
            return {"type": exam_type, "selections": payload}
        if isinstance(payload, dict) and "type" not in payload:
            selections = payload.get("selections", payload.get("answers", []))
            return {"type": exam_type, "selections": selections}
    if exam_type == "writing" and isinstance(payload, dict) and "type" not in payload:
        return {"type": "writing", **payload}
    return payload


def decode_answers(exam_type: str, raw: str | None):
    """
    Decode a stored answers string for the given exam type.

    Raises:
        ValueError: when the string is not JSON, or its shape does not match
            the exam type.
    """
    exam_type = (exam_type or "").lower()
    if exam_type not in EXAM_TYPES:
        raise ValueError(f"unknown exam type: {exam_type!r}")

    if exam_type == "speaking" and raw and not raw.lstrip().startswith("{"):
        paths = [p for p in raw.split(SPEAKING_PATH_SEPARATOR) if p]
        return SpeakingAnswers(audio_paths=paths)

    try:
        payload = json.loads(raw or "")
    except json.JSONDecodeError as e:
        raise ValueError(f"answers are not valid JSON: {e}") from e

    try:
        decoded = _answers_adapter.validate_python(_tag(exam_type, payload))
    except ValidationError as e:
        raise ValueError(f"answers do not match the {exam_type} shape: {e}") from e

    # a reading payload must not be stored against a writing exam and so on
    if exam_type in ("reading", "listening"):
        if not isinstance(decoded, ReadingAnswers):
            raise ValueError(f"answers are not {exam_type} selections")
    elif decoded.type != exam_type:
        raise ValueError(f"answers are tagged {decoded.type!r}, expected {exam_type!r}")
    return decoded


def encode_speaking_paths(paths: list[str]) -> str:
    return SPEAKING_PATH_SEPARATOR.join(paths)
