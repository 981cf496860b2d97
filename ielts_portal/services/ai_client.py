"""
AI Client Service
Talks to the OpenAI chat-completions API to band-score IELTS writing responses
"""

import json
import logging

from openai import OpenAI
from pydantic import ValidationError

from ielts_portal.core.config import settings
from ielts_portal.schemas.score import WritingScoreResult

logger = logging.getLogger(__name__)

# Global client cache
_client_instance: OpenAI | None = None


class AIScoringError(Exception):
    pass


SYSTEM_PROMPT_TEMPLATE = """You are an expert IELTS examiner. Your task is to score {writing_type} writing tasks according to official IELTS criteria.

Score the writing response on 4 criteria (each 0-9 scale):
1. Task Achievement (Task 1) / Task Response (Task 2): How well the task requirements are fulfilled
2. Coherence and Cohesion: How well ideas are organized and connected
3. Lexical Resource: Vocabulary range, accuracy, and appropriateness
4. Grammatical Range and Accuracy: Grammar variety and correctness

For each criterion, provide:
- Score (0-9)
- Brief justification (2-3 sentences)

Calculate overall band score as average of 4 criteria, rounded to nearest 0.5.

Respond in this exact JSON format:
{{
  "overallBand": 6.5,
  "taskAchievement": {{
    "score": 6,
    "feedback": "Your feedback here"
  }},
  "coherenceCohesion": {{
    "score": 7,
    "feedback": "Your feedback here"
  }},
  "lexicalResource": {{
    "score": 6,
    "feedback": "Your feedback here"
  }},
  "grammaticalRange": {{
    "score": 7,
    "feedback": "Your feedback here"
  }},
  "generalFeedback": "Overall comments and improvement suggestions"
}}"""

USER_PROMPT_TEMPLATE = """Task Prompt:
{prompt}

Student Response:
{response}

Please score this IELTS writing response according to the 4 criteria."""


def get_client() -> OpenAI:
    """Return the shared OpenAI client, creating it on first use."""
    global _client_instance
    if _client_instance is None:
        if not settings.OPENAI_API_KEY:
            raise AIScoringError("OPENAI_API_KEY is not configured")
        _client_instance = OpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.AI_SCORING_TIMEOUT_SECONDS,
        )
    return _client_instance


def strip_code_fences(content: str) -> str:
    """Models sometimes wrap the JSON in a ```json fence."""
    if "```json" in content:
        content = content.split("```json")[1].split("```")[0]
    elif "```" in content:
        content = content.split("```")[1].split("```")[0]
    return content.strip()


def parse_score_response(content: str | None) -> WritingScoreResult:
    if not content:
        raise AIScoringError("empty response from AI scoring service")
    try:
        payload = json.loads(strip_code_fences(content))
    except json.JSONDecodeError as e:
        raise AIScoringError(f"AI response is not valid JSON: {e}") from e
    try:
        return WritingScoreResult.model_validate(payload)
    except ValidationError as e:
        raise AIScoringError(f"AI response has an unexpected shape: {e}") from e


def score_writing(prompt: str, response: str, writing_type: str) -> WritingScoreResult:
    """
    Band-score one writing response.

    Args:
        prompt: Task prompt shown to the student
        response: Student's written answer
        writing_type: "Task 1 only", "Task 2 only", ... used in the rubric

    Returns:
        WritingScoreResult with overall band and the four criteria

    Raises:
        AIScoringError: on any transport, parsing or range problem
    """
    client = get_client()
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT_TEMPLATE.format(writing_type=writing_type)},
        {"role": "user", "content": USER_PROMPT_TEMPLATE.format(prompt=prompt, response=response)},
    ]

    logger.info(f"Calling {settings.AI_SCORING_MODEL} for {writing_type} scoring")
    try:
        completion = client.chat.completions.create(
            model=settings.AI_SCORING_MODEL,
            messages=messages,
            temperature=settings.AI_SCORING_TEMPERATURE,
            max_tokens=settings.AI_SCORING_MAX_TOKENS,
        )
    except Exception as e:
        raise AIScoringError(f"AI scoring request failed: {e}") from e

    if not completion.choices:
        raise AIScoringError("AI scoring service returned no choices")
    return parse_score_response(completion.choices[0].message.content)
