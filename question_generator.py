# question_generator.py
import logging
from typing import Any, List

from pydantic import ValidationError

from errors import InterviewFlowError
from llm_client import call_gemini_text
from response_normalizer import pick_field, unwrap_schema
from schemas import GenerateQuestionsOutput
from structured_extractor import (
    SENTINEL_END,
    SENTINEL_START,
    extract_json_block,
    scrape_numbered_items,
)

logger = logging.getLogger(__name__)

QUESTION_COUNT = 5

SYSTEM_PROMPT_QUESTIONS = f"""
You are a senior hiring manager preparing for an interview.

Based on the provided Job Description, generate a list of exactly {QUESTION_COUNT} interview
questions. The questions should cover the key skills and responsibilities mentioned.
They MUST progressively increase in difficulty:
- Question 1: A basic introductory or screening question.
- Questions 2-3: Intermediate questions about specific skills or experiences.
- Questions 4-5: Advanced, scenario-based, or behavioral questions that require deep thought.

Do NOT generate the same question twice.

Return the questions as JSON between the literal markers {SENTINEL_START} and {SENTINEL_END}:
{SENTINEL_START}
{{"questions": ["...", "...", "...", "...", "..."]}}
{SENTINEL_END}
"""


def _questions_from_json(parsed: Any) -> List[str]:
    normalized = unwrap_schema(parsed)
    if isinstance(normalized, list):
        candidates = normalized
    else:
        candidates = pick_field("questions", normalized, parsed) or []
        candidates = unwrap_schema(candidates)

    if not isinstance(candidates, list):
        return []

    questions = []
    for q in candidates:
        # Some models return [{"question": "..."}, ...]
        if isinstance(q, dict):
            q = q.get("question") or q.get("text")
        if isinstance(q, str):
            questions.append(q)
    return questions


def clean_questions(questions: List[str]) -> List[str]:
    """
    Strip, drop blanks and duplicates, keep the first five.
    """
    seen = set()
    result = []
    for q in questions:
        q = q.strip()
        key = q.lower()
        if not q or key in seen:
            continue
        seen.add(key)
        result.append(q)
    return result[:QUESTION_COUNT]


def extract_questions(raw_text: str) -> List[str]:
    questions = clean_questions(_questions_from_json(extract_json_block(raw_text)))
    if len(questions) < QUESTION_COUNT:
        logger.info("Question JSON missing or short (%d); scanning numbered lines", len(questions))
        scraped = clean_questions(scrape_numbered_items(raw_text))
        if len(scraped) > len(questions):
            questions = scraped
    return questions


def generate_interview_questions(job_description: str) -> GenerateQuestionsOutput:
    """
    Ask the LLM for five interview questions of increasing difficulty.
    """
    user_prompt = f"""
Job Description:
\"\"\"{job_description}\"\"\"
"""
    raw_text = call_gemini_text(SYSTEM_PROMPT_QUESTIONS, user_prompt)
    questions = extract_questions(raw_text)

    if len(questions) < QUESTION_COUNT:
        raise InterviewFlowError(
            f"Expected {QUESTION_COUNT} interview questions, recovered {len(questions)}."
        )

    try:
        return GenerateQuestionsOutput(questions=questions)
    except ValidationError as e:
        raise InterviewFlowError(f"Invalid interview questions: {e}") from e
