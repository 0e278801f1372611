# evaluator.py
import logging
import math
import re
from typing import Any, Dict, Optional

from pydantic import ValidationError

from errors import InterviewFlowError
from fallback_scorer import compute_answer_fallback_score, describe_answer_fallback, round_half_up
from llm_client import call_gemini_text
from response_normalizer import pick_field, unwrap_schema
from schemas import EvaluateAnswerOutput
from structured_extractor import (
    SENTINEL_END,
    SENTINEL_START,
    extract_json_block,
    scrape_labeled_number,
    scrape_labeled_text,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_EVAL = f"""
You are an expert interviewer evaluating a candidate's response.
Analyze the user's answer in the context of the Job Description and the specific Question asked.

Your evaluation should be fair and constructive. Avoid being overly harsh for minor omissions,
but remain realistic about the quality of the answer. A good answer is clear, relevant, and
demonstrates the skills required in the job description.

Provide a score from 1 to 10 based on the quality of the answer (clarity, relevance, accuracy).
Also provide concise, constructive feedback explaining the score. Be specific about what was
good and what could be improved.

Return JSON between the literal markers {SENTINEL_START} and {SENTINEL_END}:
{SENTINEL_START}
{{"score": 7, "feedback": "..."}}
{SENTINEL_END}
"""


def _valid_answer_score(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, int):
        return value if 1 <= value <= 10 else None
    if not math.isfinite(value) or not 1 <= value <= 10:
        return None
    return value


def extract_evaluation(raw_text: str) -> Dict[str, Any]:
    parsed = extract_json_block(raw_text)
    normalized = unwrap_schema(parsed)

    score = pick_field("score", normalized, parsed)
    feedback = pick_field("feedback", normalized, parsed)

    if score is None:
        score = scrape_labeled_number(raw_text, "Score")
    if not feedback:
        feedback = scrape_labeled_text(raw_text, "Feedback")
    if not feedback and parsed is None:
        # Plain prose with no labels: treat the whole reply as feedback.
        feedback = re.sub(r"(?im)^.*score\s*[:=].*$", "", raw_text).strip() or None

    if feedback is not None and not isinstance(feedback, str):
        feedback = str(feedback)

    return {"score": score, "feedback": feedback}


def evaluate_interview_answer(
    job_description: str,
    question: str,
    user_answer: str,
) -> EvaluateAnswerOutput:
    """
    Score one interview answer from 1 to 10 with feedback.

    A blank answer gets the minimum score without a model call. A missing or
    out-of-range model score is replaced by the rule-based answer scorer.
    """
    if not user_answer or not user_answer.strip():
        return EvaluateAnswerOutput(score=1, feedback="No answer was provided for this question.")

    user_prompt = f"""
Job Description:
\"\"\"{job_description}\"\"\"

Question Asked:
\"\"\"{question}\"\"\"

User's Answer:
\"\"\"{user_answer}\"\"\"
"""
    raw_text = call_gemini_text(SYSTEM_PROMPT_EVAL, user_prompt)
    result = extract_evaluation(raw_text)

    model_score = _valid_answer_score(result["score"])
    if model_score is None:
        score = compute_answer_fallback_score(job_description, question, user_answer)
        logger.info("Using server-side answer score %s (model score=%r)", score, result["score"])
        if not result["feedback"]:
            result["feedback"] = describe_answer_fallback(job_description, question, user_answer, score)
        result["score"] = score
    else:
        result["score"] = round_half_up(model_score)

    if not result["feedback"]:
        result["feedback"] = "Model-provided score accepted."

    try:
        return EvaluateAnswerOutput.model_validate(result)
    except ValidationError as e:
        raise InterviewFlowError(f"Invalid answer evaluation: {e}") from e
