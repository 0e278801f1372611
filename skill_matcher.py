# skill_matcher.py
import json
import logging
import math
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from config import is_strict_matching
from errors import SkillAnalysisError
from fallback_scorer import compute_fallback_score, round_half_up, status_for_score
from llm_client import call_gemini_text
from response_normalizer import pick_field, unwrap_schema
from schemas import AnalyzeSkillsOutput
from structured_extractor import (
    SENTINEL_END,
    SENTINEL_START,
    extract_json_block,
    scrape_implied_skills,
    scrape_list_between,
    scrape_match_score,
    scrape_status,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_SKILL_MATCH = f"""
You are an expert AI career analyst with the critical eye of a senior hiring manager.
Perform a harsh, realistic analysis of the Resume against the Job Description.
Focus only on the skills, technologies, and experience explicitly required for the role.

Follow these steps:

1. Job Description Analysis
   - Extract required skills and group them as:
     - Core Requirements (must-have for the role)
     - Preferred Skills (secondary / nice-to-have)

2. Resume Analysis
   - Identify all direct skills from the resume.
   - Apply conceptual mapping & skill equivalency. Map related technologies to the required skills:
     - MongoDB in resume -> maps to a NoSQL requirement.
     - Express.js in resume -> maps to a Node.js requirement.
     - Jenkins + Docker + AWS/Azure in resume -> strongly implies CI/CD pipeline experience.
     - Django in resume -> close equivalent of FastAPI when the project context is building APIs.
   - Evaluate project & accomplishment quality: distinguish meaningful usage from keyword listing.

3. Implied Skills
   - Write a concise narrative (impliedSkills) describing inferred skills with concrete examples
     from the resume, e.g. "Built REST API with Express.js -> implies Node.js & API Development."

4. Gap Analysis
   - matchingSkills: skills that overlap between the JD (core/preferred) and the resume
     (direct, mapped, or implied).
   - missingSkills: skills required in the JD that are genuinely absent from the resume,
     even after conceptual mapping.

5. Weighted Match Score
   - Core skills weigh most.
   - Penalize missing skills proportionally to importance; reduce the penalty for close equivalents.
   - Ignore irrelevant skills not tied to the JD.
   - Apply a project quality multiplier (strong relevant projects = higher score).
   - Return an integer matchScore (0-100).

6. Status
   - 75-100 -> Approved
   - 50-74 -> Needs Improvement
   - 0-49 -> Not a Match

After the analysis, output ONLY a single JSON object with these keys:
matchScore (number), scoreRationale (string), matchingSkills (array of strings),
missingSkills (array of strings), impliedSkills (string), status (string).

Print the JSON between the literal markers {SENTINEL_START} and {SENTINEL_END} on their own lines:
{SENTINEL_START}
{{"matchScore":85,"scoreRationale":"...","matchingSkills":["Node.js"],"missingSkills":[],"impliedSkills":"...","status":"Approved"}}
{SENTINEL_END}

Do NOT output a JSON Schema, explanation, or any other text after the JSON.
"""

MISSING_SKILLS_END = r"\*{0,2}Weighted Match Score"


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return [str(value)]
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2)


def _model_score(value: Any) -> Optional[float]:
    """
    Return the model's score on the 0-100 scale, or None when it is unusable.
    Fractions such as 0.85 are read as 85.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, int):
        return value if 0 <= value <= 100 else None
    if not math.isfinite(value):
        return None
    if 0 < value < 1 and not float(value).is_integer():
        value = value * 100
    if 0 <= value <= 100:
        return value
    return None


def build_candidate_record(raw_text: str) -> tuple[Dict[str, Any], Any]:
    """
    Pull a skill record out of the model text.

    Returns the record plus the normalized JSON it came from (for debugging).
    Label-based scraping of the prose only runs when the JSON gave us neither
    a score nor any matching skills.
    """
    parsed = extract_json_block(raw_text)
    normalized = unwrap_schema(parsed)
    logger.debug("Normalized model output: %s", normalized)

    record: Dict[str, Any] = {
        "matchScore": pick_field("matchScore", normalized, parsed),
        "scoreRationale": pick_field("scoreRationale", normalized, parsed),
        "matchingSkills": pick_field("matchingSkills", normalized, parsed),
        "missingSkills": pick_field("missingSkills", normalized, parsed),
        "impliedSkills": pick_field("impliedSkills", normalized, parsed),
        "status": pick_field("status", normalized, parsed),
    }

    if not record["matchScore"] and not record["matchingSkills"]:
        logger.info("No usable JSON fields in model output; scraping labelled text")
        score = scrape_match_score(raw_text)
        if score is not None:
            record["matchScore"] = score

        status = scrape_status(raw_text)
        if status:
            record["status"] = status

        matching = scrape_list_between(raw_text, "Matching Skills:", "Missing Skills:")
        if matching:
            record["matchingSkills"] = matching

        missing = scrape_list_between(raw_text, "Missing Skills:", MISSING_SKILLS_END)
        if missing:
            record["missingSkills"] = missing

        implied = scrape_implied_skills(raw_text)
        if implied:
            record["impliedSkills"] = implied
        elif not record["impliedSkills"] and isinstance(normalized, dict) and normalized:
            record["impliedSkills"] = json.dumps(normalized, indent=2)

    record["matchingSkills"] = _as_str_list(record["matchingSkills"])
    record["missingSkills"] = _as_str_list(record["missingSkills"])
    record["impliedSkills"] = _as_text(record["impliedSkills"])
    record["scoreRationale"] = _as_text(record["scoreRationale"])
    return record, normalized


def reconcile_score(
    record: Dict[str, Any],
    *,
    resume: str,
    job_description: str,
    strict: bool,
) -> Dict[str, Any]:
    """
    Choose between the model's score and the server-side score.

    The server-side score wins in strict mode or when the model's score is
    not a number in 0-100. Status is always derived from the final score.
    """
    model_score = _model_score(record.get("matchScore"))

    if strict or model_score is None:
        server_score = compute_fallback_score(record, resume, job_description)
        logger.info(
            "Using server-side score %s (strict=%s, model score=%r)",
            server_score, strict, record.get("matchScore"),
        )
        record["matchScore"] = server_score
        record["scoreRationale"] = (
            f"Server-side computed score: {server_score} based on "
            f"{len(record['matchingSkills'])} matching skills, "
            f"{len(record['missingSkills'])} missing skills."
        )
    else:
        record["matchScore"] = round_half_up(model_score)
        if not record.get("scoreRationale"):
            record["scoreRationale"] = "Model-provided score accepted."

    record["status"] = status_for_score(record["matchScore"])
    return record


def analyze_skills(
    job_description: str,
    resume: str,
    strict: Optional[bool] = None,
) -> AnalyzeSkillsOutput:
    """
    Compare a resume against a job description.

    The model is asked for a JSON verdict; whatever comes back is normalized,
    scraped if necessary, reconciled against the rule-based scorer and
    validated before it is returned.
    """
    if strict is None:
        strict = is_strict_matching()

    user_prompt = f"""
Job Description:
\"\"\"{job_description}\"\"\"

Resume:
\"\"\"{resume}\"\"\"
"""
    raw_text = call_gemini_text(SYSTEM_PROMPT_SKILL_MATCH, user_prompt)

    record, normalized = build_candidate_record(raw_text)
    record = reconcile_score(record, resume=resume, job_description=job_description, strict=strict)
    logger.debug("Final skill record: %s", record)

    try:
        return AnalyzeSkillsOutput.model_validate(record)
    except ValidationError as e:
        logger.error("Validation failed after normalization and fallback: %s", e)
        raise SkillAnalysisError(
            "Validation failed after normalization and fallback",
            raw=raw_text,
            normalized=normalized,
            final=record,
        ) from e
