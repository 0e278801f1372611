# fallback_scorer.py
"""
Deterministic, rule-based scoring used when the model's score is missing,
out of range, or when strict mode asks us not to trust it.
"""
import math
import re
from typing import Any, Dict, List

# Simple ATS-style catalogue of common skills/technologies.
COMMON_SKILLS = [
    "javascript", "typescript", "react", "next.js", "node.js", "express", "django",
    "python", "java", "c++", "c", "mongodb", "mysql", "postgresql", "sql", "docker",
    "kubernetes", "aws", "azure", "gcp", "git", "jenkins", "ci/cd", "rest", "graphql",
    "html", "css", "tailwind", "material ui", "opencv", "tensorflow", "pytorch",
]

STATUS_APPROVED = "Approved"
STATUS_NEEDS_IMPROVEMENT = "Needs Improvement"
STATUS_NOT_A_MATCH = "Not a Match"

POINTS_PER_SKILL = 20
MAX_COUNTED_SKILLS = 5
IMPLIED_BONUS = 5
MAX_MISSING_PENALTY = 10

STOP_WORDS = {
    "the", "and", "for", "with", "you", "your", "are", "was", "were", "this", "that",
    "have", "has", "had", "from", "our", "their", "they", "will", "would", "can",
    "could", "should", "about", "into", "what", "when", "where", "which", "who",
    "how", "why", "also", "been", "being", "not", "but", "all", "any", "some",
    "more", "most", "such", "than", "then", "them", "there", "these", "those",
    "very", "just", "like", "use", "used", "using", "work", "worked", "role",
    "job", "team", "experience", "years", "tell", "describe", "time",
}

_SKILL_PATTERNS = {
    skill: re.compile(r"(?<![a-z0-9+#])" + re.escape(skill) + r"(?![a-z0-9+#])")
    for skill in COMMON_SKILLS
}


def extract_skills_from_text(text: str) -> List[str]:
    t = (text or "").lower()
    return [skill for skill in COMMON_SKILLS if _SKILL_PATTERNS[skill].search(t)]


def round_half_up(value: float) -> int:
    """Round halves up: 74.5 -> 75, 8.5 -> 9."""
    return int(math.floor(value + 0.5))


def status_for_score(score: float) -> str:
    if score >= 75:
        return STATUS_APPROVED
    if score >= 50:
        return STATUS_NEEDS_IMPROVEMENT
    return STATUS_NOT_A_MATCH


def compute_fallback_score(record: Dict[str, Any], resume: str, job_description: str) -> int:
    """
    Score a skill record from its own facts, ignoring the model's number.

    When the record has no matching skills, the catalogue skills found in both
    the job description and the resume are used instead and written back into
    ``record["matchingSkills"]``.
    """
    matching_skills = record.get("matchingSkills")
    matching = len(matching_skills) if isinstance(matching_skills, list) else 0

    if not matching:
        resume_skills = set(extract_skills_from_text(resume))
        overlap = [s for s in extract_skills_from_text(job_description) if s in resume_skills]
        record["matchingSkills"] = overlap
        matching = len(overlap)

    score = min(MAX_COUNTED_SKILLS, matching) * POINTS_PER_SKILL

    implied = record.get("impliedSkills")
    if implied and len(str(implied).strip()) > 20:
        score += IMPLIED_BONUS

    missing_skills = record.get("missingSkills")
    missing = len(missing_skills) if isinstance(missing_skills, list) else 0
    score = max(0, score - min(MAX_MISSING_PENALTY, missing))

    return min(100, score)


# ---------- Interview answers ----------


def _keywords(text: str) -> set:
    words = re.findall(r"[a-z][a-z0-9+#.]*[a-z0-9+#]|[a-z]", (text or "").lower())
    return {w for w in words if len(w) >= 3 and w not in STOP_WORDS}


def compute_answer_fallback_score(job_description: str, question: str, answer: str) -> int:
    if not answer or not answer.strip():
        return 1

    shared = _keywords(answer) & (_keywords(question) | _keywords(job_description))
    word_count = len(answer.split())

    score = 2 + min(5, len(shared))
    for threshold in (30, 80, 150):
        if word_count >= threshold:
            score += 1

    return max(1, min(10, score))


def describe_answer_fallback(job_description: str, question: str, answer: str, score: int) -> str:
    shared = _keywords(answer) & (_keywords(question) | _keywords(job_description))
    return (
        f"Server-side computed score: {score} based on {len(shared)} relevant keywords "
        f"in a {len(answer.split())}-word answer."
    )
