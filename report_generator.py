# report_generator.py
from typing import Any, Dict, List, Union

from fallback_scorer import round_half_up, status_for_score
from schemas import InterviewResult, InterviewResultView, InterviewSummary


def score_band(score: float) -> str:
    if score >= 8:
        return "strong"
    if score >= 5:
        return "fair"
    return "weak"


def summarize_interview(
    results: List[Union[InterviewResult, Dict[str, Any]]],
) -> InterviewSummary:
    """
    Roll per-answer evaluations up into one interview summary.

    The overall score is the mean answer score (1-10) scaled to 0-100, and the
    status uses the same thresholds as resume matching.
    """
    if not results:
        raise ValueError("Cannot summarize an interview with no answers.")

    parsed = [r if isinstance(r, InterviewResult) else InterviewResult.model_validate(r) for r in results]

    average = sum(r.score for r in parsed) / len(parsed)
    overall = round_half_up(average * 10)

    return InterviewSummary(
        overallScore=overall,
        status=status_for_score(overall),
        results=[
            InterviewResultView(**r.model_dump(), band=score_band(r.score))
            for r in parsed
        ],
    )
