import pytest

from fallback_scorer import (
    compute_answer_fallback_score,
    compute_fallback_score,
    extract_skills_from_text,
    round_half_up,
    status_for_score,
)


def test_extract_skills_respects_token_boundaries():
    text = "Experienced in JavaScript, Node.js and C++; some Java."
    assert extract_skills_from_text(text) == ["javascript", "node.js", "java", "c++"]


def test_extract_skills_does_not_match_inside_words():
    assert extract_skills_from_text("MySQL on GitHub, interested in PostgreSQL") == ["mysql", "postgresql"]


def test_extract_skills_is_case_insensitive():
    assert extract_skills_from_text("OpenCV and PyTorch") == ["opencv", "pytorch"]


@pytest.mark.parametrize(
    "score, status",
    [(100, "Approved"), (75, "Approved"), (74, "Needs Improvement"), (50, "Needs Improvement"),
     (49, "Not a Match"), (0, "Not a Match")],
)
def test_status_thresholds(score, status):
    assert status_for_score(score) == status


def test_score_uses_model_skill_lists():
    record = {
        "matchingSkills": ["a", "b", "c", "d", "e", "f"],
        "missingSkills": [str(i) for i in range(12)],
        "impliedSkills": "Built and shipped several APIs",
    }
    # 5 * 20 + 5 bonus - 10 penalty
    assert compute_fallback_score(record, "", "") == 95


def test_score_without_matching_skills_uses_keyword_overlap():
    record = {"matchingSkills": [], "missingSkills": ["Kubernetes"], "impliedSkills": ""}
    score = compute_fallback_score(
        record,
        resume="Python developer using Docker daily",
        job_description="We need Python, Docker and AWS experience",
    )
    assert record["matchingSkills"] == ["python", "docker"]
    assert score == 39


def test_score_never_negative():
    record = {"matchingSkills": None, "missingSkills": ["x"] * 4}
    assert compute_fallback_score(record, "", "") == 0


def test_blank_answer_scores_minimum():
    assert compute_answer_fallback_score("Python role", "Why Python?", "   ") == 1


def test_answer_score_counts_shared_keywords():
    score = compute_answer_fallback_score(
        "Python Docker developer",
        "Tell me about Python",
        "I built Python APIs with Docker",
    )
    assert score == 4


def test_answer_score_is_capped():
    keywords = "python docker kubernetes terraform grafana prometheus"
    answer = (keywords + " ") * 40
    assert compute_answer_fallback_score(keywords, "Which tools?", answer) == 10


@pytest.mark.parametrize("value, expected", [(74.5, 75), (8.5, 9), (2.5, 3), (0.5, 1), (55.4, 55), (0, 0)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
