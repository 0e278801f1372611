import json

from structured_extractor import (
    extract_json_block,
    scrape_implied_skills,
    scrape_labeled_number,
    scrape_labeled_text,
    scrape_list_between,
    scrape_match_score,
    scrape_numbered_items,
    scrape_status,
)


def test_whole_text_json():
    assert extract_json_block('{"matchScore": 80}') == {"matchScore": 80}


def test_sentinel_block_wins_over_trailing_text():
    text = (
        "Here is my analysis. Core skills look fine {roughly}.\n"
        "<JSON_START>\n"
        '{"matchScore": 72, "status": "Needs Improvement"}\n'
        "<JSON_END>\n"
        "Thanks!"
    )
    assert extract_json_block(text) == {"matchScore": 72, "status": "Needs Improvement"}


def test_fenced_json_block():
    text = 'Result:\n```json\n{"matchScore": 45}\n```\nLet me know.'
    assert extract_json_block(text) == {"matchScore": 45}


def test_fenced_block_skips_non_json_fences():
    text = "```python\nprint('hi')\n```\n```JSON\n{\"a\": 1}\n```"
    assert extract_json_block(text) == {"a": 1}


def test_trailing_object_after_prose_with_braces():
    text = 'The {core} skills are covered.\nFinal answer: {"matchScore": 91, "matchingSkills": ["Go"]}'
    assert extract_json_block(text) == {"matchScore": 91, "matchingSkills": ["Go"]}


def test_broken_sentinel_falls_through_to_fence():
    text = '<JSON_START>\n{matchScore: 9\n<JSON_END>\n```json\n{"matchScore": 19}\n```'
    assert extract_json_block(text) == {"matchScore": 19}


def test_no_json_returns_none():
    assert extract_json_block("Nothing structured here.") is None
    assert extract_json_block("") is None
    assert extract_json_block(None) is None


def test_bare_json_list():
    assert extract_json_block('["a", "b"]') == ["a", "b"]


def test_scrape_match_score_variants():
    assert scrape_match_score("Match Score: 85") == 85
    assert scrape_match_score("**Weighted Match Score**: 62") == 62
    assert scrape_match_score("Match Score - **40**") == 40
    assert scrape_match_score("(3 / 5) * 100 = 13.56 ≈ 14") == 14
    assert scrape_match_score("no numbers") is None


def test_scrape_status():
    assert scrape_status("**Status**: Needs Improvement\nmore") == "Needs Improvement"
    assert scrape_status("Status: Approved") == "Approved"
    assert scrape_status("nothing") is None


def test_scrape_list_between_bullets():
    text = (
        "**Matching Skills:**\n"
        "- Python\n"
        "* Docker\n"
        "• Python\n"
        "+ 12345\n"
        "**Missing Skills:**\n"
        "- Kubernetes\n"
        "**Weighted Match Score**: 50"
    )
    assert scrape_list_between(text, "Matching Skills:", "Missing Skills:") == ["Python", "Docker"]
    assert scrape_list_between(text, "Missing Skills:", r"\*{0,2}Weighted Match Score") == ["Kubernetes"]


def test_scrape_list_between_inline_items():
    text = "Matching Skills: React, Node.js\nMissing Skills: AWS"
    assert scrape_list_between(text, "Matching Skills:", "Missing Skills:") == ["React", "Node.js"]


def test_scrape_list_between_without_end_label():
    assert scrape_list_between("Matching Skills:\n- Python", "Matching Skills:", "Missing Skills:") == []


def test_scrape_implied_skills_python_dict():
    text = "```python\nimpliedSkills = {'Node.js': 'Express API project'}\n```"
    assert json.loads(scrape_implied_skills(text)) == {"Node.js": "Express API project"}


def test_scrape_implied_skills_bare_keys():
    text = "```\nimpliedSkills = {ci: 'Jenkins pipelines'}\n```"
    assert json.loads(scrape_implied_skills(text)) == {"ci": "Jenkins pipelines"}


def test_scrape_implied_skills_absent():
    assert scrape_implied_skills("no code here") is None


def test_scrape_numbered_items():
    text = (
        "Here are your questions:\n"
        "1. Tell me about yourself.\n"
        "2) How do you use Python?\n"
        "Question 3: Describe a REST API you built.\n"
        "**4.** How would you scale it?\n"
    )
    assert scrape_numbered_items(text) == [
        "Tell me about yourself.",
        "How do you use Python?",
        "Describe a REST API you built.",
        "How would you scale it?",
    ]


def test_scrape_labeled_number_and_text():
    text = "Score: 7/10\nFeedback: Clear answer, but add metrics.\n\nOther notes."
    assert scrape_labeled_number(text, "Score") == 7.0
    assert scrape_labeled_text(text, "Feedback") == "Clear answer, but add metrics."
    assert scrape_labeled_number("no score", "Score") is None
    assert scrape_labeled_text("no feedback", "Feedback") is None
