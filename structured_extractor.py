# structured_extractor.py
"""
Recover structured data from free-form model output.

Block strategies are tried in priority order and the first one that parses
wins:

1. the whole response as JSON
2. a sentinel block between ``<JSON_START>`` and ``<JSON_END>``
3. a fenced code block (```json ... ```)
4. a trailing ``{...}`` block

When none of them yields the fields we need, the ``scrape_*`` helpers read
labelled values ("Match Score: 72", "Missing Skills:" bullet lists, ...)
straight out of the prose.
"""
import ast
import json
import logging
import re
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

SENTINEL_START = "<JSON_START>"
SENTINEL_END = "<JSON_END>"

_SENTINEL_RE = re.compile(
    re.escape(SENTINEL_START) + r"\s*(.*?)\s*" + re.escape(SENTINEL_END), re.DOTALL
)
_FENCED_RE = re.compile(r"```(?:json)?[ \t]*\n?(.*?)```", re.DOTALL | re.IGNORECASE)
_BULLET_RE = re.compile(r"^[-*\t•+]+\s*")


def _loads(candidate: str) -> Optional[Any]:
    try:
        value = json.loads(candidate)
    except (json.JSONDecodeError, TypeError):
        return None
    if isinstance(value, (dict, list)):
        return value
    return None


def _from_whole_text(text: str) -> Optional[Any]:
    return _loads(text.strip())


def _from_sentinel(text: str) -> Optional[Any]:
    match = _SENTINEL_RE.search(text)
    if not match:
        return None
    return _loads(match.group(1))


def _from_fenced(text: str) -> Optional[Any]:
    for match in _FENCED_RE.finditer(text):
        value = _loads(match.group(1).strip())
        if value is not None:
            return value
    return None


def _from_trailing(text: str) -> Optional[Any]:
    end = text.rfind("}")
    if end == -1:
        return None
    start = text.find("{")
    while start != -1 and start < end:
        value = _loads(text[start : end + 1])
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


STRATEGIES = (
    ("json", _from_whole_text),
    ("sentinel", _from_sentinel),
    ("fenced", _from_fenced),
    ("trailing", _from_trailing),
)


def extract_json_block(text: Optional[str]) -> Optional[Any]:
    """
    Return the first JSON object (or array) recoverable from ``text``,
    or None when every strategy fails.
    """
    if not text:
        return None

    for name, strategy in STRATEGIES:
        value = strategy(text)
        if value is not None:
            logger.debug("Recovered JSON from model output via %s strategy", name)
            return value

    logger.info("No JSON block found in model output")
    return None


# ---------- Label-based scraping ----------


def scrape_match_score(text: str) -> Optional[int]:
    match = re.search(r"Match\s*Score\s*\*{0,2}\s*[:\-]?\s*\*{0,2}\s*(\d{1,3})", text, re.IGNORECASE)
    if match:
        return int(match.group(1))

    match = re.search(r"≈\s*(\d{1,3})", text)
    if match:
        return int(match.group(1))

    return None


def scrape_status(text: str) -> Optional[str]:
    match = re.search(r"\*\*Status\*\*:\s*([A-Za-z ]{2,20})", text, re.IGNORECASE) or re.search(
        r"Status:\s*([A-Za-z ]{2,20})", text, re.IGNORECASE
    )
    if match:
        return match.group(1).strip()
    return None


def scrape_list_between(text: str, start_label: str, end_pattern: str) -> List[str]:
    """
    Collect bullet items between ``start_label`` and ``end_pattern``.

    ``end_pattern`` is a regular expression; ``start_label`` is literal.
    Items on the header line itself are split on commas.
    """
    match = re.search(
        re.escape(start_label) + r"(.*?)(?:" + end_pattern + r")",
        text,
        re.IGNORECASE | re.DOTALL,
    )
    if not match:
        return []

    lines = match.group(1).splitlines()
    items: List[str] = []

    inline = lines[0].strip().strip("*").strip() if lines else ""
    if inline:
        items.extend(part.strip() for part in inline.split(","))

    for line in lines[1:]:
        line = line.strip()
        if not line or line.startswith("**"):
            continue
        bullet = _BULLET_RE.sub("", line).strip()
        items.append(bullet)

    seen = set()
    result = []
    for item in items:
        if not item or not re.search(r"[A-Za-z]", item) or len(item) >= 200:
            continue
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def scrape_implied_skills(text: str) -> Optional[str]:
    match = re.search(
        r"```(?:python)?.*?impliedSkills\s*=\s*(\{.*?\})\s*(?:\n|```)",
        text,
        re.IGNORECASE | re.DOTALL,
    )
    if not match:
        return None

    block = match.group(1)
    try:
        value = ast.literal_eval(block)
        return json.dumps(value, indent=2)
    except (ValueError, SyntaxError):
        pass

    # JS-style object with bare keys
    quoted = re.sub(r"([A-Za-z0-9_\-]+)\s*:", r'"\1":', block).replace("'", '"')
    value = _loads(quoted)
    if value is not None:
        return json.dumps(value, indent=2)

    return block


_NUMBERED_RE = re.compile(
    r"^\s*(?:\*\*)?(?:Q(?:uestion)?\s*)?(\d{1,2})\s*[.):\-]\s*(?:\*\*)?\s*(.+?)\s*$",
    re.IGNORECASE | re.MULTILINE,
)


def scrape_numbered_items(text: str) -> List[str]:
    items = []
    for match in _NUMBERED_RE.finditer(text):
        item = match.group(2).strip().strip("*").strip().strip('"').strip()
        if item:
            items.append(item)
    return items


def scrape_labeled_number(text: str, label: str) -> Optional[float]:
    match = re.search(
        re.escape(label) + r"\s*\*{0,2}\s*[:=\-]\s*\*{0,2}\s*(\d{1,3}(?:\.\d+)?)",
        text,
        re.IGNORECASE,
    )
    if not match:
        return None
    return float(match.group(1))


def scrape_labeled_text(text: str, label: str) -> Optional[str]:
    match = re.search(
        re.escape(label) + r"\s*\*{0,2}\s*[:\-]\s*\*{0,2}\s*(.+?)(?:\n\s*\n|\Z)",
        text,
        re.IGNORECASE | re.DOTALL,
    )
    if not match:
        return None
    value = match.group(1).strip()
    return value or None
