"""Cleanup and shape validation of the completion service's reply."""

import json
import logging
import math
import re

from pydantic import ValidationError

from models.responses import AnalysisResult

logger = logging.getLogger(__name__)

_JSON_FENCE_RE = re.compile(r"```json", re.IGNORECASE)
_BLANK_LINE_RE = re.compile(r"^\s*[\r\n]", re.MULTILINE)


def sanitize_content(content: str) -> str:
    """Strip markdown code fences and blank lines from a model reply."""
    text = _JSON_FENCE_RE.sub("", content)
    text = text.replace("```", "")
    text = _BLANK_LINE_RE.sub("", text)
    return text.strip()


def normalize_score(value: float) -> int:
    """Clamp into [0, 100] and round half-up.

    Bounds are compared before any float conversion, so oversized integers
    and infinities clamp instead of overflowing.
    """
    if value >= 100:
        return 100
    if value <= 0:
        return 0
    return math.floor(float(value) + 0.5)


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not (isinstance(value, float) and math.isnan(value))
    )


def parse_analysis(content: str) -> AnalysisResult | None:
    """Parse a model reply into an AnalysisResult.

    Returns None when the reply is not JSON or does not have the expected
    shape; callers decide what to substitute.
    """
    cleaned = sanitize_content(content)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.debug("Model reply is not JSON: %s", e)
        return None

    if not isinstance(data, dict):
        logger.debug("Model reply is JSON but not an object: %s", type(data).__name__)
        return None

    score = data.get("matchScore")
    if not _is_number(score):
        logger.debug("Model reply has no numeric matchScore: %r", score)
        return None

    try:
        return AnalysisResult(
            match_score=normalize_score(score),
            missing_skills=data.get("missingSkills"),
            improvements=data.get("improvements"),
        )
    except ValidationError as e:
        logger.debug("Model reply has malformed skill/improvement lists: %s", e)
        return None
