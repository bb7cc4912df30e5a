"""Inbound payload validation for POST /analyze.

Checks run in three stages (presence, type, size); each stage reports every
offending field before failing, and a later stage only runs once the earlier
ones pass.
"""

import logging
from typing import Any

from models.requests import MAX_JOB_DESCRIPTION_CHARS, MAX_RESUME_CHARS, AnalysisRequest
from services.errors import InvalidType, MissingField, SizeExceeded

logger = logging.getLogger(__name__)

# wire name -> (human label, max length)
FIELDS: dict[str, tuple[str, int]] = {
    "resumeText": ("Resume text", MAX_RESUME_CHARS),
    "jobDescription": ("Job description", MAX_JOB_DESCRIPTION_CHARS),
}


def _json_type_name(value: Any) -> str:
    """Name a decoded JSON value's type the way a JSON client would."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    if value is None:
        return "null"
    return type(value).__name__


def _is_absent(value: Any) -> bool:
    """Null, false, zero and "" count as absent; empty arrays/objects are present."""
    if value is None or value is False or value == "":
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or value != value
    return False


def validate_request(payload: Any) -> AnalysisRequest:
    """Turn a decoded JSON body into an AnalysisRequest or raise a ValidationFailure."""
    if not isinstance(payload, dict):
        payload = {}

    missing = {
        name: f"{label} is required"
        for name, (label, _) in FIELDS.items()
        if _is_absent(payload.get(name))
    }
    if missing:
        logger.info("Rejected analyze request, missing: %s", ", ".join(missing))
        raise MissingField(details=missing)

    wrong_type = {
        name: f"Expected string, got {_json_type_name(payload[name])}"
        for name in FIELDS
        if not isinstance(payload[name], str)
    }
    if wrong_type:
        logger.info("Rejected analyze request, wrong types: %s", ", ".join(wrong_type))
        raise InvalidType(details=wrong_type)

    oversized = {
        name: f"{label} exceeds {limit} character limit"
        for name, (label, limit) in FIELDS.items()
        if len(payload[name]) > limit
    }
    if oversized:
        logger.info("Rejected analyze request, oversized: %s", ", ".join(oversized))
        raise SizeExceeded(details=oversized)

    return AnalysisRequest(
        resume_text=payload["resumeText"],
        job_description=payload["jobDescription"],
    )
