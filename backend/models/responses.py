from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    match_score: int = Field(..., alias="matchScore", ge=0, le=100)
    missing_skills: list[str] = Field(..., alias="missingSkills")
    improvements: list[str]


FALLBACK_RESULT = AnalysisResult(
    match_score=50,
    missing_skills=["Analysis failed due to invalid AI response"],
    improvements=["Please try again or contact support"],
)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Gateway return value. ``degraded`` marks a substituted FALLBACK_RESULT."""

    result: AnalysisResult
    degraded: bool = False


class ErrorResponse(BaseModel):
    error: str
    details: dict[str, str] | str | None = None


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: str
    has_api_key: bool = Field(..., alias="hasApiKey")
    python_version: str = Field(..., alias="pythonVersion")

    model_config = ConfigDict(populate_by_name=True)
