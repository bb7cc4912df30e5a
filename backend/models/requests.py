from pydantic import BaseModel, ConfigDict, Field

MAX_RESUME_CHARS = 10000
MAX_JOB_DESCRIPTION_CHARS = 5000


class AnalysisRequest(BaseModel):
    """A validated resume/job-description pair. Built by the request validator."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    resume_text: str = Field(
        ..., alias="resumeText", max_length=MAX_RESUME_CHARS, description="Plain text resume content"
    )
    job_description: str = Field(
        ..., alias="jobDescription", max_length=MAX_JOB_DESCRIPTION_CHARS, description="Job description text"
    )
