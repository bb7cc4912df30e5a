"""Prompt template for the resume/job-description comparison call."""

from models.requests import AnalysisRequest

RESUME_PROMPT_CHARS = 3000
JOB_DESCRIPTION_PROMPT_CHARS = 2000
TRUNCATION_MARKER = "...[truncated]"


def truncate(text: str, limit: int) -> str:
    """Cut text to ``limit`` chars, marking the cut when anything was dropped."""
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text


def build_analysis_prompt(request: AnalysisRequest) -> str:
    resume = truncate(request.resume_text, RESUME_PROMPT_CHARS)
    job_description = truncate(request.job_description, JOB_DESCRIPTION_PROMPT_CHARS)

    return f"""
You are an expert resume analyzer. Compare the following resume with the job description and provide analysis in VALID JSON format only.

RESUME:
{resume}

JOB DESCRIPTION:
{job_description}

Respond with ONLY valid JSON in this exact format:
{{
  "matchScore": number,
  "missingSkills": ["Skill1","Skill2","Skilln"],
  "improvements": ["point1", "point2", "pointn"]
}}"""
