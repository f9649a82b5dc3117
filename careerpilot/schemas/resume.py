from datetime import datetime
from pydantic import BaseModel, Field


# ---- Gemini result contract ----

class ResumeAnalysis(BaseModel):
    """ATS analysis returned by Gemini. Serialized with camelCase keys (stored payload + API)."""
    ats_score: float = Field(..., alias="atsScore", ge=0, le=100)
    extracted_skills: list[str] = Field(..., alias="extractedSkills")
    missing_skills: list[str] = Field(..., alias="missingSkills")
    strengths: list[str]
    improvements: list[str]

    class Config:
        populate_by_name = True


# ---- Analyze ----

class ResumeAnalyzeRequest(BaseModel):
    resume_text: str = Field(..., min_length=1, max_length=100_000)
    target_role: str = Field(..., min_length=1, max_length=255)


class ResumeAnalyzeResponse(BaseModel):
    analysis: ResumeAnalysis
    from_cache: bool = False


class LatestResumeResponse(BaseModel):
    content: str
    target_role: str
    analysis: ResumeAnalysis
    created_at: datetime
