from pydantic import BaseModel, Field


class RoadmapModule(BaseModel):
    name: str
    description: str
    resources: list[str]  # YouTube search queries


class LearningRoadmap(BaseModel):
    """Roadmap contract returned by Gemini; id/created_at are set for stored plans."""
    title: str
    duration: str
    modules: list[RoadmapModule]
    target_role: str = ""
    id: str | None = None
    created_at: str | None = None


class RoadmapRequest(BaseModel):
    target_role: str = Field(..., min_length=1, max_length=255)
    skills: list[str] | None = Field(None, description="Defaults to the profile skills")
