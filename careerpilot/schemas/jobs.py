from pydantic import BaseModel, Field


class JobRecommendation(BaseModel):
    id: str
    title: str
    company: str
    location: str
    match_score: int = Field(..., alias="matchScore")
    description: str
    link: str

    class Config:
        populate_by_name = True
