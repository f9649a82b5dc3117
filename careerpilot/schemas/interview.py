import enum
from pydantic import BaseModel, Field


class InterviewRound(str, enum.Enum):
    TECHNICAL = "Technical"
    MANAGERIAL = "Managerial"
    HR = "HR"


# ---- Gemini result contract ----

class InterviewFeedback(BaseModel):
    score: float = Field(..., ge=0, le=100)
    feedback: str
    suggestion: str


# ---- Requests / responses ----

class InterviewFeedbackRequest(BaseModel):
    round: InterviewRound
    question: str = Field(..., min_length=1, max_length=4000)
    answer: str = Field(..., min_length=1, max_length=8000)
    role: str | None = Field(None, description="Defaults to the profile target role")


class InterviewCompleteRequest(BaseModel):
    round: InterviewRound
    scores: list[float] = Field(..., min_length=1)
    role: str | None = None


class InterviewResultResponse(BaseModel):
    id: str
    role: str
    round_type: str
    score: int
    feedback: str
    passed: bool
    date: str


class RoundStatus(BaseModel):
    round: InterviewRound
    questions: int
    unlocked: bool
    passed: bool | None = None  # None = not attempted
    score: int | None = None


class SpeechRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)


class SpeechResponse(BaseModel):
    audio: str | None = None  # base64 16-bit PCM, mono
    sample_rate: int = 24000
