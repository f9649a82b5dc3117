from pydantic import BaseModel, Field


class QuizQuestion(BaseModel):
    id: str
    question: str
    options: list[str]
    correct_answer: int = Field(..., alias="correctAnswer", description="Index of the correct option (0-3)")
    explanation: str

    class Config:
        populate_by_name = True


class QuizGenerateRequest(BaseModel):
    topic: str = Field(..., min_length=1, max_length=255)
    difficulty: str = Field("Intermediate", max_length=32)


class QuizSubmitRequest(BaseModel):
    topic: str = Field(..., min_length=1, max_length=255)
    difficulty: str = Field("Intermediate", max_length=32)
    questions: list[QuizQuestion] = Field(..., min_length=1)
    answers: dict[int, int] = Field(default_factory=dict, description="question index -> chosen option index")


class QuizResultResponse(BaseModel):
    id: str
    topic: str
    score: int
    total: int
    difficulty: str
    date: str
