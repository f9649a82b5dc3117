from pydantic import BaseModel

from careerpilot.schemas.interview import InterviewResultResponse
from careerpilot.schemas.quiz import QuizResultResponse


class ProgressStats(BaseModel):
    quizzes: int = 0
    quizzes_passed: int = 0
    avg_quiz: int = 0  # percent
    interviews: int = 0
    interviews_passed: int = 0
    avg_interview: int = 0
    ats: float = 0
    readiness: float = 0  # max(ats, avg_interview)
    rounds_passed: int = 0


class ProgressResponse(BaseModel):
    stats: ProgressStats
    quiz_history: list[QuizResultResponse]
    interview_history: list[InterviewResultResponse]
