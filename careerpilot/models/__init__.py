from careerpilot.models.profile import Profile
from careerpilot.models.resume import ResumeAnalysisEntry
from careerpilot.models.learning_plan import LearningPlan
from careerpilot.models.quiz_result import QuizResult
from careerpilot.models.interview_result import InterviewResult
from careerpilot.models.ai_usage_log import AiUsageLog

__all__ = [
    "Profile", "ResumeAnalysisEntry", "LearningPlan", "QuizResult", "InterviewResult", "AiUsageLog",
]
