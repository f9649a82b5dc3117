"""Dashboard / progress statistics over an owner's quiz and interview history."""
from careerpilot.models.interview_result import InterviewResult
from careerpilot.models.quiz_result import QuizResult
from careerpilot.models.resume import ResumeAnalysisEntry
from careerpilot.schemas.progress import ProgressStats
from careerpilot.services.interview_service import round_half_up
from careerpilot.services.quiz_service import is_quiz_passed


def compute_stats(
    quizzes: list[QuizResult],
    interviews: list[InterviewResult],
    latest_resume: ResumeAnalysisEntry | None,
) -> ProgressStats:
    quizzes_passed = sum(1 for q in quizzes if is_quiz_passed(q.score, q.total))
    interviews_passed = sum(1 for i in interviews if i.passed)

    ratios = [q.score / q.total for q in quizzes if q.total]
    avg_quiz = round_half_up(sum(ratios) / len(quizzes) * 100) if quizzes else 0
    avg_interview = round_half_up(sum(i.score for i in interviews) / len(interviews)) if interviews else 0

    ats = 0.0
    if latest_resume is not None and isinstance(latest_resume.analysis, dict):
        ats = float(latest_resume.analysis.get("atsScore") or 0)

    return ProgressStats(
        quizzes=len(quizzes),
        quizzes_passed=quizzes_passed,
        avg_quiz=avg_quiz,
        interviews=len(interviews),
        interviews_passed=interviews_passed,
        avg_interview=avg_interview,
        ats=ats,
        readiness=max(ats, avg_interview),
        rounds_passed=quizzes_passed + interviews_passed,
    )
