"""Quiz scoring. A quiz counts as passed at 50% correct."""
from careerpilot.schemas.quiz import QuizQuestion

PASS_RATIO = 0.5


def score_quiz(questions: list[QuizQuestion], answers: dict[int, int]) -> int:
    """Number of questions whose chosen option index equals correct_answer. Unanswered = wrong."""
    return sum(1 for idx, q in enumerate(questions) if answers.get(idx) == q.correct_answer)


def is_quiz_passed(score: int, total: int) -> bool:
    if total <= 0:
        return False
    return score / total >= PASS_RATIO
