"""
Mock interview rounds: Technical -> Managerial -> HR.
A round is scored as the rounded mean of its per-answer scores and passes at 60.
Each round unlocks once the previous round's latest attempt passed.
"""
import math

from careerpilot.models.interview_result import InterviewResult
from careerpilot.schemas.interview import InterviewRound, RoundStatus

ROUND_ORDER = [InterviewRound.TECHNICAL, InterviewRound.MANAGERIAL, InterviewRound.HR]

QUESTIONS_PER_ROUND = {
    InterviewRound.TECHNICAL: 5,
    InterviewRound.MANAGERIAL: 4,
    InterviewRound.HR: 4,
}

PASS_SCORE = 60

GREETINGS = {
    InterviewRound.TECHNICAL: (
        f"Welcome to the Technical Round. I'll ask {QUESTIONS_PER_ROUND[InterviewRound.TECHNICAL]} "
        "engineering questions."
    ),
    InterviewRound.MANAGERIAL: "Moving to the Managerial Round. Let's discuss leadership and scenarios.",
    InterviewRound.HR: "Final Round: HR and Culture.",
}


class InterviewRoundError(ValueError):
    """Round cannot be completed as requested (locked, or wrong number of answers)."""


def round_half_up(value: float) -> int:
    """Nearest integer, .5 rounds up (Python round() rounds half to even)."""
    return int(math.floor(value + 0.5))


def round_score(scores: list[float]) -> int:
    """Mean score, rounded half up."""
    if not scores:
        return 0
    return round_half_up(sum(scores) / len(scores))


def completion_feedback(passed: bool) -> str:
    return f"Round Complete. Status: {'PASSED' if passed else 'FAILED'}"


def round_statuses(history: list[InterviewResult]) -> list[RoundStatus]:
    """history: owner's results, newest first. Latest attempt per round decides its status."""
    latest: dict[str, InterviewResult] = {}
    for result in history:
        latest.setdefault(result.round_type, result)

    statuses = []
    previous_passed = True
    for r in ROUND_ORDER:
        result = latest.get(r.value)
        statuses.append(RoundStatus(
            round=r,
            questions=QUESTIONS_PER_ROUND[r],
            unlocked=previous_passed,
            passed=result.passed if result else None,
            score=result.score if result else None,
        ))
        previous_passed = bool(result and result.passed)
    return statuses


def evaluate_round(
    interview_round: InterviewRound,
    scores: list[float],
    history: list[InterviewResult],
) -> tuple[int, bool, str]:
    """Validate and score a finished round. Returns (score, passed, feedback)."""
    status = next(s for s in round_statuses(history) if s.round == interview_round)
    if not status.unlocked:
        raise InterviewRoundError(f"{interview_round.value} round is locked until the previous round is passed.")
    expected = QUESTIONS_PER_ROUND[interview_round]
    if len(scores) != expected:
        raise InterviewRoundError(
            f"{interview_round.value} round needs {expected} answer scores, got {len(scores)}."
        )
    score = round_score(scores)
    passed = score >= PASS_SCORE
    return score, passed, completion_feedback(passed)
