"""
Learning plans, quiz results and interview results: plain insert + history reads,
always scoped to one owner and ordered newest first.
"""
from datetime import datetime
from typing import Any

from sqlalchemy import desc
from sqlalchemy.orm import Session

from careerpilot.models.interview_result import InterviewResult
from careerpilot.models.learning_plan import LearningPlan
from careerpilot.models.quiz_result import QuizResult


# ---------- Learning plans ----------


def save_learning_plan(db: Session, user_id: str, target_role: str, plan_data: dict[str, Any]) -> LearningPlan:
    plan = LearningPlan(user_id=user_id, target_role=target_role, plan_data=plan_data)
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan


def get_latest_learning_plan(db: Session, user_id: str) -> LearningPlan | None:
    return (
        db.query(LearningPlan)
        .filter(LearningPlan.user_id == user_id)
        .order_by(desc(LearningPlan.updated_at), desc(LearningPlan.id))
        .first()
    )


def get_learning_plan_history(db: Session, user_id: str) -> list[LearningPlan]:
    return (
        db.query(LearningPlan)
        .filter(LearningPlan.user_id == user_id)
        .order_by(desc(LearningPlan.updated_at), desc(LearningPlan.id))
        .all()
    )


# ---------- Quizzes ----------


def save_quiz_result(
    db: Session,
    user_id: str,
    topic: str,
    score: int,
    total: int,
    difficulty: str,
    created_at: datetime | None = None,
) -> QuizResult:
    result = QuizResult(user_id=user_id, topic=topic, score=score, total=total, difficulty=difficulty)
    if created_at is not None:
        result.created_at = created_at
    db.add(result)
    db.commit()
    db.refresh(result)
    return result


def get_quiz_history(db: Session, user_id: str) -> list[QuizResult]:
    return (
        db.query(QuizResult)
        .filter(QuizResult.user_id == user_id)
        .order_by(desc(QuizResult.created_at), desc(QuizResult.id))
        .all()
    )


# ---------- Interviews ----------


def save_interview_result(
    db: Session,
    user_id: str,
    role: str,
    round_type: str,
    score: int,
    feedback: str,
    passed: bool,
    created_at: datetime | None = None,
) -> InterviewResult:
    result = InterviewResult(
        user_id=user_id,
        role=role,
        round_type=round_type,
        score=score,
        feedback=feedback,
        passed=passed,
    )
    if created_at is not None:
        result.created_at = created_at
    db.add(result)
    db.commit()
    db.refresh(result)
    return result


def get_interview_history(db: Session, user_id: str) -> list[InterviewResult]:
    return (
        db.query(InterviewResult)
        .filter(InterviewResult.user_id == user_id)
        .order_by(desc(InterviewResult.created_at), desc(InterviewResult.id))
        .all()
    )
