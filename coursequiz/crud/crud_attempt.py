import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from coursequiz.db.models import QuizAttempt
from coursequiz.schemas.quiz_attempt import QuizAttemptCreate, QuizAttemptStats
from coursequiz.services.grading import display_percentage

logger = logging.getLogger(__name__)


def get_attempt(db: Session, user_id: UUID, quiz_id: str) -> Optional[QuizAttempt]:
    result = db.execute(
        select(QuizAttempt).where(QuizAttempt.user_id == user_id, QuizAttempt.quiz_id == quiz_id)
    )
    return result.scalar_one_or_none()


def upsert_quiz_attempt(
    db: Session,
    user_id: UUID,
    data: QuizAttemptCreate,
    module_id: Optional[str] = None,
) -> QuizAttempt:
    """
    Store a graded attempt, replacing the user's previous one for the same quiz.
    Scores are stored as given; they are never recomputed here.
    """
    attempt = get_attempt(db, user_id, data.quiz_id)
    if attempt is None:
        attempt = QuizAttempt(user_id=user_id, quiz_id=data.quiz_id)
        db.add(attempt)

    attempt.attempt_id = data.attempt_id
    attempt.module_id = module_id
    attempt.answers = data.answers
    attempt.score = data.score
    attempt.total_points = data.total_points
    attempt.percentage = display_percentage(data.score, data.total_points)
    attempt.passed = data.passed
    attempt.completed_at = data.completed_at

    db.commit()
    db.refresh(attempt)
    logger.info("Saved attempt %s of quiz %s for user %s", data.attempt_id, data.quiz_id, user_id)
    return attempt


def list_attempts(db: Session, user_id: UUID, skip: int = 0, limit: int = 100) -> List[QuizAttempt]:
    result = db.execute(
        select(QuizAttempt)
        .where(QuizAttempt.user_id == user_id)
        .order_by(QuizAttempt.completed_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())


def get_attempt_stats(db: Session, user_id: UUID) -> QuizAttemptStats:
    attempts = db.execute(select(QuizAttempt).where(QuizAttempt.user_id == user_id)).scalars().all()
    if not attempts:
        return QuizAttemptStats(total_attempts=0, passed_attempts=0, best_percentage=0, average_percentage=0.0)

    percentages = [a.percentage for a in attempts]
    return QuizAttemptStats(
        total_attempts=len(attempts),
        passed_attempts=sum(1 for a in attempts if a.passed),
        best_percentage=max(percentages),
        average_percentage=round(sum(percentages) / len(percentages), 2),
    )
