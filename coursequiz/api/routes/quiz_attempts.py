from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from coursequiz.api.deps import get_current_user, get_quiz_catalog
from coursequiz.crud import crud_attempt
from coursequiz.db.models import User
from coursequiz.db.session import get_db
from coursequiz.schemas.quiz_attempt import QuizAttemptCreate, QuizAttemptResponse, QuizAttemptStats
from coursequiz.services.catalog import QuizCatalog

router = APIRouter(prefix="/quiz-attempts", tags=["Quiz Attempts"])


@router.post("", response_model=QuizAttemptResponse, status_code=status.HTTP_201_CREATED)
def save_quiz_attempt(
    payload: QuizAttemptCreate,
    db: Session = Depends(get_db),
    catalog: QuizCatalog = Depends(get_quiz_catalog),
    current_user: User = Depends(get_current_user),
):
    """Store the caller's graded attempt, replacing any earlier one for the same quiz."""
    quiz = catalog.get(payload.quiz_id)
    if quiz is None:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return crud_attempt.upsert_quiz_attempt(db, current_user.id, payload, module_id=quiz.module_id)


@router.get("", response_model=List[QuizAttemptResponse])
def list_quiz_attempts(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud_attempt.list_attempts(db, current_user.id, skip=skip, limit=limit)


@router.get("/stats", response_model=QuizAttemptStats)
def get_quiz_attempt_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud_attempt.get_attempt_stats(db, current_user.id)
