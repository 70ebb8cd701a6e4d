from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from coursequiz.api.deps import get_quiz_catalog
from coursequiz.schemas.quiz import Quiz
from coursequiz.services.catalog import QuizCatalog

router = APIRouter(prefix="/quizzes", tags=["Quizzes"])


@router.get("", response_model=List[Quiz])
def list_quizzes(
    module_id: Optional[str] = None,
    catalog: QuizCatalog = Depends(get_quiz_catalog),
):
    """
    List quizzes, optionally for one course module.
    An empty list is the "no quiz available" state, not an error.
    """
    if module_id is None:
        return catalog.all()
    return catalog.list_for_module(module_id)


@router.get("/{quiz_id}", response_model=Quiz)
def get_quiz(quiz_id: str, catalog: QuizCatalog = Depends(get_quiz_catalog)):
    quiz = catalog.get(quiz_id)
    if quiz is None:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz
