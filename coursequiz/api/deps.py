from functools import lru_cache
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from coursequiz.db.session import get_db
from coursequiz.core.config import settings
from coursequiz.core.security import decode_token
from coursequiz.crud import crud_user
from coursequiz.services.catalog import JsonQuizCatalogLoader, QuizCatalog

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


@lru_cache
def get_quiz_catalog() -> QuizCatalog:
    """The catalog is loaded once per process and read-only afterwards."""
    return QuizCatalog.load(JsonQuizCatalogLoader(settings.QUIZ_CATALOG_PATH))


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)):
    payload = decode_token(token)
    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
    try:
        user_id = UUID(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    user = crud_user.get_user(db, user_id=user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user
