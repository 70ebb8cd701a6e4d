from fastapi import APIRouter

from .auth import router as auth
from .users import router as users
from .quizzes import router as quizzes
from .quiz_attempts import router as quiz_attempts
from .progress import router as progress

api_router = APIRouter()

api_router.include_router(auth)
api_router.include_router(users)
api_router.include_router(quizzes)
api_router.include_router(quiz_attempts)
api_router.include_router(progress)
