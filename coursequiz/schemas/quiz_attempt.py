from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, model_validator

from coursequiz.core.base_config import BaseConfig, UTCDateTime
from coursequiz.schemas.quiz import QuizAttempt

# Sets travel as JSON lists
StoredAnswer = Union[str, List[str]]


class QuizAttemptCreate(BaseModel):
    attempt_id: str
    quiz_id: str
    answers: Dict[str, StoredAnswer] = {}
    score: float = Field(ge=0)
    total_points: float = Field(ge=0)
    passed: bool
    completed_at: datetime

    @model_validator(mode="after")
    def _score_within_total(self) -> "QuizAttemptCreate":
        if self.score > self.total_points:
            raise ValueError("score cannot exceed total_points")
        return self

    @classmethod
    def from_attempt(cls, attempt: QuizAttempt) -> "QuizAttemptCreate":
        return cls(
            attempt_id=attempt.id,
            quiz_id=attempt.quiz_id,
            answers={
                qid: value if isinstance(value, str) else sorted(value)
                for qid, value in attempt.answers.items()
            },
            score=attempt.score,
            total_points=attempt.total_points,
            passed=attempt.passed,
            completed_at=attempt.completed_at,
        )


class QuizAttemptResponse(BaseConfig):
    attempt_id: str
    quiz_id: str
    module_id: Optional[str]
    answers: Dict[str, StoredAnswer]
    score: float
    total_points: float
    percentage: int
    passed: bool
    completed_at: UTCDateTime
    updated_at: Optional[UTCDateTime]


class QuizAttemptStats(BaseModel):
    total_attempts: int
    passed_attempts: int
    best_percentage: int
    average_percentage: float
