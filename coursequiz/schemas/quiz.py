from datetime import datetime
from enum import Enum
from fractions import Fraction
from typing import Annotated, Dict, FrozenSet, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class QuestionKind(str, Enum):
    SINGLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    FREE_TEXT = "short-answer"

    @property
    def has_options(self) -> bool:
        return self is not QuestionKind.FREE_TEXT


TRUE_FALSE_OPTIONS = ("True", "False")

# A learner's answer: one string, or a set of strings for multi-answer questions
AnswerValue = Union[str, FrozenSet[str]]


class SingleAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["single"] = "single"
    value: str

    def display(self) -> str:
        return self.value


class MultiAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["multi"] = "multi"
    # Catalog order is kept for display; grading compares as a set
    values: Tuple[str, ...] = Field(min_length=1)

    @field_validator("values")
    @classmethod
    def _no_duplicates(cls, values: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(set(values)) != len(values):
            raise ValueError("correct answer values must be unique")
        return values

    @property
    def value_set(self) -> FrozenSet[str]:
        return frozenset(self.values)

    def display(self) -> str:
        return ", ".join(self.values)


CorrectAnswer = Annotated[Union[SingleAnswer, MultiAnswer], Field(discriminator="kind")]


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    kind: QuestionKind
    options: Tuple[str, ...] = ()
    correct_answer: CorrectAnswer
    explanation: str = ""
    points: float = Field(gt=0)

    @model_validator(mode="before")
    @classmethod
    def _default_true_false_options(cls, data):
        if isinstance(data, dict) and data.get("kind") == QuestionKind.TRUE_FALSE.value and not data.get("options"):
            data = {**data, "options": list(TRUE_FALSE_OPTIONS)}
        return data

    @field_validator("correct_answer", mode="before")
    @classmethod
    def _tag_correct_answer(cls, value):
        # Catalog files spell a single answer as a string and several as a list
        if isinstance(value, str):
            return {"kind": "single", "value": value}
        if isinstance(value, (list, tuple, set, frozenset)):
            return {"kind": "multi", "values": list(value)}
        return value

    @model_validator(mode="after")
    def _check_answer_key(self) -> "Question":
        if self.kind.has_options:
            if not self.options:
                raise ValueError(f"question {self.id!r} needs options")
            if isinstance(self.correct_answer, SingleAnswer):
                expected = {self.correct_answer.value}
            else:
                expected = self.correct_answer.value_set
            missing = sorted(expected - set(self.options))
            if missing:
                raise ValueError(
                    f"question {self.id!r} has correct answer(s) {missing} that are not among its options"
                )
        elif isinstance(self.correct_answer, MultiAnswer):
            raise ValueError(f"free-text question {self.id!r} needs a single canonical answer")
        return self

    @property
    def exact_points(self) -> Fraction:
        """The weight as written in the catalog (0.1 is 1/10, not its binary float)."""
        return exact_number(self.points)


def exact_number(value) -> Fraction:
    if isinstance(value, Fraction):
        return value
    return Fraction(str(value))


class Quiz(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    module_id: str
    title: str
    description: str = ""
    questions: Tuple[Question, ...] = ()
    time_limit: Optional[int] = Field(default=None, gt=0, description="Minutes")
    passing_score: float = Field(ge=0, le=100)

    @model_validator(mode="after")
    def _unique_question_ids(self) -> "Quiz":
        seen = set()
        for question in self.questions:
            if question.id in seen:
                raise ValueError(f"duplicate question id {question.id!r}")
            seen.add(question.id)
        return self

    @property
    def exact_total_points(self) -> Fraction:
        return sum((q.exact_points for q in self.questions), Fraction(0))

    @property
    def total_points(self) -> float:
        return float(self.exact_total_points)

    @property
    def time_limit_seconds(self) -> Optional[int]:
        return self.time_limit * 60 if self.time_limit else None

    def question(self, question_id: str) -> Optional[Question]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None


class QuizAttempt(BaseModel):
    """A sealed, graded attempt. Produced once per submission."""
    model_config = ConfigDict(frozen=True)

    id: str
    quiz_id: str
    answers: Dict[str, AnswerValue]
    score: float
    total_points: float
    percentage: int
    completed_at: datetime
    passed: bool
