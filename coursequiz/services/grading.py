"""
Scoring for quiz attempts.

Everything here is a pure function of a quiz and an answer mapping: the
same inputs always produce the same result and nothing is mutated.
Correctness is all-or-nothing per question, there is no partial credit.
"""

import math
from fractions import Fraction
from typing import Iterable, Mapping, Optional, Union

from coursequiz.schemas.quiz import AnswerValue, MultiAnswer, Question, Quiz, exact_number
from coursequiz.schemas.quiz_result import NO_ANSWER, QuestionReview, QuizResult

Number = Union[int, float, Fraction]


def normalize_answer(value) -> Optional[AnswerValue]:
    """Coerce raw input (form value, JSON list, set) into an answer value."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (list, tuple, set, frozenset)):
        return frozenset(value)
    raise TypeError(f"Unsupported answer type: {type(value).__name__}")


def has_answer(answer: Optional[AnswerValue]) -> bool:
    return answer is not None and len(answer) > 0


def is_answer_correct(question: Question, answer: Optional[AnswerValue]) -> bool:
    if not has_answer(answer):
        return False

    correct = question.correct_answer
    if isinstance(correct, MultiAnswer):
        if not isinstance(answer, frozenset):
            return False
        return len(answer) == len(correct.value_set) and all(v in correct.value_set for v in answer)

    # Single choice, true/false and free text: exact, case-sensitive match
    return isinstance(answer, str) and answer == correct.value


def display_percentage(score: Number, total_points: Number) -> int:
    """Round-half-up percentage for display. Never used for pass/fail."""
    if total_points <= 0:
        return 0
    return math.floor(exact_number(score) * 100 / exact_number(total_points) + Fraction(1, 2))


def is_passing(score: Number, total_points: Number, passing_score: Number) -> bool:
    if total_points <= 0:
        return False
    # Exact comparison of score / total * 100 >= passing_score
    return exact_number(score) * 100 >= exact_number(passing_score) * exact_number(total_points)


def format_answer(answer: Optional[AnswerValue], options: Iterable[str] = ()) -> str:
    if not has_answer(answer):
        return NO_ANSWER
    if isinstance(answer, str):
        return answer
    ordered = [o for o in options if o in answer]
    ordered += sorted(v for v in answer if v not in ordered)
    return ", ".join(ordered)


def review_question(question: Question, answer: Optional[AnswerValue]) -> QuestionReview:
    correct = is_answer_correct(question, answer)
    return QuestionReview(
        question_id=question.id,
        question=question.text,
        options=list(question.options),
        answer=answer if has_answer(answer) else None,
        answer_display=format_answer(answer, question.options),
        correct_answer=question.correct_answer.display(),
        is_correct=correct,
        points=question.points,
        points_awarded=question.points if correct else 0,
        explanation=question.explanation,
    )


def grade_attempt(quiz: Quiz, answers: Mapping[str, AnswerValue]) -> QuizResult:
    """Grade ``answers`` (question id -> answer) against ``quiz``."""
    reviews = [review_question(q, normalize_answer(answers.get(q.id))) for q in quiz.questions]

    # Sums are kept as fractions of the catalog weights so 0.3 + 0.4 is exactly 0.7
    score = sum(
        (q.exact_points for q, r in zip(quiz.questions, reviews) if r.is_correct),
        Fraction(0),
    )
    total_points = quiz.exact_total_points

    return QuizResult(
        quiz_id=quiz.id,
        title=quiz.title,
        questions=reviews,
        score=float(score),
        total_points=float(total_points),
        percentage=display_percentage(score, total_points),
        passed=is_passing(score, total_points, quiz.passing_score),
    )
