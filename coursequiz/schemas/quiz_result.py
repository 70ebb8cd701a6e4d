from typing import List, Optional

from pydantic import BaseModel

from coursequiz.schemas.quiz import AnswerValue

NO_ANSWER = "No answer provided"


class QuestionReview(BaseModel):
    question_id: str
    question: str
    options: List[str]
    answer: Optional[AnswerValue]
    answer_display: str
    correct_answer: str
    is_correct: bool
    points: float
    points_awarded: float
    explanation: Optional[str]


class QuizResult(BaseModel):
    quiz_id: str
    title: str
    questions: List[QuestionReview]
    score: float
    total_points: float
    percentage: int
    passed: bool
