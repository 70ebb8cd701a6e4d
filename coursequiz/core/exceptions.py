class QuizError(Exception):
    """Base class for quiz engine failures."""


class CatalogError(QuizError):
    """The quiz catalog could not be loaded or failed validation."""


class QuizStateError(QuizError):
    """An action was requested in a state that does not allow it."""


class UnknownQuestionError(QuizError):
    def __init__(self, quiz_id: str, question_id: str):
        self.quiz_id = quiz_id
        self.question_id = question_id
        super().__init__(f"Question {question_id!r} is not part of quiz {quiz_id!r}")
