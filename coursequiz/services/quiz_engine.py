"""
Quiz attempt state machine.

One ``QuizEngine`` runs one attempt at a time for the quiz of a course
module::

    NOT_STARTED --start()--> IN_PROGRESS --submit()/timer--> SUBMITTED
                                  ^                              |
                                  +-----------retake()-----------+

All calls, timer ticks included, are expected on a single event loop,
so the engine holds no locks. Grading is delegated to
``coursequiz.services.grading``; persistence is left to the
``on_complete`` callback.
"""

import asyncio
import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Optional, Union

from coursequiz.core.base_config import utcnow
from coursequiz.core.exceptions import QuizStateError, UnknownQuestionError
from coursequiz.schemas.quiz import AnswerValue, Question, Quiz, QuizAttempt
from coursequiz.schemas.quiz_result import QuizResult
from coursequiz.services.catalog import QuizCatalog
from coursequiz.services.countdown import Countdown
from coursequiz.services.grading import grade_attempt, normalize_answer

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[QuizAttempt], None]


class QuizState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


class QuizEngine:
    def __init__(
        self,
        catalog: QuizCatalog,
        module_id: Optional[str],
        on_complete: Optional[CompletionCallback] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        clock: Callable[[], datetime] = utcnow,
        tick_interval: float = 1.0,
    ):
        self.module_id = module_id
        self.quiz: Optional[Quiz] = catalog.for_module(module_id)
        self.on_complete = on_complete
        self._loop = loop
        self._clock = clock
        self._tick_interval = tick_interval

        self._state = QuizState.NOT_STARTED
        self._attempt_id: Optional[str] = None
        self._current_index = 0
        self._answers: Dict[str, AnswerValue] = {}
        self._countdown: Optional[Countdown] = None
        self._attempt: Optional[QuizAttempt] = None
        self._result: Optional[QuizResult] = None

        if self.quiz is None:
            logger.info("No quiz available for module %s", module_id)

    # ----- read-only views -----

    @property
    def state(self) -> QuizState:
        return self._state

    @property
    def is_available(self) -> bool:
        return self.quiz is not None

    @property
    def question_count(self) -> int:
        return len(self.quiz.questions) if self.quiz else 0

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> Optional[Question]:
        if self.quiz is None or not self.quiz.questions:
            return None
        return self.quiz.questions[self._current_index]

    @property
    def is_last_question(self) -> bool:
        return self._current_index >= self.question_count - 1

    @property
    def answers(self) -> Dict[str, AnswerValue]:
        return dict(self._answers)

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def progress(self) -> float:
        """Fraction of the quiz reached, counting the current question."""
        if not self.question_count:
            return 0.0
        return (self._current_index + 1) / self.question_count

    @property
    def time_remaining(self) -> Optional[int]:
        return self._countdown.remaining if self._countdown else None

    @property
    def attempt(self) -> Optional[QuizAttempt]:
        return self._attempt

    def format_time_remaining(self) -> str:
        seconds = self.time_remaining
        if seconds is None:
            return ""
        minutes, seconds = divmod(seconds, 60)
        return f"{minutes}:{seconds:02d}"

    # ----- transitions -----

    def start(self) -> None:
        if self.quiz is None:
            logger.warning("Cannot start: no quiz available for module %s", self.module_id)
            return
        if self._state is not QuizState.NOT_STARTED:
            raise QuizStateError(f"Quiz {self.quiz.id} already started")
        self._begin_attempt()

    def retake(self) -> None:
        if self._state is not QuizState.SUBMITTED:
            raise QuizStateError("Only a submitted quiz can be retaken")
        logger.info("Retaking quiz %s; discarding attempt %s", self.quiz.id, self._attempt_id)
        self._begin_attempt()

    def record_answer(self, answer: Union[str, list, set, frozenset, None], question_id: Optional[str] = None) -> None:
        self._require_in_progress("record an answer")
        if question_id is None:
            question = self.current_question
            if question is None:
                raise QuizStateError(f"Quiz {self.quiz.id} has no questions to answer")
            question_id = question.id
        elif self.quiz.question(question_id) is None:
            raise UnknownQuestionError(self.quiz.id, question_id)

        value = normalize_answer(answer)
        if value is None:
            self._answers.pop(question_id, None)
        else:
            self._answers[question_id] = value

    def next_question(self) -> None:
        self.go_to(self._current_index + 1)

    def previous_question(self) -> None:
        self.go_to(self._current_index - 1)

    def go_to(self, index: int) -> None:
        self._require_in_progress("navigate")
        # Moves past either end are ignored, not wrapped
        if 0 <= index < self.question_count:
            self._current_index = index

    def submit(self) -> QuizAttempt:
        self._require_in_progress("submit")
        if not self.is_last_question:
            raise QuizStateError("Quiz can only be submitted from the last question")
        return self._finalize(reason="submitted")

    def tick(self) -> None:
        """Advance the countdown by one second. Ignored outside a timed attempt."""
        if self._state is not QuizState.IN_PROGRESS or self._countdown is None:
            return
        self._countdown.tick()

    def close(self) -> None:
        """Host is going away: cancel the timer so it can never submit late."""
        self._stop_timer()
        logger.debug("Quiz engine for module %s closed in state %s", self.module_id, self._state.value)

    def results(self) -> QuizResult:
        if self._state is not QuizState.SUBMITTED:
            raise QuizStateError("Results are only available after submission")
        return self._result

    # ----- internals -----

    def _begin_attempt(self) -> None:
        self._stop_timer()
        self._countdown = None
        self._attempt_id = f"attempt_{uuid.uuid4().hex}"
        self._current_index = 0
        self._answers = {}
        self._attempt = None
        self._result = None
        self._state = QuizState.IN_PROGRESS

        seconds = self.quiz.time_limit_seconds
        if seconds:
            self._countdown = Countdown(
                seconds,
                on_expire=self._on_timer_expired,
                loop=self._loop,
                interval=self._tick_interval,
            )
            self._countdown.start()
        logger.info(
            "Started attempt %s for quiz %s (time limit: %s)",
            self._attempt_id, self.quiz.id, f"{seconds}s" if seconds else "none",
        )

    def _on_timer_expired(self) -> None:
        if self._state is not QuizState.IN_PROGRESS:
            return
        logger.info("Time is up for attempt %s; submitting recorded answers", self._attempt_id)
        self._finalize(reason="time expired")

    def _finalize(self, reason: str) -> QuizAttempt:
        self._stop_timer()

        answers = dict(self._answers)
        result = grade_attempt(self.quiz, answers)
        attempt = QuizAttempt(
            id=self._attempt_id,
            quiz_id=self.quiz.id,
            answers=answers,
            score=result.score,
            total_points=result.total_points,
            percentage=result.percentage,
            completed_at=self._clock(),
            passed=result.passed,
        )
        self._attempt = attempt
        self._result = result
        self._state = QuizState.SUBMITTED
        logger.info(
            "Attempt %s %s: %s/%s points (%d%%), %s",
            attempt.id, reason, attempt.score, attempt.total_points,
            attempt.percentage, "passed" if attempt.passed else "failed",
        )

        if self.on_complete is not None:
            self.on_complete(attempt)
        return attempt

    def _stop_timer(self) -> None:
        # Keep the countdown object so time_remaining still reads after submission
        if self._countdown is not None:
            self._countdown.cancel()

    def _require_in_progress(self, action: str) -> None:
        if self._state is not QuizState.IN_PROGRESS:
            raise QuizStateError(f"Cannot {action} while quiz is {self._state.value}")
