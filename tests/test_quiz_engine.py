"""
Tests for the quiz attempt state machine.

Covers:
- Start, answer, navigate and submit transitions
- Timer-driven submission and cancellation
- Retake and the empty "no quiz" state
- Result review
"""

import asyncio

import pytest

from conftest import make_quiz

from coursequiz.core.exceptions import QuizStateError, UnknownQuestionError
from coursequiz.schemas.quiz_result import NO_ANSWER
from coursequiz.services.catalog import QuizCatalog
from coursequiz.services.quiz_engine import QuizEngine, QuizState


@pytest.fixture
def completed():
    return []


@pytest.fixture
def engine(catalog, completed):
    return QuizEngine(catalog, "m1", on_complete=completed.append)


def timed_engine(completed, minutes=1, **kwargs):
    catalog = QuizCatalog([make_quiz(time_limit=minutes)])
    return QuizEngine(catalog, "m1", on_complete=completed.append, **kwargs)


class TestStart:

    def test_initial_state(self, engine):
        assert engine.state is QuizState.NOT_STARTED
        assert engine.is_available
        assert engine.time_remaining is None

    def test_start_enters_first_question(self, engine):
        engine.start()
        assert engine.state is QuizState.IN_PROGRESS
        assert engine.current_index == 0
        assert engine.current_question.id == "Q1"
        assert engine.answers == {}

    def test_start_twice_is_rejected(self, engine):
        engine.start()
        with pytest.raises(QuizStateError):
            engine.start()

    def test_start_arms_timer(self, completed):
        engine = timed_engine(completed, minutes=2)
        engine.start()
        assert engine.time_remaining == 120
        assert engine.format_time_remaining() == "2:00"

    def test_untimed_quiz_has_no_timer(self, engine):
        engine.start()
        assert engine.time_remaining is None
        assert engine.format_time_remaining() == ""


class TestNoQuizAvailable:

    def test_unknown_module_is_empty_state(self, catalog):
        engine = QuizEngine(catalog, "missing-module")
        assert engine.quiz is None
        assert not engine.is_available
        assert engine.current_question is None

    def test_start_is_a_no_op(self, catalog):
        engine = QuizEngine(catalog, "missing-module")
        engine.start()
        assert engine.state is QuizState.NOT_STARTED

    def test_no_module_selects_nothing(self, catalog):
        assert QuizEngine(catalog, None).quiz is None


class TestAnswering:

    def test_record_answer_for_current_question(self, engine):
        engine.start()
        engine.record_answer("A")
        engine.record_answer("B")
        assert engine.answers == {"Q1": "B"}
        assert engine.answered_count == 1

    def test_record_answer_by_question_id(self, engine):
        engine.start()
        engine.record_answer("False", question_id="Q2")
        assert engine.answers == {"Q2": "False"}
        assert engine.current_index == 0

    def test_list_answers_become_sets(self, engine):
        engine.start()
        engine.record_answer(["A", "B"])
        assert engine.answers["Q1"] == frozenset({"A", "B"})

    def test_none_clears_answer(self, engine):
        engine.start()
        engine.record_answer("B")
        engine.record_answer(None)
        assert engine.answers == {}

    def test_unknown_question_is_rejected(self, engine):
        engine.start()
        with pytest.raises(UnknownQuestionError):
            engine.record_answer("B", question_id="nope")

    def test_answering_before_start_is_rejected(self, engine):
        with pytest.raises(QuizStateError):
            engine.record_answer("B")

    def test_answers_view_is_a_copy(self, engine):
        engine.start()
        engine.answers["Q1"] = "B"
        assert engine.answers == {}


class TestNavigation:

    def test_next_and_previous(self, engine):
        engine.start()
        engine.next_question()
        assert engine.current_index == 1
        engine.previous_question()
        assert engine.current_index == 0

    def test_clamped_at_both_ends(self, engine):
        engine.start()
        engine.previous_question()
        assert engine.current_index == 0
        engine.next_question()
        engine.next_question()
        assert engine.current_index == 1

    def test_no_answer_needed_to_advance(self, engine):
        engine.start()
        engine.next_question()
        assert engine.is_last_question
        assert engine.answered_count == 0

    def test_progress(self, engine):
        engine.start()
        assert engine.progress == 0.5
        engine.next_question()
        assert engine.progress == 1.0


class TestSubmit:

    def test_concrete_scenario(self, engine, completed):
        engine.start()
        engine.record_answer("B")
        engine.next_question()
        engine.record_answer("True")
        attempt = engine.submit()

        assert engine.state is QuizState.SUBMITTED
        assert attempt.score == 10
        assert attempt.total_points == 15
        assert attempt.percentage == 67
        assert attempt.passed is False
        assert attempt.quiz_id == "quiz-1"
        assert attempt.answers == {"Q1": "B", "Q2": "True"}
        assert completed == [attempt]

    def test_submit_only_from_last_question(self, engine):
        engine.start()
        with pytest.raises(QuizStateError):
            engine.submit()

    def test_submit_twice_is_rejected(self, engine, completed):
        engine.start()
        engine.next_question()
        engine.submit()
        with pytest.raises(QuizStateError):
            engine.submit()
        assert len(completed) == 1

    def test_attempt_is_sealed(self, engine):
        engine.start()
        engine.next_question()
        attempt = engine.submit()
        with pytest.raises(QuizStateError):
            engine.record_answer("B", question_id="Q1")
        assert attempt.answers == {}

    def test_empty_quiz_can_be_submitted(self, completed):
        engine = QuizEngine(QuizCatalog([make_quiz(questions=[])]), "m1", on_complete=completed.append)
        engine.start()
        attempt = engine.submit()
        assert attempt.total_points == 0
        assert attempt.percentage == 0
        assert attempt.passed is False

    def test_results_review(self, engine):
        engine.start()
        engine.record_answer("B")
        engine.next_question()
        engine.submit()

        result = engine.results()
        q1, q2 = result.questions
        assert q1.is_correct and q1.answer_display == "B"
        assert not q2.is_correct
        assert q2.answer is None
        assert q2.answer_display == NO_ANSWER
        assert q2.correct_answer == "False"
        assert q2.explanation == "It is not"
        assert result.percentage == 67

    def test_results_before_submit_are_rejected(self, engine):
        engine.start()
        with pytest.raises(QuizStateError):
            engine.results()


class TestTimer:

    def test_expiry_auto_submits(self, completed):
        engine = timed_engine(completed, minutes=1)
        engine.start()

        for _ in range(59):
            engine.tick()
        assert engine.state is QuizState.IN_PROGRESS
        assert engine.time_remaining == 1

        engine.tick()
        assert engine.state is QuizState.SUBMITTED
        assert engine.time_remaining == 0
        assert len(completed) == 1
        assert completed[0].score == 0

    def test_no_ticks_after_expiry(self, completed):
        engine = timed_engine(completed, minutes=1)
        engine.start()
        for _ in range(120):
            engine.tick()
        assert len(completed) == 1

    def test_expiry_keeps_recorded_answers(self, completed):
        engine = timed_engine(completed, minutes=1)
        engine.start()
        engine.record_answer("B")
        for _ in range(60):
            engine.tick()
        assert completed[0].score == 10
        assert completed[0].answers == {"Q1": "B"}

    def test_manual_submit_stops_timer(self, completed):
        engine = timed_engine(completed, minutes=1)
        engine.start()
        engine.tick()
        engine.next_question()
        engine.submit()
        for _ in range(60):
            engine.tick()
        assert engine.time_remaining == 59
        assert len(completed) == 1

    def test_timer_runs_on_event_loop(self, completed):
        async def scenario():
            engine = timed_engine(completed, minutes=1, tick_interval=0.001)
            engine.start()
            for _ in range(400):
                if engine.state is QuizState.SUBMITTED:
                    break
                await asyncio.sleep(0.01)
            # Give a stray callback the chance to fire
            await asyncio.sleep(0.05)
            return engine

        engine = asyncio.run(scenario())
        assert engine.state is QuizState.SUBMITTED
        assert len(completed) == 1

    def test_close_cancels_scheduled_timer(self, completed):
        async def scenario():
            engine = timed_engine(completed, minutes=1, tick_interval=0.001)
            engine.start()
            engine.close()
            await asyncio.sleep(0.2)
            return engine

        engine = asyncio.run(scenario())
        assert engine.state is QuizState.IN_PROGRESS
        assert completed == []


class TestRetake:

    def test_retake_starts_fresh_attempt(self, engine, completed):
        engine.start()
        engine.record_answer("B")
        engine.next_question()
        first = engine.submit()

        engine.retake()
        assert engine.state is QuizState.IN_PROGRESS
        assert engine.current_index == 0
        assert engine.answers == {}
        assert engine.attempt is None

        engine.next_question()
        second = engine.submit()
        assert second.id != first.id
        assert second.score == 0
        assert first.score == 10
        assert len(completed) == 2

    def test_retake_rearms_timer(self, completed):
        engine = timed_engine(completed, minutes=1)
        engine.start()
        for _ in range(60):
            engine.tick()
        engine.retake()
        assert engine.time_remaining == 60

    def test_retake_before_submit_is_rejected(self, engine):
        engine.start()
        with pytest.raises(QuizStateError):
            engine.retake()
