import asyncio
import logging
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from coursequiz.crud import crud_attempt
from coursequiz.schemas.quiz import QuizAttempt
from coursequiz.schemas.quiz_attempt import QuizAttemptCreate
from coursequiz.services.catalog import QuizCatalog

logger = logging.getLogger(__name__)


class AttemptRecorder:
    """
    Completion callback that persists finished attempts for one user.

    Pass an instance as ``on_complete`` to a ``QuizEngine``; every sealed
    attempt is upserted exactly like ``POST /quiz-attempts`` would.

    The SQLAlchemy write blocks. When the callback fires on a running event
    loop (a timer expiry, or a submit from a coroutine) the write is handed
    to the loop's default executor with ``loop.run_in_executor`` and the
    future is kept in ``pending``; await ``drain()`` before shutting down.
    Without a running loop the write happens inline.
    """

    def __init__(self, session_factory: Callable[[], Session], user_id: UUID, catalog: Optional[QuizCatalog] = None):
        self.session_factory = session_factory
        self.user_id = user_id
        self.catalog = catalog
        self.pending: List[asyncio.Future] = []

    def __call__(self, attempt: QuizAttempt) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.record(attempt)
            return

        logger.debug("Recording attempt %s in a worker thread", attempt.id)
        future = loop.run_in_executor(None, self.record, attempt)
        self.pending.append(future)

    def record(self, attempt: QuizAttempt) -> None:
        quiz = self.catalog.get(attempt.quiz_id) if self.catalog else None
        db = self.session_factory()
        try:
            crud_attempt.upsert_quiz_attempt(
                db,
                self.user_id,
                QuizAttemptCreate.from_attempt(attempt),
                module_id=quiz.module_id if quiz else None,
            )
        finally:
            db.close()

    async def drain(self) -> None:
        """Wait for writes handed to worker threads; their errors propagate."""
        pending, self.pending = self.pending, []
        if pending:
            await asyncio.gather(*pending)
