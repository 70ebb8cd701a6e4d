import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Union

from pydantic import ValidationError

from coursequiz.core.exceptions import CatalogError
from coursequiz.schemas.quiz import Quiz

logger = logging.getLogger(__name__)


class QuizCatalogLoader(Protocol):
    def load_quiz_catalog(self) -> List[Quiz]:
        ...


def parse_quizzes(raw_quizzes: Iterable[dict]) -> List[Quiz]:
    """
    Validate raw quiz definitions.

    A quiz with a malformed question (bad answer key, non-positive points,
    duplicate ids) rejects the whole catalog instead of being mis-scored later.
    """
    quizzes: List[Quiz] = []
    seen = set()
    for index, raw in enumerate(raw_quizzes):
        quiz_id = raw.get("id", f"#{index}") if isinstance(raw, dict) else f"#{index}"
        try:
            quiz = Quiz.model_validate(raw)
        except ValidationError as e:
            raise CatalogError(f"Quiz {quiz_id!r} is invalid: {e}") from e
        if quiz.id in seen:
            raise CatalogError(f"Duplicate quiz id {quiz.id!r} in catalog")
        seen.add(quiz.id)
        quizzes.append(quiz)
    return quizzes


class JsonQuizCatalogLoader:
    """Loads ``{"quizzes": [...]}`` (or a bare list) from a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load_quiz_catalog(self) -> List[Quiz]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CatalogError(f"Quiz catalog not found: {self.path}") from e
        except json.JSONDecodeError as e:
            raise CatalogError(f"Quiz catalog {self.path} is not valid JSON: {e}") from e

        raw_quizzes = data.get("quizzes", []) if isinstance(data, dict) else data
        if not isinstance(raw_quizzes, list):
            raise CatalogError(f"Quiz catalog {self.path} must hold a list of quizzes")

        quizzes = parse_quizzes(raw_quizzes)
        logger.info("Loaded %d quizzes from %s", len(quizzes), self.path)
        return quizzes


class StaticQuizCatalogLoader:
    def __init__(self, quizzes: Iterable[Union[Quiz, dict]]):
        self._quizzes = list(quizzes)

    def load_quiz_catalog(self) -> List[Quiz]:
        return parse_quizzes(q.model_dump() if isinstance(q, Quiz) else q for q in self._quizzes)


class QuizCatalog:
    """Read-only view over the quizzes a loader produced. Loaded once."""

    def __init__(self, quizzes: Iterable[Quiz]):
        self._quizzes = tuple(quizzes)
        self._by_id: Dict[str, Quiz] = {q.id: q for q in self._quizzes}

    @classmethod
    def load(cls, loader: QuizCatalogLoader) -> "QuizCatalog":
        return cls(loader.load_quiz_catalog())

    def __len__(self) -> int:
        return len(self._quizzes)

    def all(self) -> List[Quiz]:
        return list(self._quizzes)

    def get(self, quiz_id: str) -> Optional[Quiz]:
        return self._by_id.get(quiz_id)

    def list_for_module(self, module_id: str) -> List[Quiz]:
        return [q for q in self._quizzes if q.module_id == module_id]

    def for_module(self, module_id: Optional[str]) -> Optional[Quiz]:
        if module_id is None:
            return None
        matches = self.list_for_module(module_id)
        return matches[0] if matches else None
