from __future__ import annotations

from collections import OrderedDict
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from uuid import UUID, uuid4

import structlog

from app.core.config import get_settings
from app.quiz.errors import QuizSessionNotFoundError
from app.quiz.session import QuizSessionController
from app.quiz.types import Question

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class RegisteredQuiz:
    session_id: UUID
    title: str
    controller: QuizSessionController


class QuizSessionRegistry:
    """In-memory quiz sessions, one per caller, oldest evicted past ``max_active``."""

    def __init__(self, *, max_active: int) -> None:
        self._max_active = max(1, max_active)
        self._sessions: OrderedDict[UUID, RegisteredQuiz] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, questions: Sequence[Question], *, title: str) -> RegisteredQuiz:
        entry = RegisteredQuiz(
            session_id=uuid4(),
            title=title,
            controller=QuizSessionController(questions),
        )
        self._sessions[entry.session_id] = entry
        while len(self._sessions) > self._max_active:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("quiz_session_evicted", session_id=str(evicted_id))
        return entry

    def get(self, session_id: UUID) -> RegisteredQuiz:
        entry = self._sessions.get(session_id)
        if entry is None:
            raise QuizSessionNotFoundError(str(session_id))
        self._sessions.move_to_end(session_id)
        return entry

    def discard(self, session_id: UUID) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise QuizSessionNotFoundError(str(session_id))


@lru_cache(maxsize=1)
def get_quiz_registry() -> QuizSessionRegistry:
    return QuizSessionRegistry(max_active=get_settings().quiz_session_max_active)
