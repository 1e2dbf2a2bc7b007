from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

import structlog

from app.generation.errors import IncompleteQuizError, QuizGenerationError
from app.quiz.types import Question

logger = structlog.get_logger(__name__)


class GenerationStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(slots=True)
class QuizGenerationProgress:
    """Loading state for one quiz generation.

    Partial results only drive the progress indicator. ``questions`` is set
    once, when the full requested count has arrived; anything delivered for
    an older or cancelled request is ignored.
    """

    status: GenerationStatus = GenerationStatus.IDLE
    requested_count: int = 0
    received: tuple[Question, ...] = ()
    questions: tuple[Question, ...] = ()
    error: QuizGenerationError | None = None
    _request_id: int = field(default=0, repr=False)

    @property
    def is_loading(self) -> bool:
        return self.status is GenerationStatus.LOADING

    @property
    def is_quiz_ready(self) -> bool:
        return self.status is GenerationStatus.READY

    @property
    def progress_percent(self) -> float:
        if self.requested_count <= 0:
            return 0.0
        return (len(self.received) / self.requested_count) * 100

    @property
    def status_text(self) -> str:
        if self.status is GenerationStatus.READY:
            return "Quiz ready"
        if self.status is GenerationStatus.FAILED and self.error is not None:
            return f"Failed to generate quiz: {self.error}"
        if not self.is_loading:
            return ""
        if not self.received:
            return "Analyzing PDF content"
        current = min(len(self.received) + 1, self.requested_count)
        return f"Generating question {current} of {self.requested_count}"

    def start(self, requested_count: int) -> int:
        if requested_count <= 0:
            raise ValueError("requested_count must be positive")
        self._request_id += 1
        self.status = GenerationStatus.LOADING
        self.requested_count = requested_count
        self.received = ()
        self.questions = ()
        self.error = None
        return self._request_id

    def accept(self, snapshot: Sequence[Question], *, request_id: int) -> bool:
        if not self._is_current(request_id):
            return False
        if len(snapshot) < len(self.received):
            raise ValueError("generation snapshots must only grow")

        self.received = tuple(snapshot)
        if len(self.received) >= self.requested_count:
            self.questions = self.received[: self.requested_count]
            self.status = GenerationStatus.READY
            logger.info(
                "quiz_generation_ready",
                request_id=request_id,
                question_count=len(self.questions),
            )
        return True

    def finish(self, *, request_id: int) -> None:
        if not self._is_current(request_id):
            return
        self.fail(
            IncompleteQuizError(
                f"received {len(self.received)} of {self.requested_count} requested questions"
            ),
            request_id=request_id,
        )

    def fail(self, error: QuizGenerationError, *, request_id: int) -> None:
        if not self._is_current(request_id):
            return
        logger.warning(
            "quiz_generation_failed",
            request_id=request_id,
            error_code=error.code,
            received_count=len(self.received),
            requested_count=self.requested_count,
        )
        self.status = GenerationStatus.FAILED
        self.received = ()
        self.questions = ()
        self.error = error

    def cancel(self) -> None:
        self._request_id += 1
        self.status = GenerationStatus.IDLE
        self.requested_count = 0
        self.received = ()
        self.questions = ()
        self.error = None

    def _is_current(self, request_id: int) -> bool:
        return request_id == self._request_id and self.status is GenerationStatus.LOADING
