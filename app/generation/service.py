from __future__ import annotations

from collections.abc import AsyncGenerator, AsyncIterator
from dataclasses import dataclass
from time import monotonic
from typing import Any, Protocol

import structlog

from app.generation.errors import QuizGenerationError
from app.generation.gemini import GeminiQuizModel
from app.generation.prompts import build_system_prompt, build_user_prompt
from app.generation.streaming import stream_validated_questions
from app.generation.uploads import PdfUpload
from app.quiz.types import Question

logger = structlog.get_logger(__name__)


class QuizTextModel(Protocol):
    def stream_quiz_text(
        self,
        *,
        upload: PdfUpload,
        system_prompt: str,
        user_prompt: str,
    ) -> AsyncGenerator[str, None]: ...


@dataclass(slots=True, frozen=True)
class QuizGenerationRequest:
    upload: PdfUpload
    number_of_questions: int


class QuizGenerationService:
    def __init__(self, *, model: QuizTextModel, language: str) -> None:
        self._model = model
        self._language = language

    async def stream_questions(self, request: QuizGenerationRequest) -> AsyncIterator[Question]:
        started_at = monotonic()
        log = logger.bind(
            file_name=request.upload.name,
            file_size_bytes=request.upload.size_bytes,
            requested_count=request.number_of_questions,
        )
        log.info("quiz_generation_started")

        chunks = self._model.stream_quiz_text(
            upload=request.upload,
            system_prompt=build_system_prompt(
                number_of_questions=request.number_of_questions,
                language=self._language,
            ),
            user_prompt=build_user_prompt(
                number_of_questions=request.number_of_questions,
                language=self._language,
            ),
        )
        received = 0
        try:
            async for question in stream_validated_questions(
                chunks,
                expected_count=request.number_of_questions,
            ):
                received += 1
                log.info("quiz_generation_item_received", received_count=received)
                yield question
        except QuizGenerationError as exc:
            log.warning(
                "quiz_generation_failed",
                error_code=exc.code,
                error=str(exc),
                received_count=received,
            )
            raise

        log.info(
            "quiz_generation_finished",
            received_count=received,
            duration_ms=int((monotonic() - started_at) * 1000),
        )

    async def generate_quiz(self, request: QuizGenerationRequest) -> list[Question]:
        return [question async for question in self.stream_questions(request)]


def build_generation_service(settings: Any) -> QuizGenerationService:
    model = GeminiQuizModel(
        api_key=settings.google_api_key,
        model_name=settings.gemini_model,
        timeout_seconds=settings.generation_timeout_seconds,
    )
    return QuizGenerationService(model=model, language=settings.quiz_language)
