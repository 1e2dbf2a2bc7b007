from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator

import structlog
from fastapi import APIRouter, HTTPException, status
from fastapi.responses import StreamingResponse

from app.core.config import get_settings
from app.generation.errors import (
    FileTooLargeError,
    IncompleteQuizError,
    InvalidFileDataError,
    ModelCallError,
    ModelNotConfiguredError,
    NoFilesProvidedError,
    QuizGenerationError,
    UnsupportedFileTypeError,
)
from app.generation.service import (
    QuizGenerationRequest,
    QuizGenerationService,
    build_generation_service,
)
from app.generation.uploads import select_pdf_upload
from app.quiz.titles import build_quiz_title
from app.quiz.types import Question

from .generate_quiz_models import GeneratedQuizResponse, GenerateQuizRequest

router = APIRouter(prefix="/api", tags=["generation"])
logger = structlog.get_logger(__name__)

NDJSON_MEDIA_TYPE = "application/x-ndjson"
MODEL_CALL_FAILED_MESSAGE = "Quiz generation failed. Please try again."

# checked in order, subclasses first
GENERATION_ERROR_STATUSES: tuple[tuple[type[QuizGenerationError], int], ...] = (
    (NoFilesProvidedError, status.HTTP_400_BAD_REQUEST),
    (InvalidFileDataError, status.HTTP_400_BAD_REQUEST),
    (UnsupportedFileTypeError, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE),
    (FileTooLargeError, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE),
    (ModelNotConfiguredError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (QuizGenerationError, status.HTTP_502_BAD_GATEWAY),
)


def _public_message(exc: QuizGenerationError) -> str:
    if isinstance(exc, ModelCallError):
        return MODEL_CALL_FAILED_MESSAGE
    return str(exc)


def _http_error(exc: QuizGenerationError) -> HTTPException:
    status_code = next(
        code for error_cls, code in GENERATION_ERROR_STATUSES if isinstance(exc, error_cls)
    )
    return HTTPException(
        status_code=status_code,
        detail={"code": exc.code, "message": _public_message(exc)},
    )


def _get_generation_service() -> QuizGenerationService:
    return build_generation_service(get_settings())


async def _prepare_generation(
    payload: GenerateQuizRequest,
) -> tuple[QuizGenerationRequest, QuizGenerationService]:
    settings = get_settings()
    number_of_questions = payload.number_of_questions
    if number_of_questions is None:
        number_of_questions = settings.default_question_count
    if not 1 <= number_of_questions <= settings.max_question_count:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "code": "E_INVALID_QUESTION_COUNT",
                "message": (
                    f"numberOfQuestions must be between 1 and {settings.max_question_count}"
                ),
            },
        )

    try:
        # base64 decoding of large uploads stays off the event loop
        upload = await asyncio.to_thread(
            select_pdf_upload,
            payload.files,
            max_bytes=settings.max_upload_bytes,
        )
        service = _get_generation_service()
    except QuizGenerationError as exc:
        logger.warning("quiz_generation_rejected", error_code=exc.code, error=str(exc))
        raise _http_error(exc) from exc

    return QuizGenerationRequest(upload=upload, number_of_questions=number_of_questions), service


def _encode_line(payload: object) -> str:
    return json.dumps(payload, ensure_ascii=False) + "\n"


async def _question_lines(
    first: Question,
    remaining: AsyncIterator[Question],
) -> AsyncIterator[str]:
    yield _encode_line(first.model_dump(mode="json"))
    try:
        async for question in remaining:
            yield _encode_line(question.model_dump(mode="json"))
    except QuizGenerationError as exc:
        yield _encode_line({"error": {"code": exc.code, "message": _public_message(exc)}})


@router.post("/generate-quiz")
async def generate_quiz(payload: GenerateQuizRequest) -> StreamingResponse:
    request, service = await _prepare_generation(payload)
    questions = service.stream_questions(request)

    try:
        first = await anext(questions)
    except StopAsyncIteration as exc:
        raise _http_error(IncompleteQuizError("model returned no questions")) from exc
    except QuizGenerationError as exc:
        raise _http_error(exc) from exc

    return StreamingResponse(_question_lines(first, questions), media_type=NDJSON_MEDIA_TYPE)


@router.post("/generate-quiz-simple", response_model=GeneratedQuizResponse)
async def generate_quiz_simple(payload: GenerateQuizRequest) -> GeneratedQuizResponse:
    request, service = await _prepare_generation(payload)
    try:
        questions = await service.generate_quiz(request)
    except QuizGenerationError as exc:
        raise _http_error(exc) from exc

    return GeneratedQuizResponse(
        title=build_quiz_title(request.upload.name),
        questions=questions,
    )
