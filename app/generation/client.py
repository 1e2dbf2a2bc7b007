from __future__ import annotations

import base64
import json
from collections.abc import AsyncIterable, AsyncIterator
from pathlib import Path
from typing import Any

import httpx
import structlog

from app.generation.errors import (
    GenerationTransportError,
    InvalidModelOutputError,
    QuizGenerationError,
    error_from_code,
)
from app.generation.progress import QuizGenerationProgress
from app.generation.streaming import stream_quiz_snapshots, validate_question
from app.generation.uploads import PDF_MIME_TYPE
from app.quiz.types import Question

logger = structlog.get_logger(__name__)

QUIZ_STREAM_PATH = "/api/generate-quiz"


def encode_pdf_file(path: str | Path) -> dict[str, str]:
    file_path = Path(path)
    encoded = base64.b64encode(file_path.read_bytes()).decode("ascii")
    return {
        "name": file_path.name,
        "type": PDF_MIME_TYPE,
        "data": f"data:{PDF_MIME_TYPE};base64,{encoded}",
    }


def _error_from_response(status_code: int, body: bytes) -> QuizGenerationError:
    code: str | None = None
    message = body.decode("utf-8", errors="replace").strip() or f"HTTP {status_code}"
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        detail = payload.get("detail", payload.get("error"))
        if isinstance(detail, dict):
            code = detail.get("code")
            message = str(detail.get("message") or code or message)
        elif isinstance(detail, str):
            message = detail
    return error_from_code(code, message)


async def iter_streamed_questions(
    client: httpx.AsyncClient,
    *,
    files: list[dict[str, Any]],
    number_of_questions: int,
) -> AsyncIterator[Question]:
    payload = {"files": files, "numberOfQuestions": number_of_questions}
    try:
        async with client.stream("POST", QUIZ_STREAM_PATH, json=payload) as response:
            if response.status_code >= 400:
                raise _error_from_response(response.status_code, await response.aread())

            position = 0
            async for line in response.aiter_lines():
                if not line.strip():
                    continue
                try:
                    item = json.loads(line)
                except ValueError as exc:
                    raise InvalidModelOutputError("response stream contained invalid JSON") from exc
                if isinstance(item, dict) and "error" in item:
                    error = item["error"] if isinstance(item["error"], dict) else {}
                    raise error_from_code(
                        error.get("code"),
                        str(error.get("message") or "quiz generation failed"),
                    )
                yield validate_question(item, position=position)
                position += 1
    except httpx.HTTPError as exc:
        raise GenerationTransportError(str(exc)) from exc


async def _close_stream(*iterators: object) -> None:
    for iterator in iterators:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


async def load_quiz(
    progress: QuizGenerationProgress,
    questions: AsyncIterable[Question],
    *,
    requested_count: int,
) -> tuple[Question, ...]:
    request_id = progress.start(requested_count)
    snapshots = stream_quiz_snapshots(questions)
    try:
        async for snapshot in snapshots:
            if not progress.accept(snapshot, request_id=request_id):
                logger.info("quiz_generation_result_discarded", request_id=request_id)
                return ()
            if progress.is_quiz_ready:
                return progress.questions
    except QuizGenerationError as exc:
        progress.fail(exc, request_id=request_id)
        return ()
    finally:
        await _close_stream(snapshots, questions)

    progress.finish(request_id=request_id)
    return progress.questions
