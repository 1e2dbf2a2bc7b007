from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from typing import Any

import google.generativeai as genai
import structlog

from app.generation.errors import ModelCallError, ModelNotConfiguredError
from app.generation.uploads import PdfUpload

logger = structlog.get_logger(__name__)

PING_PROMPT = "Say hello"


def _chunk_text(chunk: Any) -> str:
    # Chunks without candidate parts (e.g. safety or finish markers) raise on .text
    try:
        return chunk.text or ""
    except ValueError:
        return ""


class GeminiQuizModel:
    def __init__(
        self,
        *,
        api_key: str,
        model_name: str,
        timeout_seconds: float,
    ) -> None:
        if not api_key:
            raise ModelNotConfiguredError("GOOGLE_GENERATIVE_AI_API_KEY is not configured")
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds

    async def stream_quiz_text(
        self,
        *,
        upload: PdfUpload,
        system_prompt: str,
        user_prompt: str,
    ) -> AsyncGenerator[str, None]:
        model = genai.GenerativeModel(self.model_name, system_instruction=system_prompt)
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout_seconds
        try:
            response = await model.generate_content_async(
                [
                    user_prompt,
                    {"mime_type": upload.mime_type, "data": upload.content},
                ],
                stream=True,
                generation_config=genai.GenerationConfig(
                    response_mime_type="application/json",
                ),
                request_options={"timeout": self.timeout_seconds},
            )
            async for chunk in response:
                if loop.time() > deadline:
                    raise ModelCallError(
                        f"model did not finish within {self.timeout_seconds:g} seconds"
                    )
                text = _chunk_text(chunk)
                if text:
                    yield text
        except ModelCallError:
            raise
        except Exception as exc:
            logger.warning(
                "gemini_stream_failed",
                model=self.model_name,
                error_type=type(exc).__name__,
            )
            raise ModelCallError(str(exc)) from exc

    async def ping(self) -> str:
        model = genai.GenerativeModel(self.model_name)
        try:
            response = await model.generate_content_async(
                PING_PROMPT,
                request_options={"timeout": min(self.timeout_seconds, 30.0)},
            )
        except Exception as exc:
            logger.warning(
                "gemini_ping_failed",
                model=self.model_name,
                error_type=type(exc).__name__,
            )
            raise ModelCallError(str(exc)) from exc
        return _chunk_text(response)
