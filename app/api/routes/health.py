from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.generation.errors import QuizGenerationError
from app.generation.gemini import GeminiQuizModel

router = APIRouter(tags=["health"])
logger = structlog.get_logger(__name__)


def _ok_check(extra: dict[str, Any] | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"status": "ok"}
    if extra:
        payload.update(extra)
    return payload


def _failed_check(error: str) -> dict[str, str]:
    return {"status": "failed", "error": error}


def _check_model_config() -> dict[str, Any]:
    settings = get_settings()
    if not settings.google_api_key:
        return _failed_check("model_api_key_missing")
    return _ok_check({"model": settings.gemini_model})


async def _ping_model() -> dict[str, Any]:
    settings = get_settings()
    try:
        model = GeminiQuizModel(
            api_key=settings.google_api_key,
            model_name=settings.gemini_model,
            timeout_seconds=settings.generation_timeout_seconds,
        )
        text = await model.ping()
    except QuizGenerationError as exc:
        logger.warning("model_health_check_failed", error_code=exc.code)
        return _failed_check("model_unavailable")
    return _ok_check({"text": text})


@router.get("/live")
async def live() -> dict[str, str]:
    return {"status": "live"}


@router.get("/health")
async def health() -> JSONResponse:
    checks = {"model": _check_model_config()}
    is_healthy = all(check.get("status") == "ok" for check in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if is_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if is_healthy else "degraded",
            "checks": checks,
        },
    )


@router.get("/health/model")
async def health_model() -> JSONResponse:
    check = await _ping_model()
    return JSONResponse(
        status_code=(
            status.HTTP_200_OK if check["status"] == "ok" else status.HTTP_503_SERVICE_UNAVAILABLE
        ),
        content=check,
    )
