import uvicorn
from fastapi import FastAPI

from app.api.routes.generate_quiz import router as generate_quiz_router
from app.api.routes.health import router as health_router
from app.api.routes.quiz_sessions import router as quiz_sessions_router
from app.core.config import get_settings
from app.core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    docs_enabled = bool(getattr(settings, "enable_openapi_docs", True))

    app = FastAPI(
        title="PDF Quiz API",
        version="0.1.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.include_router(health_router)
    app.include_router(generate_quiz_router)
    app.include_router(quiz_sessions_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
