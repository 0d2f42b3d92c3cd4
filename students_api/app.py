"""FastAPI application assembly for the Students API."""
from __future__ import annotations

import logging
import os
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from students_api.core.config import Settings, get_settings
from students_api.core.errors import register_error_handlers
from students_api.core.logging_config import setup_logging
from students_api.db.create_tables import create_all
from students_api.db.session import build_engine, build_sessionmaker
from students_api.repositories.sql_repository import StudentRepository
from students_api.routers import students as students_router

logger = logging.getLogger(__name__)

DEV_ORIGINS = {
    "http://localhost:8000",
    "http://127.0.0.1:8000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers for a JSON-only API."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[StudentRepository] = None,
) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory``)."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="Students API", version="1.0.0")

    allowed_cors = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed_cors.update(DEV_ORIGINS)
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["Location"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    register_error_handlers(app)

    if repository is None:
        engine = build_engine(settings.database_url)
        if settings.create_tables_on_startup:
            create_all(engine)
        app.state.engine = engine
        repository = StudentRepository(session_factory=build_sessionmaker(engine))
    app.state.student_repository = repository

    app.include_router(students_router.router)
    logger.info("Students API ready (env=%s)", settings.app_env)
    return app


if __name__ == "__main__":
    uvicorn.run(
        create_app(),
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
