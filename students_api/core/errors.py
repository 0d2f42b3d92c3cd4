"""
Centralized error handlers for FastAPI.

Maps student errors to HTTP responses. No stack traces or internal details
are exposed to clients.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from students_api.domain.students import (
    InvalidStudentError,
    StudentConflictError,
    StudentError,
    StudentNotFoundError,
)

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    body: dict[str, str] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register the student error handlers on the application."""

    @app.exception_handler(InvalidStudentError)
    async def handle_invalid(_request: Request, exc: InvalidStudentError) -> JSONResponse:
        logger.info("Bad request: %s", exc.message)
        return _error_response(status.HTTP_400_BAD_REQUEST, "bad_request", exc.message)

    @app.exception_handler(StudentNotFoundError)
    async def handle_not_found(_request: Request, exc: StudentNotFoundError) -> JSONResponse:
        logger.warning("Student not found: %s", exc.student_id)
        return _error_response(status.HTTP_404_NOT_FOUND, "not_found", "Student not found")

    @app.exception_handler(StudentConflictError)
    async def handle_conflict(_request: Request, exc: StudentConflictError) -> JSONResponse:
        logger.error("Write conflict on student %s", exc.student_id)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "conflict", "The record could not be saved")

    @app.exception_handler(StudentError)
    async def handle_student_error(_request: Request, exc: StudentError) -> JSONResponse:
        logger.error("Unhandled student error: %s", exc.message)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Internal server error")

    @app.exception_handler(SQLAlchemyError)
    async def handle_database(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Database error: %s", type(exc).__name__)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Internal server error")
