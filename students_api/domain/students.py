"""Student payloads, identifier parsing and the error taxonomy."""
from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class StudentError(Exception):
    """Base exception for the students workflow."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidStudentError(StudentError):
    """Raised when a body or identifier cannot be accepted."""


class StudentNotFoundError(StudentError):
    """Raised when no record matches the identifier."""

    def __init__(self, student_id: str) -> None:
        super().__init__(f"Student {student_id} not found")
        self.student_id = student_id


class StudentConflictError(StudentError):
    """Raised when the store reports a write conflict on an existing record."""

    def __init__(self, student_id: str) -> None:
        super().__init__(f"Write conflict on student {student_id}")
        self.student_id = student_id


class StudentFields(BaseModel):
    """Writable attributes accepted on create and update.

    ``id`` is server-assigned; if a client sends one it is ignored.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="ignore")

    first_name: str = Field(..., alias="firstName", min_length=1, max_length=255)
    last_name: str = Field(..., alias="lastName", min_length=1, max_length=255)
    program: str = Field(..., min_length=1, max_length=255)


class StudentRead(BaseModel):
    """Wire representation of a stored student."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    program: str


def parse_student_id(value: str | None) -> str:
    """Return the canonical form of a student identifier.

    Identifiers are UUIDs; anything else is rejected before the store is hit.
    """
    try:
        return str(uuid.UUID((value or "").strip()))
    except ValueError as exc:
        raise InvalidStudentError(f"Malformed student id: {value!r}") from exc


def parse_student_fields(payload: Any) -> StudentFields:
    if not isinstance(payload, dict):
        raise InvalidStudentError("Request body must be a JSON object")
    try:
        return StudentFields.model_validate(payload)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise InvalidStudentError("Invalid or missing fields: " + ", ".join(fields)) from exc


def serialize_student(entity: Any) -> dict:
    read = StudentRead(
        id=entity.id,
        first_name=entity.first_name,
        last_name=entity.last_name,
        program=entity.program,
    )
    return read.model_dump(by_alias=True)
