from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from students_api.domain.students import (
    InvalidStudentError,
    StudentFields,
    parse_student_fields,
    parse_student_id,
    serialize_student,
)
from students_api.repositories.sql_repository import StudentRepository

router = APIRouter(prefix="/api/students", tags=["students"])

_SAMPLE_BODY = """
Sample request:

    {
       "firstName": "Peter",
       "lastName": "Hằng",
       "program": "ICT"
    }
"""

_BODY_SCHEMA = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": StudentFields.model_json_schema(by_alias=True)}},
    }
}

_ERRORS = {
    400: {"description": "Malformed id or body"},
    404: {"description": "Student not found"},
    500: {"description": "Internal server error"},
}


def _get_repository(request: Request) -> StudentRepository:
    repo = getattr(getattr(request.app, "state", None), "student_repository", None)
    if not repo:
        raise RuntimeError("StudentRepository is not configured")
    return repo


async def _read_fields(request: Request) -> StudentFields:
    raw = await request.body()
    try:
        payload = json.loads(raw or b"null")
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidStudentError("Request body is not valid JSON") from exc
    return parse_student_fields(payload)


@router.get(
    "",
    summary="List all students",
    responses={500: _ERRORS[500]},
)
def list_students(repo: StudentRepository = Depends(_get_repository)):
    return [serialize_student(entity) for entity in repo.list_students()]


@router.get(
    "/{student_id}",
    name="get_student",
    summary="Fetch a student by id",
    responses=_ERRORS,
)
def get_student(student_id: str, repo: StudentRepository = Depends(_get_repository)):
    entity = repo.get_student(parse_student_id(student_id))
    return serialize_student(entity)


@router.put(
    "/{student_id}",
    summary="Update a student",
    description="Replaces first name, last name and program.\n" + _SAMPLE_BODY,
    responses=_ERRORS,
    openapi_extra=_BODY_SCHEMA,
)
def update_student(
    student_id: str,
    fields: StudentFields = Depends(_read_fields),
    repo: StudentRepository = Depends(_get_repository),
):
    entity = repo.update_student(parse_student_id(student_id), fields)
    return serialize_student(entity)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a student",
    description="The id is assigned by the server.\n" + _SAMPLE_BODY,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
    openapi_extra=_BODY_SCHEMA,
)
def create_student(
    request: Request,
    fields: StudentFields = Depends(_read_fields),
    repo: StudentRepository = Depends(_get_repository),
):
    entity = repo.create_student(fields)
    location = str(request.url_for("get_student", student_id=entity.id))
    return JSONResponse(
        serialize_student(entity),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": location},
    )


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Delete a student",
    responses=_ERRORS,
)
def delete_student(student_id: str, repo: StudentRepository = Depends(_get_repository)):
    repo.delete_student(parse_student_id(student_id))
    return Response(status_code=status.HTTP_202_ACCEPTED)
