"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from students_api.db.models import Student
from students_api.db.session import get_sessionmaker
from students_api.domain.students import (
    StudentConflictError,
    StudentFields,
    StudentNotFoundError,
)

logger = logging.getLogger(__name__)


class StudentRepository:
    """CRUD helpers wrapping the SQLAlchemy session.

    Each call opens its own session and commits before returning, so the
    returned entities are detached snapshots of the stored rows.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None) -> None:
        self._session_factory = session_factory or get_sessionmaker()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session: Session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    def list_students(self) -> list[Student]:
        with self._session() as session:
            return list(session.execute(select(Student)).scalars().all())

    def get_student(self, student_id: str) -> Student:
        with self._session() as session:
            entity = session.get(Student, student_id)
            if entity is None:
                raise StudentNotFoundError(student_id)
            return entity

    def student_exists(self, student_id: str) -> bool:
        with self._session() as session:
            stmt = select(Student.id).where(Student.id == student_id).limit(1)
            return session.execute(stmt).first() is not None

    def create_student(self, fields: StudentFields) -> Student:
        entity = Student(
            first_name=fields.first_name,
            last_name=fields.last_name,
            program=fields.program,
        )
        with self._session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
        logger.info("Created student %s", entity.id)
        return entity

    def update_student(self, student_id: str, fields: StudentFields) -> Student:
        with self._session() as session:
            entity = session.get(Student, student_id)
            if entity is None:
                raise StudentNotFoundError(student_id)
            entity.first_name = fields.first_name
            entity.last_name = fields.last_name
            entity.program = fields.program
            try:
                session.commit()
            except StaleDataError:
                session.rollback()
                # the row changed under us; tell a delete apart from a real conflict
                if not self.student_exists(student_id):
                    raise StudentNotFoundError(student_id)
                raise StudentConflictError(student_id)
            session.refresh(entity)
        logger.info("Updated student %s", student_id)
        return entity

    def delete_student(self, student_id: str) -> None:
        with self._session() as session:
            result = session.execute(delete(Student).where(Student.id == student_id))
            if result.rowcount == 0:
                session.rollback()
                raise StudentNotFoundError(student_id)
            session.commit()
        logger.info("Deleted student %s", student_id)
