"""SQLAlchemy models for the students store."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, String

from .session import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Student(Base):
    __tablename__ = "students"

    id = Column(String(36), primary_key=True, default=_new_id)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    program = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Student id={self.id!r}>"
