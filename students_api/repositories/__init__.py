"""
Persistence adapters.

Routers depend on the repository interface rather than touching SQLAlchemy
sessions directly.
"""

from .sql_repository import StudentRepository

__all__ = ["StudentRepository"]
