"""Database helpers (engine/session export)."""

from .session import Base, build_engine, build_sessionmaker, get_engine, get_session, get_sessionmaker

__all__ = ["Base", "build_engine", "build_sessionmaker", "get_engine", "get_session", "get_sessionmaker"]
