"""Create the students schema on the configured database.

    python -m students_api.db.create_tables
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from students_api.core.config import get_settings
from students_api.core.logging_config import setup_logging

from .session import Base, get_engine
from . import models  # noqa: F401  # registers Student on Base.metadata

logger = logging.getLogger(__name__)


def create_all(engine: Optional[Engine] = None) -> None:
    """Create missing tables; ``engine`` defaults to the one named by DATABASE_URL."""
    bind = engine or get_engine()
    Base.metadata.create_all(bind=bind)
    logger.debug("Schema ready on %s", bind.url.render_as_string(hide_password=True))


def main() -> None:
    setup_logging(get_settings().log_level)
    try:
        create_all()
    except SQLAlchemyError as exc:
        logger.error("Failed to create tables: %s", exc)
        raise SystemExit(1) from exc
    logger.info("Database tables created successfully.")


if __name__ == "__main__":
    main()
