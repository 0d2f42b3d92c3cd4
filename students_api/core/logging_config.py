"""
Basic logging configuration for the application.

``setup_logging`` attaches a console handler to the root logger the first
time it is called. Later calls only adjust the level, so building several
apps in one process (tests, reloaders) does not duplicate output.
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single stream handler."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root.addHandler(handler)

    # uvicorn already logs each request line
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
