from __future__ import annotations

import logging

# Root of this package, e.g. "src.campus_attendance.campus_attendance".
PACKAGE_LOGGER = (__package__ or __name__).rsplit(".", 1)[0]
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Safe to call more than once (app factory runs per test).
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if not any(getattr(h, "_campus_attendance", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._campus_attendance = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
