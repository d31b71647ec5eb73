"""Process-wide logging setup."""

import logging

from stackit.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once at process startup.

    Args:
        level: Level name overriding ``LOG_LEVEL`` (e.g. ``"DEBUG"``).
    """
    resolved = (level or settings.log_level).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("stackit").setLevel(resolved)
    if not settings.sql_debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
