"""Process-wide logging configuration."""

import logging

from courier_engine.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once, honouring LOG_LEVEL / DEBUG."""
    resolved = "DEBUG" if settings.debug else (level or settings.log_level)
    logging.basicConfig(level=resolved.upper(), format=LOG_FORMAT)
    # SQL echo is far too chatty at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
