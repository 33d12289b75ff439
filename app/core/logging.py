import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None) -> None:
    """Attach a console handler to the ``app`` logger. Safe to call more than once."""
    logger = logging.getLogger("app")
    logger.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO))

    # Avoid adding handlers multiple times
    if logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(handler)
