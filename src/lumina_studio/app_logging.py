"""Logging configuration helpers."""

import logging

LOGGER_NAME = "lumina_studio"


class SessionContextFilter(logging.Filter):
    """Expose the ``session_id`` passed through ``extra`` to the formatter."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session = getattr(record, "session_id", "-")
        return True


def configure_logging(level: str = "INFO") -> None:
    """Send ``lumina_studio`` records to one stream, tagged with their session."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.addFilter(SessionContextFilter())
    handler.setFormatter(
        logging.Formatter("%(levelname)s: %(name)s: [%(session)s] %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
