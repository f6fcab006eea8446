"""
Logging configuration.

Loggers are plain standard library loggers under the ``glossa`` namespace.
Structured context is passed through ``extra={...}`` and rendered by the
formatter when present.
"""

import logging
import sys

_ROOT_LOGGER = "glossa"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s%(context)s"

# Attributes present on every LogRecord; anything else came from ``extra``.
_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "message",
    "asctime",
    "context",
}


class ContextFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        extras = {k: v for k, v in record.__dict__.items() if k not in _RESERVED}
        record.context = (
            " " + " ".join(f"{k}={v!r}" for k, v in sorted(extras.items())) if extras else ""
        )
        return super().format(record)


def init_logging(level: str | int | None = None) -> logging.Logger:
    """
    Configure the ``glossa`` logger hierarchy.

    Safe to call more than once; the handler is installed only once.

    Args:
        level: Log level name or number. Defaults to ``settings.log_level``.

    Returns:
        The package root logger.
    """
    if level is None:
        from .config import settings

        level = settings.log_level

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    if not any(getattr(h, "_glossa", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ContextFormatter(_FORMAT))
        handler._glossa = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the ``glossa`` namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name == _ROOT_LOGGER or name.startswith(f"{_ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")
