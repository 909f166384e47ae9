from __future__ import annotations
import logging
import os

_DEFAULT_MAX_DEPTH = 1000
_DEFAULT_LOG_LEVEL = 'WARNING'


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{var} must be positive, got {value}")
    return value


def get_max_depth() -> int:
    """Deepest tree nesting the resolver will walk before giving up."""
    return int_from_env('QUASI_MAX_DEPTH', _DEFAULT_MAX_DEPTH)


def get_log_level() -> int:
    raw = os.environ.get('QUASI_LOG_LEVEL', _DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(raw)
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(handler: logging.Handler | None = None) -> logging.Logger:
    """Apply QUASI_LOG_LEVEL to the package logger, optionally attaching a handler."""
    logger = logging.getLogger('quasi')
    logger.setLevel(get_log_level())
    if handler is not None:
        logger.addHandler(handler)
    return logger
