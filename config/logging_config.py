"""Loguru-based logging configuration.

Logs go to stderr, or to a file as JSON lines when a log file is set.
Stdlib logging is intercepted and funneled to loguru.
The channel bound by the dispatcher through contextualize() is promoted
to a top-level key in JSON records.
"""

import json
import logging
import sys
from typing import Optional

from loguru import logger


_configured = False

# Context keys we promote to top-level JSON
_CONTEXT_KEYS = ("channel",)


def _serialize_with_context(record) -> str:
    """Format record as JSON with context vars at top level.
    Returns a format template; we inject _json into record for output.
    """
    extra = record.get("extra", {})
    out = {
        "time": str(record["time"]),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["name"],
        "function": record["function"],
        "line": record["line"],
    }
    for key in _CONTEXT_KEYS:
        if key in extra and extra[key] is not None:
            out[key] = extra[key]
    record["extra"]["_json"] = json.dumps(out, default=str)
    return "{extra[_json]}\n"


class InterceptHandler(logging.Handler):
    """Redirect stdlib logging to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(
    log_file: Optional[str] = None, level: str = "INFO", *, force: bool = False
) -> None:
    """Configure loguru sinks and intercept stdlib logging.

    Idempotent: skips if already configured.
    Use force=True to reconfigure (e.g. in tests with a different log path).
    """
    global _configured
    if _configured and not force:
        return
    _configured = True

    # Remove default loguru handler
    logger.remove()

    if log_file:
        # Truncate log file on fresh start
        open(log_file, "w", encoding="utf-8").close()
        logger.add(
            log_file,
            level=level,
            format=_serialize_with_context,
            encoding="utf-8",
            mode="a",
        )
    else:
        logger.add(sys.stderr, level=level)

    intercept = InterceptHandler()
    logging.root.handlers = [intercept]
    logging.root.setLevel(logging.DEBUG)
