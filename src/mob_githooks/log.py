"""Per-invocation logging context for the hook (no global logging configuration)."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, TextIO

LOGGER_NAME = "mob_githooks"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"


class HookLog(logging.LoggerAdapter):
    """
    Logger adapter carrying structured fields, rendered as key=value after the message.

    Extra fields for a single call go in the `fields` keyword:
        log.debug("adding branch prefix", fields={"branch": "GH-123"})
    """

    def __init__(self, logger: logging.Logger, fields: dict[str, Any] | None = None) -> None:
        super().__init__(logger, dict(fields or {}))

    def bind(self, **fields: Any) -> HookLog:
        """New adapter on the same logger with fields merged in."""
        return HookLog(self.logger, {**self.extra, **fields})

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        fields = dict(self.extra)
        fields.update(kwargs.pop("fields", None) or {})
        if fields:
            msg = f"{msg} " + " ".join(_format_field(k, v) for k, v in fields.items())
        return msg, kwargs

    def close(self) -> None:
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)


def _format_field(key: str, value: Any) -> str:
    text = str(value)
    if not text or any(c.isspace() for c in text):
        return f"{key}={text!r}"
    return f"{key}={text}"


def new_logger(
    level: int = logging.ERROR,
    log_file: Path | None = None,
    *,
    stream: TextIO | None = None,
    fields: dict[str, Any] | None = None,
) -> HookLog:
    """
    Build a private logger writing to log_file (appending) or to stream (default stderr).
    The logger is not registered with logging.getLogger, so nothing leaks between invocations.
    """
    logger = logging.Logger(LOGGER_NAME, level=level)
    if log_file is not None:
        handler: logging.Handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    else:
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return HookLog(logger, fields)
