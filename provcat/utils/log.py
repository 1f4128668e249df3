"""Logging for provcat.

All modules share the ``provcat`` stdlib logger through ``get_logger()``.
Records go to stderr at ``PROVCAT_LOG_LEVEL`` (default WARNING); ``init_logger``
can add a debug-level file log whose lines carry the record's ``extra`` fields
as a JSON suffix.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

LOGGER_NAME = "provcat"
LOG_LEVEL_ENV = "PROVCAT_LOG_LEVEL"

# Attributes every LogRecord has; anything else arrived through ``extra=``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord(LOGGER_NAME, logging.DEBUG, __file__, 0, "", (), None))
) | {"message", "asctime"}


def _console_level() -> int:
    level = logging.getLevelName(os.getenv(LOG_LEVEL_ENV, "WARNING").strip().upper())
    return level if isinstance(level, int) else logging.WARNING


class StructuredFormatter(logging.Formatter):
    """``<UTC timestamp> [LEVEL] message | {"extra": ...}``"""

    def __init__(self) -> None:
        super().__init__("%(asctime)s [%(levelname)s] %(message)s")

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if not context:
            return line
        return f"{line} | {json.dumps(context, sort_keys=True, default=str)}"


class ProvcatLogger:
    """Thin wrapper over the ``provcat`` logger that owns its handlers."""

    def __init__(self, name: str = LOGGER_NAME):
        self.logger = logging.getLogger(name)
        # Handlers filter by level; the file log wants debug records.
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        self._console = next(
            (h for h in self.logger.handlers if getattr(h, "_provcat_console", False)),
            None,
        )
        if self._console is None:
            self._console = logging.StreamHandler(sys.stderr)
            self._console._provcat_console = True  # type: ignore[attr-defined]
            self._console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
            self.logger.addHandler(self._console)
        self._console.setLevel(_console_level())

        self._file_handler: Optional[logging.FileHandler] = None

    @property
    def log_file(self) -> Optional[Path]:
        if self._file_handler is None:
            return None
        return Path(self._file_handler.baseFilename)

    def attach_file_handler(self, log_file: Path) -> Path:
        """Send debug records to ``log_file``, replacing any previous file log."""
        log_file = log_file.resolve()
        if self.log_file == log_file:
            return log_file

        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(StructuredFormatter())

        if self._file_handler is not None:
            self.logger.removeHandler(self._file_handler)
            self._file_handler.close()
        self.logger.addHandler(handler)
        self._file_handler = handler
        return log_file

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.warning(message, *args, **kwargs)


_logger: Optional[ProvcatLogger] = None


def get_logger() -> ProvcatLogger:
    """Return the shared provcat logger."""
    global _logger
    if _logger is None:
        _logger = ProvcatLogger()
    return _logger


def init_logger(log_file: Optional[Path] = None) -> ProvcatLogger:
    """Re-read the console level from the environment and optionally add a file log."""
    logger = get_logger()
    logger._console.setLevel(_console_level())
    if log_file is not None:
        path = logger.attach_file_handler(log_file)
        logger.debug("[logging] File logging enabled", extra={"path": str(path)})
    return logger
