"""Execution logging.

The two execution events the router emits, plus ``configure_logging()``
for the CLI. Library code only ever logs through named loggers; handlers
and formatting are left to whoever runs the process.
"""

import json
import logging
import sys
from datetime import UTC, datetime

logger = logging.getLogger("funcframe.execution")

# Cloud Logging reads the level from a "severity" field
_SEVERITY = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARNING",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}

# Record attributes that are never user-supplied ``extra`` fields
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def log_execution_started() -> None:
    """Log the start of one function execution."""
    logger.info("Execution started")


def log_execution_finished(elapsed_ms: int, status_code: int) -> None:
    """Log the end of one function execution."""
    logger.info(
        "Execution took %d ms, finished with status code: %d",
        elapsed_ms,
        status_code,
        extra={"execution_ms": elapsed_ms, "status_code": status_code},
    )


class JSONFormatter(logging.Formatter):
    """One JSON object per line: ``severity``, ``message``, ``time``, ``logger``.

    ``extra`` fields passed to the logging call are included as-is.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "severity": _SEVERITY.get(record.levelno, record.levelname),
            "message": record.getMessage(),
            "time": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "logger": record.name,
        }
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = "info", fmt: str = "text") -> None:
    """Send ``funcframe`` logs to stderr in *fmt* (``"text"`` or ``"json"``)."""
    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    root = logging.getLogger("funcframe")
    root.handlers[:] = [handler]
    root.setLevel(level.upper())
    root.propagate = False
