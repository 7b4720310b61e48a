"""Main entry point for the private AKS DNS zone linker.

The hosting environment delivers one Event Grid payload per invocation,
either a single event object or an array of events. Each event is
handled in order; the first failure aborts the remainder and is reported
through the exit code so the delivery infrastructure can retry or
dead-letter it.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from .config import Config
from .errors import ConfigurationError, LinkerError
from .linker import LinkResult, ZoneLinker

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

# LogRecord attributes that are not structured context
_RESERVED_RECORD_KEYS = frozenset(
    (
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    )
)


class JsonFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(level: int = logging.INFO) -> None:
    """Configure structured logging with JSON output."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Reduce noise from Azure SDK
    logging.getLogger("azure").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def handle_payload(linker: ZoneLinker, payload: Any) -> list[LinkResult]:
    """Handle an Event Grid payload holding one event or an array of events.

    Raises:
        LinkerError: From the first event that fails.
    """
    events = payload if isinstance(payload, list) else [payload]
    return [linker.handle(event) for event in events]


def run(raw_payload: str, config: Config | None = None) -> int:
    """Process a raw JSON payload end to end.

    Args:
        raw_payload: The Event Grid payload as JSON text.
        config: Configuration to use; loaded from the environment if omitted.

    Returns:
        Exit code (0 for success or skip, non-zero for failure).
    """
    logger = logging.getLogger(__name__)

    try:
        if config is None:
            config = Config.from_env()
    except ConfigurationError as e:
        logger.error("Configuration error", extra={"error": str(e)})
        return EXIT_FAILURE

    try:
        payload = json.loads(raw_payload)
    except json.JSONDecodeError as e:
        logger.error("Event payload is not valid JSON", extra={"error": str(e)})
        return EXIT_FAILURE

    linker = ZoneLinker(config)
    try:
        results = handle_payload(linker, payload)
    except LinkerError as e:
        logger.error(
            "Invocation failed",
            extra={"step": e.step, "error_type": type(e).__name__, "error": str(e)},
        )
        return EXIT_FAILURE
    except Exception as e:
        logger.exception("Invocation failed unexpectedly", extra={"error": str(e)})
        return EXIT_FAILURE

    logger.info(
        "Invocation completed",
        extra={
            "events": len(results),
            "skipped": sum(1 for r in results if r.skipped),
            "links_created": sum(len(r.links) for r in results),
        },
    )
    return EXIT_SUCCESS


def main() -> None:
    """Read an Event Grid payload from stdin and process it."""
    config: Config | None = None
    try:
        config = Config.from_env()
        setup_logging(config.log_level_number)
    except ConfigurationError:
        setup_logging()
    sys.exit(run(sys.stdin.read(), config))


if __name__ == "__main__":
    main()
