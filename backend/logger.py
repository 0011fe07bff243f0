"""Structured logging configuration for the Nutrition Assistant chat API."""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_handler: Optional[logging.Handler] = None


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra"):
            log_data.update(record.extra)
        for key in ("error_code", "error_details"):
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = "INFO", log_format: str = "text") -> logging.Handler:
    """
    Set up root logging with either plain text or JSON output.

    Calling this more than once replaces the handler installed by the
    previous call instead of stacking another one.

    Args:
        log_level: Level name such as "INFO" or "DEBUG"
        log_format: "json" for JSONFormatter output, anything else for text

    Returns:
        The installed handler
    """
    global _handler
    handler = logging.StreamHandler()
    if log_format.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root_logger = logging.getLogger()
    if _handler is not None:
        root_logger.removeHandler(_handler)
    _handler = handler

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.addHandler(handler)
    return handler
