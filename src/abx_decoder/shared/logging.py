"""Correlation-aware logging for ABX decoding.

Wraps the standard library logger so every record carries the emitting
component and an optional correlation ID in its ``extra`` data.
"""

import logging
from typing import Any, Dict, Optional

LOG_FORMAT = "%(levelname)s %(name)s [%(component)s] %(message)s"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CorrelationLogger:
    """Logger that automatically includes correlation ID and component information."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def _log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]],
        exc_info: bool
    ) -> None:
        if self.logger.isEnabledFor(level):
            self.logger.log(
                level, message, extra=self._get_extra(extra), exc_info=exc_info
            )

    def debug(
        self, message: str, extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log debug message with correlation info."""
        self._log(logging.DEBUG, message, extra, exc_info)

    def info(
        self, message: str, extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log info message with correlation info."""
        self._log(logging.INFO, message, extra, exc_info)

    def warning(
        self, message: str, extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log warning message with correlation info."""
        self._log(logging.WARNING, message, extra, exc_info)

    def error(
        self, message: str, extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log error message with correlation info.

        Decode failures are expected outcomes, so tracebacks are off by default.
        """
        self._log(logging.ERROR, message, extra, exc_info)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log error message with correlation info and traceback."""
        self._log(logging.ERROR, message, extra, True)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)


class _ComponentDefaultFilter(logging.Filter):
    """Supply ``component`` for records that did not come through CorrelationLogger."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = record.name.split(".")[-1]
        return True


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging for command-line use.

    Args:
        level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL
    """
    level = level.upper()
    if level not in VALID_LEVELS:
        raise ValueError(f"logging level must be one of {list(VALID_LEVELS)}")

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(_ComponentDefaultFilter())
    logging.basicConfig(level=getattr(logging, level), handlers=[handler], force=True)
