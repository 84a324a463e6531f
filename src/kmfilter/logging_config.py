"""
Logging configuration for kmfilter.

Diagnostics always go to stderr so that stdout stays reserved for matrix or
FASTA output. An optional JSON formatter emits one object per record.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Dict

PACKAGE_LOGGER = "kmfilter"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs as JSON for easy parsing by log aggregation systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


class PerformanceLogger:
    """
    Logger for run timings and throughput.
    """

    def __init__(self, logger_name: str = "kmfilter.performance"):
        self.logger = logging.getLogger(logger_name)
        self.metrics: Dict[str, list] = {}

    def log_operation_time(self, operation: str, duration_seconds: float, **kwargs):
        """
        Log operation timing.

        Args:
            operation: Name of the operation
            duration_seconds: How long it took
            **kwargs: Additional context (e.g., items_processed, rate)
        """
        self.metrics.setdefault(operation, []).append(duration_seconds)

        extra = {
            "extra_fields": {
                "operation": operation,
                "duration_seconds": duration_seconds,
                **kwargs,
            }
        }

        self.logger.debug(
            f"{operation} completed in {duration_seconds:.2f}s", extra=extra
        )

    def log_throughput(self, operation: str, items: int, duration_seconds: float):
        rate = items / duration_seconds if duration_seconds > 0 else 0
        self.log_operation_time(
            operation, duration_seconds, items_processed=items, items_per_second=rate
        )


def setup_logging(
    log_level: str = "INFO", enable_json: bool = False
) -> logging.Logger:
    """
    Configure the package logger to write to stderr.

    Any handlers installed by a previous call are replaced, so the function
    can be called once per command invocation.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_json: Use JSON formatting for structured logs

    Returns:
        The configured ``kmfilter`` logger.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, log_level.upper()))
    package_logger.handlers.clear()

    if enable_json:
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    return package_logger
