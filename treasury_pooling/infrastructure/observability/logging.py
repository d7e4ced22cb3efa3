"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from treasury_pooling.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_recompute(
    request_id: str,
    entry_count: int,
    link_count: int,
    skipped_entries: int,
    duration_ms: float,
) -> None:
    """Log one recomputation pass"""
    logging.info(
        "Derived state recomputed",
        extra={
            "request_id": request_id,
            "step": "recompute_complete",
            "entry_count": entry_count,
            "link_count": link_count,
            "skipped_entries": skipped_entries,
            "duration_ms": duration_ms,
        },
    )


def log_snapshot_operation(request_id: str, operation: str, name: str) -> None:
    """Log a snapshot save, load or delete"""
    logging.info(
        "Snapshot %s",
        operation,
        extra={
            "request_id": request_id,
            "step": f"snapshot_{operation}",
            "snapshot_name": name,
        },
    )
