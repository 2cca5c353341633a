"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from closure_watch.domain.models import ScanResult


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "closure-watch"


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


def log_scan_summary(
    request_id: str,
    trigger: str,
    result: ScanResult,
    duration_ms: float,
) -> None:
    """Log structured scan outcome for analysis"""
    logging.info(
        "Scan completed",
        extra={
            "request_id": request_id,
            "trigger": trigger,
            "step": "scan_complete",
            "alert_count": result.count,
            "candidates_evaluated": result.candidates_evaluated,
            "failed_accounts": len(result.failed_account_ids),
            "pages_fetched": result.pages_fetched,
            "duration_ms": duration_ms,
        },
    )
