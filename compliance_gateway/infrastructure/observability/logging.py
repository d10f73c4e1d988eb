"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "compliance-gateway", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "compliance-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_bas_sync(
    request_id: str,
    source: str,
    source_id: str,
    period: str,
    net_payable: str,
    refund: bool,
    duration_ms: float,
) -> None:
    """Log structured BAS sync outcome"""
    logging.info(
        "BAS sync completed",
        extra={
            "request_id": request_id,
            "source": source,
            "source_id": source_id,
            "step": "bas_sync_complete",
            "period": period,
            "net_payable": net_payable,
            "refund": refund,
            "duration_ms": duration_ms,
        },
    )


def log_risk_ranking(request_id: str, client_count: int, high_risk_count: int, duration_ms: float) -> None:
    """Log structured risk ranking outcome"""
    logging.info(
        "Risk ranking completed",
        extra={
            "request_id": request_id,
            "step": "risk_rank_complete",
            "client_count": client_count,
            "high_risk_count": high_risk_count,
            "duration_ms": duration_ms,
        },
    )
