"""
Application logger

Every log line carries the correlation id of the request that produced it
("-" outside of a request).
"""
import logging
import sys
from contextvars import ContextVar

from legal_vault.core.config import settings

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        return True


def _build_logger() -> logging.Logger:
    log = logging.getLogger("legal_vault")
    if log.handlers:
        return log

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] [%(correlation_id)s] %(message)s"
        )
    )
    log.addHandler(handler)
    log.setLevel(settings.LOG_LEVEL.upper())
    log.propagate = False
    return log


logger = _build_logger()
