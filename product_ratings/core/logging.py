from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import IO, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(requestId)s] - %(message)s"

# Set by RequestIdMiddleware for the duration of a request.
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    """
    Give every record a `requestId` attribute so LOG_FORMAT can print it.

    An explicit `extra={"requestId": ...}` wins, then the id of the request
    being served, then "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "requestId", None):
            record.requestId = request_id_var.get() or "-"
        return True


def build_handler(stream: Optional[IO[str]] = None) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    # On the handler, not a logger: records from third-party loggers pass here too.
    handler.addFilter(RequestIdFilter())
    return handler


def configure_logging(level: str = "INFO") -> None:
    """
    Configure Python standard logging once for the whole service.

    Plain stdout output, suitable for containers.
    """
    root = logging.getLogger()
    if any(isinstance(f, RequestIdFilter) for h in root.handlers for f in h.filters):
        # Already configured (reloads).
        return

    root.addHandler(build_handler())
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "product_ratings")


logger = get_logger("product_ratings")
