# expense_api/log.py
"""
Request logging.

Every handler reports its outcome through log_request(), which emits one
structured event per request carrying method, path, caller ip, caller id
and user-agent. Successful requests log at info, everything else at error.
"""
import logging
import sys
from typing import Optional

import structlog
from fastapi import Request

from .config import LOG_JSON, LOG_LEVEL

logger = structlog.get_logger("expense_api")


def configure_logging(level: str = LOG_LEVEL, json_logs: bool = LOG_JSON) -> None:
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def log_request(request: Request, user_id: Optional[int], ok: bool, **fields) -> None:
    event = f"Received {request.method} {request.url.path}"
    payload = dict(
        method=request.method,
        path=request.url.path,
        ip=client_ip(request),
        user_id=user_id,
        user_agent=request.headers.get("user-agent"),
        **fields,
    )
    if ok:
        logger.info(event, **payload)
    else:
        logger.error(event, **payload)
