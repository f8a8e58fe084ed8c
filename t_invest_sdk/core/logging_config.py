"""
Structlog logging for SDK users.

The SDK itself only emits events through ``get_logger``; nothing is
configured on import. Applications that have no logging setup of their own
(the bundled examples, small trading scripts) call ``configure_logging``
once at startup. It renders SDK events and stdlib records (grpc, asyncio)
through one chain and keeps the transport's own loggers at WARNING unless
debugging.
"""
import json
import logging
import sys
from typing import IO, Any, List, Optional

import structlog
from structlog.contextvars import merge_contextvars
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer, TimeStamper, add_log_level
from structlog.stdlib import ProcessorFormatter, add_logger_name

from t_invest_sdk.core.config import settings


SDK_LOGGER = "t_invest_sdk"

# grpc core logs connectivity churn at INFO; only the SDK's events matter
_TRANSPORT_LOGGERS = ("grpc", "grpc._cython", "grpc.aio", "asyncio")


def get_renderer(debug: bool) -> Any:
    """Console renderer in debug, one JSON object per line otherwise.

    structlog passes default/sort_keys to the serializer, so accept them.
    """
    if debug:
        return ConsoleRenderer(colors=True)

    def _dumps(obj, default=None, **kwargs):
        return json.dumps(obj, ensure_ascii=False, default=default, **kwargs)

    return JSONRenderer(serializer=_dumps)


def configure_logging(
    debug: Optional[bool] = None,
    level: Optional[int] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Install the structlog chain and a root handler writing to ``stream``.

    ``debug`` defaults to ``TINVEST_DEBUG``; ``level`` defaults to DEBUG in
    debug mode and INFO otherwise; ``stream`` defaults to stderr.
    """
    if debug is None:
        debug = settings.DEBUG
    if level is None:
        level = logging.DEBUG if debug else logging.INFO

    shared_pre_chain: List[Any] = [
        merge_contextvars,
        add_log_level,
        add_logger_name,
        TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *shared_pre_chain,
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = ProcessorFormatter(
        foreign_pre_chain=shared_pre_chain,
        processors=[
            ProcessorFormatter.remove_processors_meta,
            get_renderer(debug),
        ],
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    transport_level = logging.DEBUG if debug else logging.WARNING
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)


def get_logger(name: str = SDK_LOGGER) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
