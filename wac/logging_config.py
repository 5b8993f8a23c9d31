"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; structlog renders those
records (and the request middleware's structlog events) as JSON lines, or as
colored console output when ``log_format`` is ``console`` or the level is DEBUG.
"""

import logging
import sys
from typing import List, Optional

import structlog

from .config import settings

QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx")


def _add_service(_, __, event_dict):
    event_dict.setdefault("service", "wac")
    return event_dict


def _use_console(level: int, log_format: str) -> bool:
    if log_format == "auto":
        return level == logging.DEBUG
    return log_format == "console"


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Override for settings.log_level
        log_format: "json", "console" or "auto" (default: settings.log_format)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    console = _use_console(level, (log_format or settings.log_format).lower())

    pre_chain: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if console:
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    else:
        pre_chain.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
