from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


_CONFIGURED = False

# Third-party loggers and how they are treated. `route` replaces their handlers
# with ours (uvicorn installs its own); `floor` is the minimum level they may log
# at, which mutes driver heartbeats and HTTP connection-pool chatter.
LIBRARY_LOGGERS: dict[str, dict[str, Any]] = {
    "uvicorn": {"route": True, "floor": logging.NOTSET},
    "uvicorn.error": {"route": True, "floor": logging.NOTSET},
    "uvicorn.access": {"route": True, "floor": logging.NOTSET},
    "pymongo": {"route": False, "floor": logging.WARNING},
    "urllib3": {"route": False, "floor": logging.WARNING},
}


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _json_handler(pre_chain: list[Any]) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=pre_chain,
        )
    )
    return handler


def _configure_library_loggers(handler: logging.Handler, level: int) -> None:
    for name, policy in LIBRARY_LOGGERS.items():
        logger = logging.getLogger(name)
        if policy["route"]:
            logger.handlers = [handler]
            logger.propagate = False
        logger.setLevel(max(level, policy["floor"]))


def configure_logging(level: int | str = logging.INFO) -> None:
    """Render structlog events and stdlib records (ours, uvicorn's, the drivers') as JSON lines.

    Accepts a numeric level or a level name such as ``"DEBUG"``.
    Safe to call multiple times (no-op after first call).
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    numeric_level = _resolve_level(level)
    pre_chain = _shared_processors()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = _json_handler(pre_chain)
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)

    _configure_library_loggers(handler, numeric_level)

    _CONFIGURED = True
