"""
Structured logging setup.

Configures structlog once per process; modules obtain loggers through
get_logger so every event carries the component that emitted it.

Example:
    from partner_match.core.logger import get_logger

    logger = get_logger(component="document_store")
    logger.warning("candidate fetch failed", reason="HTTP 503")
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog
from structlog.types import BindableLogger, EventDict, WrappedLogger

_SENSITIVE_FIELDS = {"password", "api_key", "token", "secret", "credential", "auth"}


def mask_credentials(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace values of credential-like keys with a fixed mask."""
    for key in list(event_dict.keys()):
        key_lower = key.lower()
        for sensitive in _SENSITIVE_FIELDS:
            if (
                key_lower == sensitive
                or key_lower.endswith(f"_{sensitive}")
                or key_lower.startswith(f"{sensitive}_")
            ):
                event_dict[key] = "***MASKED***"
                break
    return event_dict


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper(), logging.INFO),
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            mask_credentials,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(component: Optional[str] = None) -> BindableLogger:
    # Initial values keep the proxy lazy, so module-level loggers pick up configure_logging().
    if component:
        return structlog.get_logger(component=component)
    return structlog.get_logger()
