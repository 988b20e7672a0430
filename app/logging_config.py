"""
Structured logging configuration using structlog.

JSON lines by default, colored console output when running at DEBUG.
Secrets that can show up in tool arguments or request context (private keys,
bearer tokens, SIWE signatures) are masked before rendering.
"""

import logging
import sys
from typing import Any, Optional

import structlog

from .config import Settings, settings as default_settings

_SENSITIVE_KEYS = {"private_key", "agent_private_key", "signature", "access_token", "authorization"}


def redact_secrets(_logger: Any, _method: str, event_dict: dict) -> dict:
    """structlog processor masking secret material in the event dict."""
    for key in list(event_dict):
        if key.lower() in _SENSITIVE_KEYS:
            event_dict[key] = "<redacted>"
    return event_dict


def _shared_processors(is_dev: bool) -> list:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        redact_secrets,
    ]
    if not is_dev:
        processors.append(structlog.processors.format_exc_info)
    return processors


def setup_logging(log_level: Optional[str] = None, config: Optional[Settings] = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Override log level (default: from ``config.log_level``)
        config: Settings to read the level from (default: the global settings)
    """
    config = config or default_settings
    level = getattr(logging, (log_level or config.log_level).upper(), logging.INFO)
    is_dev = level == logging.DEBUG

    shared = _shared_processors(is_dev)
    renderer = structlog.dev.ConsoleRenderer() if is_dev else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # web3 logs every provider request at DEBUG
    for name in ("uvicorn.access", "httpcore", "httpx", "web3.providers", "web3.manager"):
        logging.getLogger(name).setLevel(logging.WARNING)
