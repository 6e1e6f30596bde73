"""Structured logging for the escrow ledger, built on structlog.

Hosts call ``setup_logging`` once at startup; library modules only call
``get_logger``. The escrow service binds ``caller`` and ``block_height`` to
structlog contextvars for each operation, and ``merge_contextvars`` copies
them onto every line logged inside it.

Statuses, event types and error codes are enums. ``_plain_enum_values``
renders them as their raw values, so JSON output carries ``"locked"`` or
``104`` rather than the enum repr.

Usage:
    from fund_escrow.logging_config import setup_logging, get_logger
    setup_logging(log_level="DEBUG", json_logs=True)
    logger = get_logger(__name__)
    logger.info("escrow.created", escrow_id=0, status=EscrowStatus.LOCKED)
"""

from __future__ import annotations

import enum
import logging
import sys
from typing import Any

import structlog


def _plain_enum_values(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    for key, value in event_dict.items():
        if isinstance(value, enum.Enum):
            event_dict[key] = value.value
    return event_dict


def _renderer(json_logs: bool) -> structlog.types.Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """Route structlog through the stdlib root logger.

    Args:
        log_level: Level name such as "DEBUG" or "warning". Unknown names
            fall back to INFO.
        json_logs: Emit one JSON object per line instead of console output.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _plain_enum_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_logs),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)
