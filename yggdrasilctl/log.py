"""
Diagnostic logging for yggdrasilctl.

All modules log through structlog bound to the stdlib ``logging`` tree.
Records go to stderr so stdout only ever carries rendered results.

Usage:
    from yggdrasilctl.log import get_logger, setup_logging

    setup_logging(debug=True)
    logger = get_logger(__name__)
    logger.debug("connecting", endpoint="tcp://localhost:9001")
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import Processor

SHARED_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _configure_structlog() -> None:
    """Route structlog events into the stdlib ``logging`` tree."""
    structlog.configure(
        processors=SHARED_PROCESSORS + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def setup_logging(debug: bool = False) -> None:
    """
    Configure structlog and the root logger.

    Args:
        debug: Emit DEBUG records when True, otherwise only WARNING and above.
    """
    log_level = logging.DEBUG if debug else logging.WARNING

    _configure_structlog()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
            foreign_pre_chain=SHARED_PROCESSORS,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(name: str) -> Any:
    """Get a structlog logger bound to ``name``."""
    return structlog.stdlib.get_logger(name)


# Without setup_logging() events still go through stdlib levels, never stdout.
if not structlog.is_configured():
    _configure_structlog()
