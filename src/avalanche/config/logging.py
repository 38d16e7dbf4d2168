"""Log output for the avalanche CLI.

Library modules log through `logging.getLogger(__name__)` and the CLI
commands through structlog. Both end up on one handler attached to the
`avalanche` logger, rendered by structlog as console lines or, with
`--log-json`, as JSON lines. Records of other libraries are left alone.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

import structlog

LOGGER_NAME = "avalanche"


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Route avalanche log records through structlog.

    Calling it again replaces the previous handler, so each CLI invocation
    gets its own output stream.

    Args:
        verbose: Show debug events (base systems, group application,
            membership). Otherwise only warnings such as failing hosts.
        log_json: Render JSON lines instead of console lines.
        stream: Destination, stderr by default.
    """
    stream = stream or sys.stderr

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    logger = logging.getLogger(LOGGER_NAME)
    for previous in list(logger.handlers):
        logger.removeHandler(previous)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return handler
