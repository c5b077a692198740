import logging
import sys
from typing import Any

import structlog


def configure_logging(level: int | str = logging.INFO, *, json_logs: bool = True) -> None:
    """Configure the structlog/standard logging bridge.

    Logs always go to stderr so command output on stdout stays parseable.
    ``json_logs=False`` switches to the human-readable console renderer.
    """

    renderer: Any = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr, force=True)

