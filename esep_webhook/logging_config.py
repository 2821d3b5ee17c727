"""structlog setup shared by the Lambda and HTTP server entry points."""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """Route structlog through the stdlib logging module.

    Args:
        level: Root log level name, e.g. "INFO".
        json_logs: Render JSON lines when True, human-readable console
                   output otherwise.
    """
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    # Lambda pre-installs a root handler, which makes basicConfig a no-op
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
