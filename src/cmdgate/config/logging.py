"""Route cmdgate's stdlib log records through structlog.

Library code never imports structlog: every module logs through
``logging.getLogger(__name__)``. The CLI calls :func:`configure_logging`
once, which installs a single stderr handler whose
``structlog.stdlib.ProcessorFormatter`` renders those records either for a
terminal or as JSON lines (``--log-json``).

The gateway's own chatter (connection open/close) is DEBUG, so it only
shows with ``--verbose``. Driver loggers stay at WARNING either way; SQL
echo is controlled by ``[database] echo`` instead.
"""

from __future__ import annotations

import logging
import sys

import structlog

_DRIVER_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite")


def _pre_chain(*, log_json: bool) -> list[structlog.types.Processor]:
    """Processors applied to both structlog events and foreign stdlib records."""
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if log_json:
        # Tracebacks must become a string field before JSON rendering.
        chain.append(structlog.processors.format_exc_info)
    return chain


def _renderer(*, log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler and set cmdgate/driver levels.

    Safe to call more than once: the root handler is replaced, not added.
    """
    pre_chain = _pre_chain(log_json=log_json)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json=log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("cmdgate").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _DRIVER_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
