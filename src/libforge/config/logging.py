"""structlog configuration for libforge.

All log output goes to stderr so stdout stays reserved for command
results. Records from stdlib loggers and from structlog loggers share one
processor chain and one handler; ``--log-json`` swaps the console renderer
for JSON lines.

Pipeline code binds the library being built with :func:`library_context`,
so every record emitted during its steps carries a ``library`` key.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from structlog.types import Processor

# Third-party loggers held at WARNING even under --verbose.
QUIET_LOGGERS = ("urllib3", "requests")

_PRE_CHAIN: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _stderr_handler(*, log_json: bool) -> logging.Handler:
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_PRE_CHAIN,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler; safe to call more than once.

    ``libforge.*`` loggers log at DEBUG with *verbose*, WARNING otherwise.
    Everything else stays at WARNING.
    """
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers[:] = [_stderr_handler(log_json=log_json)]
    root.setLevel(logging.WARNING)

    logging.getLogger("libforge").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def library_context(library: str, **extra: object) -> Iterator[None]:
    """Bind *library* (and *extra*) into the structlog context for a block."""
    with structlog.contextvars.bound_contextvars(library=library, **extra):
        yield
