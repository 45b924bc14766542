"""structlog setup for the dutyctl CLI.

Everything logs to stderr so stdout stays clean for results:
- console lines by default (colored only on a TTY)
- JSON lines with ``--log-json``

Only ``dutyctl.*`` loggers drop to DEBUG under ``-v``; libraries stay at
WARNING. Once a snapshot is published its path and version are bound
into the structlog context, so every later event names the data it
was computed from.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

_PACKAGE_LOGGER = "dutyctl"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Safe to call repeatedly; the root handler is replaced, not stacked.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)
    logging.getLogger(_PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)


def bind_snapshot_context(path: Path | None, version: int) -> None:
    """Tag subsequent log events with the published snapshot.

    *path* is None for an in-memory roster.
    """
    structlog.contextvars.bind_contextvars(
        snapshot=str(path) if path is not None else "<memory>",
        snapshot_version=version,
    )


def clear_snapshot_context() -> None:
    structlog.contextvars.unbind_contextvars("snapshot", "snapshot_version")
