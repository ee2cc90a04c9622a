"""Log output for the shrinker CLI.

The library never configures logging; its modules log through stdlib
``logging`` and attach machine-readable fields with ``extra=``. The CLI
installs one stderr handler whose structlog ``ProcessorFormatter`` lifts
those fields into the event, then renders either for a console or as JSON
lines (``--log-json``).
"""

from __future__ import annotations

import logging
import sys

import structlog

# Third-party loggers that stay at WARNING even in verbose mode.
_QUIET_LOGGERS = ("pluggy",)


def _pre_chain() -> list[structlog.types.Processor]:
    """Processors that turn a stdlib record into an event dict."""
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(log_json: bool) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if log_json:
        # JSON cannot hold an exc_info tuple; render the traceback to text.
        chain += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return chain


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route log records to stderr through structlog.

    Replaces any handlers on the root logger, so repeated calls never stack
    output.

    Args:
        verbose: Emit ``shrinker`` DEBUG records (loop steps, plugin loading).
        log_json: One JSON object per record instead of console lines.
    """
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_pre_chain(),
        processors=_render_chain(log_json),
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("shrinker").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
