"""structlog configuration for bachctl.

Records come from two kinds of stdlib loggers:

- ``bachctl.<module>``: build progress (banner, actions, realm compiles).
- ``bachctl.tool``: lines captured from tools run with log-backed sinks.
  Standard output lines are logged at DEBUG, error lines at ERROR; each
  record carries a ``stream`` field (``out`` or ``err``).

Both render through one ``ProcessorFormatter`` on stderr, either as
console lines (default) or as JSON lines (``--log-json``).
"""

from __future__ import annotations

import logging
import sys

import structlog

TOOL_LOGGER = "bachctl.tool"


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: Enable DEBUG-level output, which includes captured tool
            output. When False, INFO and above.
        log_json: Use JSON renderer instead of console renderer.
    """
    level = logging.DEBUG if verbose else logging.INFO

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(allow=("stream",)),
    ]

    if log_json:
        pre_chain.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
        render: list[structlog.types.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        pre_chain.append(structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False))
        render = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("bachctl").setLevel(level)
    # Download progress is reported by bachctl itself.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
