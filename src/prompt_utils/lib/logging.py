"""Structlog configuration helpers."""

from __future__ import annotations

import logging as std_logging
import sys

import structlog

# Verbosity at which debug lines name the collector that emitted them.
CALLSITE_VERBOSITY = 2


def _level_from_verbosity(verbosity: int) -> int:
    if verbosity <= 0:
        return std_logging.WARNING
    if verbosity == 1:
        return std_logging.INFO
    return std_logging.DEBUG


def build_processors(*, json_mode: bool, verbosity: int) -> list[structlog.typing.Processor]:
    """Return the processor chain for one prompt invocation.

    Console output is for a person debugging a slow or empty segment, so it
    carries no timestamp. JSON output keeps one for log collection.
    """

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]
    if verbosity >= CALLSITE_VERBOSITY:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )
    if json_mode:
        processors.extend(
            [
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure_logging(json_mode: bool = False, verbosity: int = 0) -> None:
    """Configure structlog for a prompt render.

    Everything goes to stderr: stdout carries the prompt text and must stay
    byte-exact for the host shell.
    """

    level = _level_from_verbosity(verbosity)
    handler = std_logging.StreamHandler(sys.stderr)
    handler.setFormatter(std_logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    std_logging.basicConfig(level=level, handlers=[handler], force=True)

    structlog.configure(
        processors=build_processors(json_mode=json_mode, verbosity=verbosity),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
