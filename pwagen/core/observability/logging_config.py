"""
Logging configuration — one-time setup for the CLI.

Every module logs through ``logging.getLogger(__name__)`` and inherits
what is configured here. Records that carry a pipeline stage
(``extra={"stage": ...}``) are tagged with it:

    12:04:31 [ PlaceIcons ] Placed 3 icon(s) into out/source/...

Level precedence:
    --debug / -v / -q  >  PWAGEN_LOG_LEVEL  >  WARNING

PWAGEN_LOG_FILE adds a file handler, PWAGEN_LOG_FILE_LEVEL sets its level.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "PWAGEN_LOG_LEVEL"
ENV_FILE = "PWAGEN_LOG_FILE"
ENV_FILE_LEVEL = "PWAGEN_LOG_FILE_LEVEL"

# (max level, format, datefmt): first row whose level covers the console wins
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(stage_tag)s%(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s %(stage_tag)s%(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(stage_tag)s%(message)s", None),
)
_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(stage_tag)s%(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# HTTP stack used by the icon downloader
_NOISY_LOGGERS = ("urllib3", "requests", "charset_normalizer")


class StageFormatter(logging.Formatter):
    """Formatter that renders a record's ``stage`` as ``[ Stage ] ``."""

    def format(self, record: logging.LogRecord) -> str:
        stage = getattr(record, "stage", None)
        record.stage_tag = f"[ {stage} ] " if stage else ""
        return super().format(record)


def level_from_flags(verbose: bool = False, quiet: bool = False, debug: bool = False) -> str:
    """Map CLI verbosity flags to a level name, falling back to the env."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def configure_cli_logging(verbose: bool = False, quiet: bool = False, debug: bool = False) -> None:
    """Set up logging from CLI flags and the PWAGEN_LOG_* environment."""
    setup_logging(
        level=level_from_flags(verbose, quiet, debug),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
        quiet_third_party=not debug,
    )


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger.

    Args:
        level: Console level name.
        log_file: Optional log file path.
        log_file_level: Level for the file; defaults to ``level``.
        quiet_third_party: Hold HTTP library loggers at WARNING unless
            the console is at DEBUG.
    """
    console_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(StageFormatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        root.addHandler(file_handler)

    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _console_formatter(level: int) -> StageFormatter:
    for max_level, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= max_level:
            return StageFormatter(fmt, datefmt=datefmt)
    fmt, datefmt = _CONSOLE_FORMATS[-1][1:]
    return StageFormatter(fmt, datefmt=datefmt)


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
