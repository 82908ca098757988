"""loguru configuration for the client, the workflows and the CLI.

One console sink on stderr, an optional rotating file sink, and a bridge
that pulls stdlib logging (httpx/httpcore underneath githubkit) into
loguru. Modules log through ``get_logger(__name__)``; the validation and
issue workflows use ``bind_repo`` so every line carries ``owner/repo``.
"""

from __future__ import annotations

import inspect
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger, Record

    from tpm_github.config import LoggingConfig

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Bound by get_logger/bind_repo; records from intercepted stdlib loggers lack it
_SOURCE_KEY = "name"

_TRANSPORT_LOGGERS = ("httpx", "httpcore", "githubkit")

_configured = False


def _console_format(record: Record) -> str:
    source = "{extra[name]}" if _SOURCE_KEY in record["extra"] else "{name}"
    repo = " <magenta>[{extra[repo]}]</magenta>" if "repo" in record["extra"] else ""
    return (
        "<dim>{time:HH:mm:ss}</dim> <level>{level: <8}</level> "
        f"<cyan>{source}</cyan>{repo} <level>{{message}}</level>\n{{exception}}"
    )


def _file_format(record: Record) -> str:
    source = "{extra[name]}" if _SOURCE_KEY in record["extra"] else "{name}"
    return (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} {level: <8} "
        f"{source}:{{function}}:{{line}} {{extra}} {{message}}\n{{exception}}"
    )


def resolve_level(level: LogLevel, *, verbose: bool = False, quiet: bool = False) -> LogLevel:
    """CLI flags win over the configured level; --verbose wins over --quiet."""
    if verbose:
        return "DEBUG"
    if quiet:
        return "WARNING"
    return level


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so the record points at the caller
        frame, depth = inspect.currentframe(), 0
        while frame is not None and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_config: LoggingConfig | None = None,
) -> Logger:
    """Install the console sink (and the file sink when configured).

    Args:
        level: Configured level (``Settings.log_level``)
        verbose: --verbose flag, forces DEBUG
        quiet: --quiet flag, forces WARNING
        log_config: File output settings; no file sink when ``log_file`` is unset

    Returns:
        The configured loguru logger
    """
    global _configured

    effective = resolve_level(level, verbose=verbose, quiet=quiet)

    logger.remove()
    logger.add(
        sys.stderr,
        level=effective,
        format=_console_format,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if log_config is not None and log_config.log_file:
        logger.add(
            Path(log_config.log_file),
            level="DEBUG",
            format=_file_format,
            rotation=log_config.rotation,
            retention=log_config.retention,
            compression="gz",
            serialize=log_config.serialize,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    transport_level = logging.DEBUG if effective in ("TRACE", "DEBUG") else logging.WARNING
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)

    _configured = True
    return logger


def get_logger(name: str) -> Logger:
    """Module logger: ``logger = get_logger(__name__)``."""
    return logger.bind(name=name)


def bind_repo(owner: str, repo: str, component: str = "validation") -> Logger:
    """Logger for a workflow acting on ``owner/repo``.

    Args:
        owner: Repository owner
        repo: Repository name
        component: Source name shown in the console line
    """
    return logger.bind(name=component, repo=f"{owner}/{repo}")


class LogContext:
    """Attach extra fields to every record logged inside the block.

    Usage:
        with LogContext(check="milestones"):
            log.info("Reconciling")
    """

    def __init__(self, **context: Any) -> None:
        self._context = context
        self._stack = ExitStack()

    def __enter__(self) -> Logger:
        self._stack.enter_context(logger.contextualize(**self._context))
        return logger

    def __exit__(self, *exc_info: object) -> None:
        self._stack.close()


def is_configured() -> bool:
    return _configured


def reset_logging() -> None:
    """Drop every sink (tests call this between cases)."""
    global _configured
    logger.remove()
    _configured = False
