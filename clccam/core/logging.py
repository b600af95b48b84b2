"""
Logging Setup.

The client library and camsole log through structlog on top of the standard
logging module. Library code only ever calls get_logger(); the console (or
an application embedding the library) calls setup_logging() once.

Defaults come from the logging section of $CLC_HOME/camsole.yaml:

    logging:
      level: WARNING        # request tracing needs DEBUG
      format: console       # or json
      file:
        path: logs/camsole.jsonl

Every record carries timestamp, level, logger, event, func_name and lineno.
Structured context is attached with extra={...}:

    logger = get_logger(__name__)
    logger.warning("Unable to cache CAM token", extra={"error": str(e)})

Records go to stderr, so that stdout only carries command output and the
JSON echo of responses. The optional file receives JSON lines.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from clccam.core.config import get_app_config, get_clc_home
from clccam.core.config_schema import LogFileSchema

# Library loggers that would otherwise trace every connection at DEBUG.
_QUIET_LOGGERS = ("httpx", "httpcore")


def _processors() -> list[Processor]:
    """Processor chain shared by structlog loggers and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_processors(),
    )


def _log_file_path(path: str) -> Path:
    """Resolve path against CLC_HOME unless it is absolute."""
    resolved = Path(path).expanduser()
    if resolved.is_absolute():
        return resolved
    return get_clc_home() / resolved


def _file_handler(path: str, settings: LogFileSchema | None) -> RotatingFileHandler:
    log_path = _log_file_path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    if settings is None:
        settings = LogFileSchema(path=path)

    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=settings.max_bytes,
        backupCount=settings.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(_formatter(structlog.processors.JSONRenderer()))
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    log_file: str | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Arguments left as None fall back to camsole.yaml. Calling this again
    replaces the handlers installed by the previous call.

    Args:
        level: Level name, e.g. "DEBUG" for request/response tracing
        format_type: "console" (human-readable) or "json"
        log_file: JSON lines file, absolute or relative to CLC_HOME
    """
    settings = get_app_config().logging
    level = level or settings.level
    format_type = format_type or settings.format
    if log_file is None and settings.file is not None:
        log_file = settings.file.path

    structlog.configure(
        processors=_processors() + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if format_type == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(_formatter(renderer))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.addHandler(stderr_handler)
    if log_file:
        root.addHandler(_file_handler(log_file, settings.file))
    root.setLevel(getattr(logging, level.upper()))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Return the structlog logger for name (usually __name__)."""
    return structlog.get_logger(name)
