"""
Structured logging for serpcraw.

structlog renders every event (JSON by default, console when
`general.json_logs` is false) and hands it to stdlib logging, so host
applications keep control of handlers. Modules log with key/value context:

    logger = get_logger(__name__)
    logger.warning("Invalid result JSON attribute", rank=rank)
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog
from structlog.types import Processor

from serpcraw.utils.config import get_project_root, get_settings

_logging_configured = False


def _default_log_file(logs_dir: str) -> Path:
    log_dir = get_project_root() / logs_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / f"serpcraw_{datetime.now().strftime('%Y%m%d')}.log"


def configure_logging(
    log_level: str | None = None,
    log_file: str | Path | None = None,
    json_format: bool | None = None,
) -> None:
    """Configure structlog and the stdlib root handlers.

    Args:
        log_level: Log level name. Uses `general.log_level` if None.
        log_file: Extra file handler target. If None, a dated file under
            `general.logs_dir` is used only when `general.log_to_file` is set.
        json_format: JSON (True) or console (False) rendering. Uses
            `general.json_logs` if None.
    """
    general = get_settings().general

    level_name = (log_level or general.log_level).upper()
    if json_format is None:
        json_format = general.json_logs
    if log_file is None and general.log_to_file:
        log_file = _default_log_file(general.logs_dir)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level_name, logging.INFO),
        handlers=handlers,
    )

    renderer: Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def ensure_logging_configured() -> None:
    """Configure logging once per process."""
    global _logging_configured
    if not _logging_configured:
        configure_logging()
        _logging_configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger (usually `get_logger(__name__)`)."""
    return structlog.get_logger(name)


class LogContext:
    """Bind context variables for the duration of a block.

    Example:
        with LogContext(engine="baidu_mobile"):
            logger.info("Extracted SERP page", result_count=10)
    """

    def __init__(self, **kwargs: Any):
        self.context = kwargs

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        structlog.contextvars.unbind_contextvars(*self.context)
