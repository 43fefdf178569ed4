"""Logging configuration built around structlog JSON logging."""

from __future__ import annotations

import logging
import logging.config
import os
import re
from pathlib import Path
from typing import Iterable

import structlog

_LOGGING_INITIALISED = False


def _default_log_dir() -> Path:
    env_root = os.environ.get("POOL_TAGS_HOME")
    if env_root:
        return Path(env_root).expanduser().resolve() / "logs"
    return Path(__file__).resolve().parents[1] / "logs"


def configure_logging(verbose: bool = False) -> structlog.BoundLogger:
    """Configure structlog + stdlib handlers and return application logger."""

    global _LOGGING_INITIALISED
    log_dir = _default_log_dir()
    app_log = log_dir / "pool_tags.log"
    error_log = log_dir / "error.log"
    (log_dir / "runs").mkdir(parents=True, exist_ok=True)
    app_log.touch(exist_ok=True)
    error_log.touch(exist_ok=True)

    if not _LOGGING_INITIALISED:
        level = "DEBUG" if verbose else "INFO"
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "plain": {
                        "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                        "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                    }
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": level,
                        "formatter": "plain",
                    },
                    "app_file": {
                        "class": "logging.FileHandler",
                        "level": "INFO",
                        "filename": str(app_log),
                        "formatter": "plain",
                    },
                    "error_file": {
                        "class": "logging.FileHandler",
                        "level": "ERROR",
                        "filename": str(error_log),
                        "formatter": "plain",
                    },
                },
                "loggers": {
                    "pool_tags": {
                        "handlers": ["console", "app_file", "error_file"],
                        "level": level,
                        "propagate": False,
                    },
                },
            }
        )

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_INITIALISED = True
    return structlog.get_logger("pool_tags")


def run_log_file(chain_id: str) -> Path:
    slug = re.sub(r"[^0-9A-Za-z_-]+", "_", str(chain_id).strip()) or "unknown"
    return _default_log_dir() / "runs" / f"chain-{slug}.log"


def run_logger(chain_id: str, verbose: bool = False) -> structlog.BoundLogger:
    """Return a logger bound to one chain, writing to its own run log as well."""

    logger = configure_logging(verbose)
    run_log_path = run_log_file(chain_id)
    run_log_path.parent.mkdir(parents=True, exist_ok=True)

    logger_name = f"pool_tags.run.{run_log_path.stem}"
    py_logger = logging.getLogger(logger_name)
    if not any(
        isinstance(handler, logging.FileHandler) and handler.baseFilename == str(run_log_path)
        for handler in py_logger.handlers
    ):
        file_handler = logging.FileHandler(run_log_path, encoding="utf-8")
        app_logger = logging.getLogger("pool_tags")
        if app_logger.handlers:
            file_handler.setFormatter(app_logger.handlers[0].formatter)
        file_handler.setLevel(logging.INFO)
        py_logger.addHandler(file_handler)

    return structlog.get_logger(logger_name).bind(chain_id=chain_id)


def tail_log(path: Path, line_count: int = 100) -> list[str]:
    """Return the last N lines from a log file."""

    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", errors="ignore") as stream:
        lines = stream.readlines()
    return lines[-line_count:]


def available_run_logs() -> Iterable[Path]:
    """Yield available per-chain run log file paths."""

    runs_dir = _default_log_dir() / "runs"
    if not runs_dir.exists():
        return []
    return sorted(p for p in runs_dir.glob("*.log"))


def log_dir() -> Path:
    return _default_log_dir()


__all__ = [
    "available_run_logs",
    "configure_logging",
    "log_dir",
    "run_log_file",
    "run_logger",
    "tail_log",
]
