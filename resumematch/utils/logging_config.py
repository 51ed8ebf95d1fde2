"""
Centralized Logging Configuration for the Resume Matching Engine

All modules log through loggers under the ``resumematch`` namespace. The
handler layout depends on ENVIRONMENT (production, development, testing);
LOG_LEVEL overrides the level in production and LOG_DIR moves the log files.
"""
import functools
import inspect
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

ROOT_LOGGER = "resumematch"
MAX_LOG_BYTES = 10 * 1024 * 1024

LOG_FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-34s | %(funcName)-20s:%(lineno)-4d | %(message)s",
    "json": '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
            '"function": "%(funcName)s", "line": %(lineno)d, "message": "%(message)s"}',
}

# keyword arguments for setup_logging, per ENVIRONMENT
ENVIRONMENT_PROFILES: Dict[str, Dict[str, Any]] = {
    "production": {"enable_console": True, "enable_file": True, "format_style": "json"},
    "development": {"level": "DEBUG", "enable_console": True, "enable_file": True, "format_style": "detailed"},
    "testing": {"level": "WARNING", "enable_console": True, "enable_file": False, "format_style": "simple"},
}


def _rotating_file(path: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "file",
        "filename": str(path),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": 5,
        "encoding": "utf8",
    }


def build_logging_config(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_file: bool = True,
    format_style: str = "detailed",
) -> Dict[str, Any]:
    """Return the dictConfig mapping that setup_logging installs"""
    stamp = datetime.now().strftime("%Y%m%d")
    log_dir = Path(os.getenv("LOG_DIR", "logs"))

    handlers: Dict[str, Any] = {}
    if enable_console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "console",
            "stream": "ext://sys.stdout",
        }
    if enable_file:
        log_dir.mkdir(exist_ok=True)
        handlers["file"] = _rotating_file(Path(log_file) if log_file else log_dir / f"resumematch_{stamp}.log", level)
        handlers["error_file"] = _rotating_file(log_dir / f"resumematch_errors_{stamp}.log", "ERROR")

    server_handlers = [name for name in ("console", "file") if name in handlers]
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": LOG_FORMATS.get(format_style, LOG_FORMATS["detailed"]), "datefmt": "%Y-%m-%d %H:%M:%S"},
            "file": {"format": LOG_FORMATS["detailed"], "datefmt": "%Y-%m-%d %H:%M:%S"},
        },
        "handlers": handlers,
        "loggers": {
            "": {"level": level, "handlers": list(handlers)},
            "uvicorn": {"level": "INFO", "handlers": server_handlers, "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": server_handlers, "propagate": False},
        },
    }


def setup_logging(
    level: str = "INFO",
    log_file: str = None,
    enable_console: bool = True,
    enable_file: bool = True,
    format_style: str = "detailed"
) -> None:
    """
    Setup centralized logging configuration

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (defaults to $LOG_DIR/resumematch_<date>.log)
        enable_console: Enable console logging
        enable_file: Enable rotating file logging plus a separate error log
        format_style: Console format style ('simple', 'detailed', 'json')
    """
    config = build_logging_config(level, log_file, enable_console, enable_file, format_style)
    logging.config.dictConfig(config)

    logger = get_logger("logging")
    logger.info(f"Logging configured - Level: {level}, handlers: {sorted(config['handlers'])}")


def configure_for_environment():
    """Configure logging based on ENVIRONMENT and LOG_LEVEL"""
    environment = os.getenv("ENVIRONMENT", "development").lower()
    options = dict(ENVIRONMENT_PROFILES.get(environment, {}))
    options.setdefault("level", os.getenv("LOG_LEVEL", "INFO").upper())
    setup_logging(**options)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the resumematch namespace

    Args:
        name: Logger name (usually __name__)
    """
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class PerformanceMonitor:
    """Context manager that times an operation and logs the outcome"""

    def __init__(
        self,
        operation_name: str,
        logger: logging.Logger = None,
        threshold_ms: float = 1000,
        success_level: int = logging.INFO,
    ):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.success_level = success_level
        self.start_time = None
        self.elapsed_ms = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(f"Starting {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(
                f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms "
                f"(exceeded threshold {self.threshold_ms}ms)"
            )
        else:
            self.logger.log(self.success_level, f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms")
        return False


def log_function_call(func):
    """
    Decorator that logs entry, duration and failure of a call at DEBUG level
    (slow calls are raised to WARNING by PerformanceMonitor)
    """
    logger = get_logger(func.__module__)
    name = func.__qualname__

    def monitor(args, kwargs):
        logger.debug(f"Entering {name} with args={len(args)}, kwargs={list(kwargs)}")
        return PerformanceMonitor(name, logger=logger, success_level=logging.DEBUG)

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            with monitor(args, kwargs):
                return await func(*args, **kwargs)
        return async_wrapper

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        with monitor(args, kwargs):
            return func(*args, **kwargs)
    return sync_wrapper
