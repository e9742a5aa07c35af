"""
Centralized Logging Configuration for the RecruitOps API and its scripts
"""
import functools
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-36s | %(funcName)-22s:%(lineno)-4d | %(message)s",
    "json": '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "function": "%(funcName)s", "line": %(lineno)d, "message": "%(message)s"}'
}

# Third-party loggers that drown out the pipeline at DEBUG
QUIET_LOGGERS = {
    "pdfminer": "ERROR",
    "pymongo": "WARNING",
    "urllib3": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
}

ROTATE_BYTES = 10 * 1024 * 1024
ROTATE_BACKUPS = 5

# ENVIRONMENT -> setup_logging keyword arguments; LOG_LEVEL applies where level is None
ENVIRONMENT_PROFILES: Dict[str, Dict[str, Any]] = {
    "production": {"level": None, "enable_console": True, "enable_file": True, "format_style": "detailed"},
    "development": {"level": "DEBUG", "enable_console": True, "enable_file": True, "format_style": "detailed"},
    "testing": {"level": "WARNING", "enable_console": True, "enable_file": False, "format_style": "simple"},
}


def _rotating_handler(filename: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(filename),
        "maxBytes": ROTATE_BYTES,
        "backupCount": ROTATE_BACKUPS,
        "encoding": "utf8"
    }


def setup_logging(
    level: str = "INFO",
    log_name: str = "recruitops",
    enable_console: bool = True,
    enable_file: bool = True,
    format_style: str = "detailed"
) -> None:
    """
    Setup centralized logging configuration

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_name: File name prefix; scripts pass their own so batch runs
            do not interleave with the API log
        enable_console: Enable console logging
        enable_file: Enable file logging (general and errors-only files)
        format_style: Format style ('simple', 'detailed', 'json')
    """
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    stamp = datetime.now().strftime('%Y%m%d')
    handlers: Dict[str, Any] = {}

    if enable_console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "simple" if format_style == "simple" else "detailed",
            "stream": "ext://sys.stdout"
        }
    if enable_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["file"] = _rotating_handler(log_dir / f"{log_name}_{stamp}.log", level)
        handlers["error_file"] = _rotating_handler(log_dir / f"{log_name}_errors_{stamp}.log", "ERROR")

    server_handlers = [h for h in ("console", "file") if h in handlers]
    loggers: Dict[str, Any] = {
        "": {"level": level, "handlers": list(handlers), "propagate": False},
        "uvicorn": {"level": "INFO", "handlers": server_handlers, "propagate": False},
        "uvicorn.access": {"level": "INFO", "handlers": server_handlers, "propagate": False},
    }
    for name, quiet_level in QUIET_LOGGERS.items():
        loggers[name] = {"level": quiet_level, "handlers": [], "propagate": True}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": FORMATS.get(format_style, FORMATS["detailed"]),
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "simple": {"format": FORMATS["simple"]}
        },
        "handlers": handlers,
        "loggers": loggers,
    })

    logger = logging.getLogger("recruitops.logging")
    logger.info(f"Logging configured - Level: {level}, Console: {enable_console}, File: {enable_file}")
    if enable_file:
        logger.info(f"Log files: {log_dir / log_name}_*{stamp}.log")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with consistent naming

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger under the ``recruitops`` namespace
    """
    if name == "recruitops" or name.startswith("recruitops."):
        return logging.getLogger(name)
    return logging.getLogger(f"recruitops.{name}")


def log_api_call(operation: str):
    """
    Decorator to log API endpoint calls with their execution time.

    When the endpoint takes a ``request`` argument its request id is
    attached to both log lines.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            logger = get_logger(f"api.{func.__module__}")
            request = kwargs.get("request")
            request_id = getattr(getattr(request, "state", None), "request_id", "unknown")
            start_time = time.time()

            logger.info(f"API {operation} started - {func.__name__}", extra={"request_id": request_id})

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                execution_time = time.time() - start_time
                logger.error(f"API {operation} failed after {execution_time:.3f}s: {str(e)}",
                             extra={"request_id": request_id, "execution_time": execution_time, "error": str(e)})
                raise

            execution_time = time.time() - start_time
            logger.info(f"API {operation} completed in {execution_time:.3f}s",
                        extra={"request_id": request_id, "execution_time": execution_time})
            return result

        return wrapper
    return decorator


def configure_for_environment(log_name: str = "recruitops", environment: Optional[str] = None):
    """Configure logging from ENVIRONMENT and LOG_LEVEL"""
    environment = (environment or os.getenv("ENVIRONMENT", "development")).lower()
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    profile = dict(ENVIRONMENT_PROFILES.get(environment, {}))
    profile["level"] = profile.get("level") or log_level
    setup_logging(log_name=log_name, **profile)


class PerformanceMonitor:
    """Context manager timing one pipeline operation.

    ``elapsed_ms`` is available after the block exits.
    """

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.start_time = None
        self.elapsed_ms: Optional[float] = None

    def __enter__(self):
        self.start_time = time.time()
        self.logger.debug(f"Starting {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.time() - self.start_time) * 1000
        extra = {"operation": self.operation_name, "elapsed_ms": round(self.elapsed_ms, 2)}

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_val}", extra=extra)
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(
                f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms (exceeded threshold {self.threshold_ms}ms)",
                extra=extra
            )
        else:
            self.logger.info(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms", extra=extra)
        return False
