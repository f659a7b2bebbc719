"""
component_15_logging_config.py

Central logging system for the PRW planner.
Structured logging with log levels, component names and key=value context.

Features:
- Console and file based logging
- Separate error-only log file
- Performance tracking for search runs (own "prw.performance" logger)
- Contextual key=value information via extra={...}

Usage:
    from component_15_logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Search started", extra={"actions": 42, "heuristic": "FAST_FORWARD"})
    logger.debug("Restart", extra={"reason": "plateau", "restarts": 3})
"""

import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Any, Dict, Literal, MutableMapping, Optional, Tuple, Type

LOG_DIR: Path = Path(os.environ.get("PRW_LOG_DIR", "logs"))

DEFAULT_LOG_FILE: Path = LOG_DIR / "prw.log"
ERROR_LOG_FILE: Path = LOG_DIR / "prw_errors.log"
PERFORMANCE_LOG_FILE: Path = LOG_DIR / "prw_performance.log"

DEFAULT_LOG_LEVEL: int = logging.INFO
CONSOLE_LOG_LEVEL: int = logging.INFO
FILE_LOG_LEVEL: int = logging.DEBUG

PERFORMANCE_LOGGER_NAME = "prw.performance"


class PRWLogFormatter(logging.Formatter):
    """
    Formatter for structured log output.
    Optionally colors console output by level.
    """

    COLORS: Dict[str, str] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, use_colors: bool = False, include_extra: bool = True) -> None:
        self.use_colors: bool = use_colors
        self.include_extra: bool = include_extra

        # Format: [TIMESTAMP] [LEVEL] [COMPONENT] MESSAGE
        fmt = "[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s"
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        log_message = super().format(record)

        if self.include_extra and hasattr(record, "extra_info"):
            extra_str = " | ".join(f"{k}={v}" for k, v in record.extra_info.items())
            if extra_str:
                log_message += f" | {extra_str}"

        if self.use_colors:
            color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
            reset = self.COLORS["RESET"]
            log_message = f"{color}{log_message}{reset}"

        return log_message


class PerformanceLogger:
    """
    Context manager for timing critical operations.

    Usage:
        with PerformanceLogger(logger.logger, "RandomWalkPlanner.solve", problem="p01"):
            planner.solve(problem)
    """

    def __init__(
        self, logger: logging.Logger, operation_name: str, **context: Any
    ) -> None:
        self.logger: logging.Logger = logger
        self.operation_name: str = operation_name
        self.context: Dict[str, Any] = context
        self.start_time: Optional[datetime] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self.start_time = datetime.now()
        self.logger.debug(
            f"START: {self.operation_name}", extra={"extra_info": self.context}
        )
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> Literal[False]:
        assert (
            self.start_time is not None
        ), "PerformanceLogger was not entered correctly"
        self.duration_ms = (datetime.now() - self.start_time).total_seconds() * 1000

        if exc_type is None:
            self.logger.debug(
                f"END: {self.operation_name} (duration: {self.duration_ms:.2f}ms)",
                extra={"extra_info": {**self.context, "duration_ms": self.duration_ms}},
            )

            perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
            perf_logger.info(
                f"{self.operation_name}: {self.duration_ms:.2f}ms",
                extra={"extra_info": {**self.context, "duration_ms": self.duration_ms}},
            )
        else:
            self.logger.error(
                f"FAILED: {self.operation_name} (duration: {self.duration_ms:.2f}ms)",
                extra={
                    "extra_info": {
                        **self.context,
                        "duration_ms": self.duration_ms,
                        "error": str(exc_val),
                    }
                },
            )

        # Never swallow the exception
        return False


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger adapter that turns extra={...} into structured key=value output.
    """

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> Tuple[str, MutableMapping[str, Any]]:
        extra = kwargs.get("extra", {})
        if extra:
            kwargs["extra"] = {"extra_info": extra}
        return msg, kwargs


def setup_logging(
    console_level: int = CONSOLE_LOG_LEVEL,
    file_level: int = FILE_LOG_LEVEL,
    log_file: Optional[Path] = None,
    enable_file_logging: bool = True,
    enable_performance_logging: bool = True,
) -> None:
    """
    Configure the global logging system.

    Args:
        console_level: Level for console output
        file_level: Level for the main log file
        log_file: Path of the main log file (default: logs/prw.log)
        enable_file_logging: Write main and error log files
        enable_performance_logging: Write the separate performance log
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Filter at handler level

    # Prevents duplicate handlers on repeated setup
    root_logger.handlers.clear()

    # === Console handler ===
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(PRWLogFormatter(use_colors=True, include_extra=True))
    root_logger.addHandler(console_handler)

    perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
    perf_logger.handlers.clear()
    perf_logger.setLevel(logging.INFO)
    perf_logger.propagate = False

    file_path = log_file or DEFAULT_LOG_FILE
    if enable_file_logging or enable_performance_logging:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    if enable_file_logging:
        # === Main log file ===
        file_handler = logging.handlers.RotatingFileHandler(
            file_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(PRWLogFormatter(use_colors=False, include_extra=True))
        root_logger.addHandler(file_handler)

        # === Error-only log file ===
        error_handler = logging.handlers.RotatingFileHandler(
            ERROR_LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(
            PRWLogFormatter(use_colors=False, include_extra=True)
        )
        root_logger.addHandler(error_handler)

    # === Performance logger ===
    if enable_performance_logging:
        perf_handler = logging.handlers.RotatingFileHandler(
            PERFORMANCE_LOG_FILE,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        perf_handler.setFormatter(PRWLogFormatter(use_colors=False, include_extra=True))
        perf_logger.addHandler(perf_handler)
    else:
        perf_logger.addHandler(logging.NullHandler())

    logger = get_logger("prw.logging_config")
    logger.debug(
        "Logging initialized",
        extra={
            "console_level": logging.getLevelName(console_level),
            "file_level": logging.getLevelName(file_level),
            "log_file": str(file_path) if enable_file_logging else None,
            "performance_logging": enable_performance_logging,
        },
    )


def get_logger(name: str) -> StructuredLogger:
    """
    Create a structured logger for a component.

    Args:
        name: Component name (usually __name__)

    Returns:
        StructuredLogger instance

    Example:
        logger = get_logger(__name__)
        logger.info("Plan found", extra={"plan_length": 7})
    """
    base_logger = logging.getLogger(name)
    return StructuredLogger(base_logger, {})


# Console-only initialization on import; the CLI calls setup_logging() explicitly
if not logging.getLogger().handlers:
    setup_logging(enable_file_logging=False, enable_performance_logging=False)
