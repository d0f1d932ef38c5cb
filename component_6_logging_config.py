"""
component_6_logging_config.py

Central logging system for the slot-puzzle solver.
Provides structured logging with levels, timestamps and component names.

Features:
- Console logging, optional rotating log files
- Structured formatting: [TIMESTAMP] [LEVEL] [COMPONENT] MESSAGE | key=value
- Performance tracking for solve runs (PerformanceLogger)
- Contextual key/value information via ``extra=``

Usage:
    from component_6_logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Solve finished", extra={"solutions": 2})
    logger.error("Bad constraint", extra={"constraint": "Fixed"})
"""

import logging
import logging.handlers
import sys
import traceback
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Any, Dict, Literal, MutableMapping, Optional, Tuple, Type, Union

from common.constants import (
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_FILE_LOG_LEVEL,
    DEFAULT_LOG_DIR,
    DEFAULT_LOG_FILE_NAME,
    ERROR_LOG_FILE_NAME,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_MAX_BYTES,
    PERFORMANCE_LOG_FILE_NAME,
)
from solver_exceptions import InvalidConfigError

PERFORMANCE_LOGGER_NAME: str = "solver.performance"


class SolverLogFormatter(logging.Formatter):
    """
    Formatter for structured log output.
    Adds colors for console output (optional).
    """

    # ANSI color codes for console output
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
        with PerformanceLogger(logger, "Solve", slots=729) as perf:
            puzzle.solve()
        print(perf.duration_ms)
    """

    def __init__(
        self, logger: logging.Logger, operation_name: str, **context: Any
    ) -> None:
        self.logger: logging.Logger = logger
        self.operation_name: str = operation_name
        self.context: Dict[str, Any] = context
        self.start_time: Optional[datetime] = None
        self.duration_ms: float = 0.0

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
                extra={
                    "extra_info": {**self.context, "duration_ms": self.duration_ms}
                },
            )

            perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
            perf_logger.info(
                f"{self.operation_name}: {self.duration_ms:.2f}ms",
                extra={
                    "extra_info": {**self.context, "duration_ms": self.duration_ms}
                },
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
    Logger adapter that turns ``extra=`` dicts into a key=value suffix.
    """

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> Tuple[str, MutableMapping[str, Any]]:
        extra = kwargs.get("extra", {})
        if extra:
            kwargs["extra"] = {"extra_info": extra}
        return msg, kwargs

    def log_exception(self, exc: Exception, message: str = "", **context: Any) -> None:
        """
        Log an exception with full traceback and context.
        """
        tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

        self.error(
            f"{message}: {type(exc).__name__}: {str(exc)}\n{tb_str}", extra=context
        )


def parse_log_level(level: Union[int, str]) -> int:
    """
    Convert a level name ("debug", "INFO") or number into a logging level.

    Raises:
        InvalidConfigError: If the name is not a known logging level
    """
    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise InvalidConfigError(
            f"Unknown log level: {level!r}", context={"level": level}
        )
    return resolved


def setup_logging(
    console_level: Union[int, str] = DEFAULT_CONSOLE_LOG_LEVEL,
    file_level: Union[int, str] = DEFAULT_FILE_LOG_LEVEL,
    log_file: Optional[Path] = None,
    log_to_file: bool = False,
    enable_performance_logging: bool = True,
    log_dir: Optional[Path] = None,
) -> None:
    """
    Configure the global logging system.

    Args:
        console_level: Level for console output
        file_level: Level for the main log file
        log_file: Path of the main log file (default: <log_dir>/solver.log)
        log_to_file: Enable the rotating log files
        enable_performance_logging: Separate performance log file
        log_dir: Directory for all log files (default: logs/)
    """
    console_level = parse_log_level(console_level)
    file_level = parse_log_level(file_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything, filter per handler

    # Prevents duplicate handlers on repeated setup
    root_logger.handlers.clear()

    # === Console handler ===
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        SolverLogFormatter(use_colors=sys.stdout.isatty(), include_extra=True)
    )
    root_logger.addHandler(console_handler)

    perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
    perf_logger.handlers.clear()
    perf_logger.setLevel(logging.INFO)
    perf_logger.propagate = False

    file_path = None
    if log_to_file:
        directory = Path(log_dir) if log_dir is not None else Path(DEFAULT_LOG_DIR)
        directory.mkdir(parents=True, exist_ok=True)

        # === Main log file ===
        file_path = Path(log_file) if log_file else directory / DEFAULT_LOG_FILE_NAME
        file_handler = logging.handlers.RotatingFileHandler(
            file_path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(
            SolverLogFormatter(use_colors=False, include_extra=True)
        )
        root_logger.addHandler(file_handler)

        # === Error-only log file ===
        error_handler = logging.handlers.RotatingFileHandler(
            directory / ERROR_LOG_FILE_NAME,
            maxBytes=LOG_FILE_MAX_BYTES // 2,
            backupCount=3,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(
            SolverLogFormatter(use_colors=False, include_extra=True)
        )
        root_logger.addHandler(error_handler)

        # === Performance log file ===
        if enable_performance_logging:
            perf_handler = logging.handlers.RotatingFileHandler(
                directory / PERFORMANCE_LOG_FILE_NAME,
                maxBytes=LOG_FILE_MAX_BYTES // 2,
                backupCount=3,
                encoding="utf-8",
            )
            perf_handler.setFormatter(
                SolverLogFormatter(use_colors=False, include_extra=True)
            )
            perf_logger.addHandler(perf_handler)

    if not perf_logger.handlers:
        perf_logger.addHandler(logging.NullHandler())

    logger = logging.getLogger("solver.logging_config")
    logger.info(
        "Logging initialized",
        extra={
            "extra_info": {
                "console_level": logging.getLevelName(console_level),
                "file_level": logging.getLevelName(file_level),
                "log_file": str(file_path) if file_path else None,
                "performance_logging": enable_performance_logging,
            }
        },
    )


def get_logger(name: str) -> StructuredLogger:
    """
    Create a structured logger for a component.

    Args:
        name: Name of the component (usually __name__)

    Returns:
        StructuredLogger instance

    Example:
        logger = get_logger(__name__)
        logger.info("Constraint added", extra={"name": "Fixed"})
    """
    base_logger = logging.getLogger(name)
    return StructuredLogger(base_logger, {})


# === Convenience functions ===


def log_component_start(
    logger: StructuredLogger, component_name: str, **context: Any
) -> None:
    """Log the start of a component operation."""
    logger.info(f"START: {component_name}", extra=context)


def log_component_end(
    logger: StructuredLogger, component_name: str, **context: Any
) -> None:
    """Log the successful end of a component operation."""
    logger.info(f"END: {component_name}", extra=context)


def log_component_error(
    logger: StructuredLogger, component_name: str, error: Exception, **context: Any
) -> None:
    """Log a component failure with full traceback."""
    logger.log_exception(error, message=f"ERROR in {component_name}", **context)
