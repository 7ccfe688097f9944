"""
System Reporter - Centralized logging for veilleur components.

Provides SystemReporter for console logging (stdout) with an optional
log file, verbosity filtering and component context prefixes.
"""

import copy
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class SystemReporter:
    """
    Logger with verbose filtering.

    Every message carries a context (component name) and a verbose
    level. Messages above the configured verbosity are dropped before
    they reach the logging module.

    Verbose Levels:
        0 = Critical only (always visible)
        1 = Important messages (default)
        2 = Detailed information (-v)
        3 = Debug/verbose
    """

    def __init__(
        self,
        name: str = "veilleur",
        log_dir: Optional[str] = None,
        level: int = logging.INFO,
        verbose: int = 1,
    ) -> None:
        """
        Initialize SystemReporter.

        Args:
            name: Logger name (used for filename if log_dir provided)
            log_dir: Directory for log files. If None, logs to stdout only.
            level: Python logging level
            verbose: Verbosity filter (0-3)
        """
        self.name = name
        self.log_dir = log_dir
        self.verbose = max(0, min(3, verbose))
        self._init_logger(name, log_dir, level)

    def _init_logger(self, name: str, log_dir: Optional[str], level: int) -> None:
        """
        Initialize logger with console and optional file handler.

        Args:
            name: Logger name
            log_dir: Log directory path (None = stdout only)
            level: Python logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.propagate = False
        self.logger.handlers.clear()

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(
                os.path.join(log_dir, f"{name}.log"), encoding="utf-8"
            )
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def with_verbosity(self, verbose: int) -> "SystemReporter":
        """
        Create a reporter sharing this logger with another verbosity.

        Used for per-repository verbosity coming from .ci-settings.yaml.

        Args:
            verbose: Verbosity filter (0-3)

        Returns:
            New SystemReporter bound to the same logger
        """
        clone = copy.copy(self)
        clone.verbose = max(0, min(3, verbose))
        return clone

    def _should_log(self, verbose_level: int) -> bool:
        """Check if message should be logged."""
        return self.verbose >= verbose_level

    def _emit(
        self, log_level: int, msg: str, context: str, verbose_level: int
    ) -> None:
        if self._should_log(verbose_level):
            self.logger.log(log_level, f"[{context}] {msg}")

    # Core logging methods
    def info(self, msg: str, context: str = "system", verbose_level: int = 1) -> None:
        """Log info message."""
        self._emit(logging.INFO, msg, context, verbose_level)

    def warning(
        self, msg: str, context: str = "system", verbose_level: int = 1
    ) -> None:
        """Log warning message."""
        self._emit(logging.WARNING, msg, context, verbose_level)

    def error(self, msg: str, context: str = "system", verbose_level: int = 0) -> None:
        """Log error message."""
        self._emit(logging.ERROR, msg, context, verbose_level)
