"""
Logging for the sampling engine.

All loggers hang below "motion_path"; a shared LogManager owns the console
and rotating-file handlers on that logger and re-applies levels whenever the
logging section of the configuration changes. It also keeps per-operation
timing statistics fed by the timed decorator.
"""

import os
import sys
import time
import logging
import logging.handlers
import threading
from typing import Dict, Any, Optional
import functools
import traceback

from motion_path.utils.config import config_manager, LoggingConfig

ROOT_LOGGER_NAME = "motion_path"


class LogFormatter(logging.Formatter):
    """Colors the level name when writing to a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str = None, datefmt: str = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if not (self.use_colors and sys.stdout.isatty()):
            return super().format(record)

        plain = record.levelname
        record.levelname = f"{self.COLORS.get(plain, self.RESET)}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


class PerformanceTracker:
    """
    Wall-clock statistics per named operation.

    Every start_timer call returns its own id, so overlapping runs of one
    operation are measured independently.
    """

    def __init__(self):
        self.metrics = {}
        self.lock = threading.RLock()
        self._next_id = 0

    @staticmethod
    def _new_entry(ongoing: Optional[Dict[int, float]] = None) -> Dict[str, Any]:
        return {
            'count': 0,
            'total_time': 0.0,
            'min_time': float('inf'),
            'max_time': 0.0,
            'ongoing': {} if ongoing is None else ongoing,
        }

    def start_timer(self, operation: str) -> int:
        with self.lock:
            self._next_id += 1
            entry = self.metrics.setdefault(operation, self._new_entry())
            entry['ongoing'][self._next_id] = time.perf_counter()
            return self._next_id

    def stop_timer(self, operation: str, timer_id: int) -> float:
        """
        Close a running timer and fold it into the statistics.

        Returns:
            float: Elapsed seconds

        Raises:
            ValueError: If no such timer is running
        """
        now = time.perf_counter()
        with self.lock:
            entry = self.metrics.get(operation)
            if entry is None or timer_id not in entry['ongoing']:
                raise ValueError(f"No timer found for {operation} with ID {timer_id}")

            elapsed = now - entry['ongoing'].pop(timer_id)
            entry['count'] += 1
            entry['total_time'] += elapsed
            entry['min_time'] = min(entry['min_time'], elapsed)
            entry['max_time'] = max(entry['max_time'], elapsed)
            return elapsed

    @staticmethod
    def _summary(entry: Dict[str, Any]) -> Dict[str, Any]:
        summary = {k: v for k, v in entry.items() if k != 'ongoing'}
        summary['avg_time'] = entry['total_time'] / entry['count'] if entry['count'] else 0.0
        return summary

    def get_metrics(self, operation: Optional[str] = None) -> Dict[str, Any]:
        """Summary of one operation ({} if unknown), or of all of them keyed by name."""
        with self.lock:
            if operation:
                entry = self.metrics.get(operation)
                return self._summary(entry) if entry else {}
            return {name: self._summary(entry) for name, entry in self.metrics.items()}

    def reset(self, operation: Optional[str] = None) -> None:
        """Clear statistics; timers still running survive."""
        with self.lock:
            for name in ([operation] if operation else list(self.metrics)):
                if name in self.metrics:
                    self.metrics[name] = self._new_entry(self.metrics[name]['ongoing'])


class LogManager:
    """
    Shared owner of the motion_path handlers and component loggers.
    """

    _instance = None
    _lock = threading.RLock()

    def __new__(cls, *args, **kwargs):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
            return cls._instance

    def __init__(self, config: Optional[LoggingConfig] = None):
        with self._lock:
            if self._initialized:
                return

            self._config = config or config_manager.get_logging_config()
            self._root_logger = logging.getLogger(ROOT_LOGGER_NAME)
            self._handlers = []
            self._loggers = {}
            self.performance = PerformanceTracker()

            self._install_handlers()
            config_manager.add_listener(self._on_config_changed)
            self._initialized = True

    @staticmethod
    def _level(name: str) -> int:
        return getattr(logging, str(name).upper(), logging.INFO)

    def _component_level(self, component: str) -> int:
        return self._level(self._config.component_levels.get(component, self._config.level))

    def _install_handlers(self) -> None:
        for handler in self._handlers:
            self._root_logger.removeHandler(handler)
            handler.close()
        self._handlers = []

        level = self._level(self._config.level)
        self._root_logger.setLevel(level)

        if self._config.console_output:
            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(LogFormatter(self._config.format, self._config.date_format))
            self._add_handler(console, level)

        if self._config.file_output:
            log_dir = os.path.dirname(self._config.file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            rotating = logging.handlers.RotatingFileHandler(
                self._config.file_path,
                maxBytes=self._config.max_file_size,
                backupCount=self._config.backup_count,
            )
            rotating.setFormatter(logging.Formatter(self._config.format, self._config.date_format))
            self._add_handler(rotating, level)

    def _add_handler(self, handler: logging.Handler, level: int) -> None:
        handler.setLevel(level)
        self._root_logger.addHandler(handler)
        self._handlers.append(handler)

    def _on_config_changed(self, section: str) -> None:
        if section != 'logging':
            return
        with self._lock:
            self._config = config_manager.get_logging_config()
            self._install_handlers()
            for component, logger in self._loggers.items():
                logger.setLevel(self._component_level(component))

    def get_logger(self, component: str) -> logging.Logger:
        """Logger "motion_path.<component>", at the component's configured level."""
        with self._lock:
            logger = self._loggers.get(component)
            if logger is None:
                logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")
                logger.setLevel(self._component_level(component))
                self._loggers[component] = logger
            return logger


def timed(operation: str):
    """
    Record the run time of every call under operation.

    The time is recorded whether the call returns or raises.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            timer_id = log_manager.performance.start_timer(operation)
            try:
                return func(*args, **kwargs)
            finally:
                elapsed = log_manager.performance.stop_timer(operation, timer_id)
                perf_logger = log_manager.get_logger("performance")
                if perf_logger.isEnabledFor(logging.DEBUG):
                    perf_logger.debug(f"{operation} completed in {elapsed * 1000:.3f} ms")
        return wrapper
    return decorator


def log_exceptions(component: str = "exceptions"):
    """Log any exception escaping the call on the component logger, then re-raise it."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                log_manager.get_logger(component).error(
                    f"Exception in {func.__name__}: {e}\n{traceback.format_exc()}"
                )
                raise
        return wrapper
    return decorator


log_manager = LogManager()


def get_logger(component: str) -> logging.Logger:
    return log_manager.get_logger(component)


def get_performance_metrics(operation: Optional[str] = None) -> Dict[str, Any]:
    return log_manager.performance.get_metrics(operation)


def reset_performance_metrics(operation: Optional[str] = None) -> None:
    log_manager.performance.reset(operation)
