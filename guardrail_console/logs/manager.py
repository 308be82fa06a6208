"""LoggingManager - configures Python logging for the console."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional

from .config import LogConfig, load_config
from .filters import TraceIdFilter
from .formatters import ColoredFormatter, StandardFormatter, StructuredFormatter


def get_log_level(level_str: str) -> int:
    """Convert log level string to logging constant (INFO when unknown)."""
    level = logging.getLevelName(level_str.upper())
    return level if isinstance(level, int) else logging.INFO


class LoggingManager:
    """Builds handlers from a LogConfig and installs them on the root logger."""

    def __init__(self, config: LogConfig):
        self.config = config
        self._handlers: List[logging.Handler] = []

        self._setup_handlers()
        self._setup_root_logger()

    def _setup_handlers(self) -> None:
        if self.config.console.enabled:
            self._handlers.append(self._create_console_handler())

        if self.config.file is not None:
            file_handler = self._create_file_handler()
            if file_handler:
                self._handlers.append(file_handler)

        trace_filter = TraceIdFilter()
        for handler in self._handlers:
            handler.addFilter(trace_filter)

    def _create_console_handler(self) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(get_log_level(self.config.console.level))

        if self.config.console.format == "json":
            formatter: logging.Formatter = StructuredFormatter()
        elif self.config.console.format == "colored":
            formatter = ColoredFormatter()
        else:
            formatter = StandardFormatter()

        handler.setFormatter(formatter)
        return handler

    def _create_file_handler(self) -> Optional[logging.Handler]:
        file_config = self.config.file
        try:
            log_path = Path(file_config.path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.handlers.RotatingFileHandler(
                filename=str(log_path),
                maxBytes=file_config.max_bytes,
                backupCount=file_config.backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            sys.stderr.write(f"Failed to create file handler for {file_config.path}: {e}\n")
            return None

        handler.setLevel(get_log_level(file_config.level))
        handler.setFormatter(StructuredFormatter())
        return handler

    def _setup_root_logger(self) -> None:
        root_logger = logging.getLogger()
        root_logger.setLevel(get_log_level(self.config.global_level))
        root_logger.handlers.clear()
        for handler in self._handlers:
            root_logger.addHandler(handler)

    def shutdown(self) -> None:
        """Flush and detach every handler this manager installed."""
        root_logger = logging.getLogger()
        for handler in self._handlers:
            handler.flush()
            handler.close()
            root_logger.removeHandler(handler)
        self._handlers.clear()


_manager: Optional[LoggingManager] = None


def initialize(config: Optional[LogConfig] = None, config_path: Optional[str] = None) -> LoggingManager:
    """Initialize the global logging manager."""
    global _manager

    if config is None:
        config = load_config(config_path)

    if _manager is not None:
        _manager.shutdown()
    _manager = LoggingManager(config)
    return _manager
