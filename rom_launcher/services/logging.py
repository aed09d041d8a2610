"""Logging configuration service for the ROM launcher."""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

APP_DIR_NAME = "RomLauncher"
LOG_FILE_NAME = "rom-launcher.log"
LOG_RETENTION_DAYS = 30


def default_log_dir() -> Path:
    """Return the per-user local application data directory for log files."""
    if sys.platform.startswith("win"):
        base = Path(os.environ.get("LOCALAPPDATA", str(Path.home() / "AppData" / "Local")))
    else:
        base = Path(os.environ.get("XDG_DATA_HOME", str(Path.home() / ".local" / "share")))
    return base / APP_DIR_NAME


class LoggingService:
    """Service for configuring and managing application logging."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Path | None = None,
    ) -> None:
        """Initialize the logging service.

        Args:
            log_level: The minimum log level to capture
            log_dir: Directory for log files (None for console only)
        """
        self.log_level = log_level.upper()
        self.log_dir = log_dir
        self.is_development = os.getenv("ENVIRONMENT", "development") == "development"
        self._handlers: list[logging.Handler] = []

    def configure(self) -> None:
        """Configure structlog with appropriate processors and handlers."""
        self._configure_stdlib_logging()

        structlog.configure(
            processors=self._get_processors(),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def shutdown(self) -> None:
        """Flush and close every handler installed by configure()."""
        root_logger = logging.getLogger()
        for handler in self._handlers:
            handler.flush()
            handler.close()
            root_logger.removeHandler(handler)
        self._handlers.clear()

    def _configure_stdlib_logging(self) -> None:
        """Configure standard library logging handlers."""
        root_logger = logging.getLogger()
        root_logger.handlers.clear()

        numeric_level = getattr(logging, self.log_level, logging.INFO)
        root_logger.setLevel(numeric_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        if self.is_development:
            console_handler.setFormatter(self._formatter(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())))
        else:
            console_handler.setFormatter(self._json_formatter())
        self._add_handler(root_logger, console_handler)

        if self.log_dir:
            self._setup_file_logging(root_logger, numeric_level)

    def _setup_file_logging(self, root_logger: logging.Logger, level: int) -> None:
        """Set up a daily rolling log file."""
        if not self.log_dir:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=self.log_dir / LOG_FILE_NAME,
            when="midnight",
            backupCount=LOG_RETENTION_DAYS,
            encoding="utf-8",
        )
        file_handler.setLevel(level)

        # Always use JSON format for file logs
        file_handler.setFormatter(self._json_formatter())
        self._add_handler(root_logger, file_handler)

    def _add_handler(self, root_logger: logging.Logger, handler: logging.Handler) -> None:
        root_logger.addHandler(handler)
        self._handlers.append(handler)

    def _get_processors(self) -> list[Any]:
        """Get the structlog processors shared by every handler."""
        return [
            structlog.stdlib.filter_by_level,
            *self._shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ]

    @staticmethod
    def _shared_processors() -> list[Any]:
        return [
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]

    def _formatter(self, renderer: Any, *extra: Any) -> structlog.stdlib.ProcessorFormatter:
        return structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=self._shared_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *extra,
                renderer,
            ],
        )

    def _json_formatter(self) -> structlog.stdlib.ProcessorFormatter:
        return self._formatter(
            structlog.processors.JSONRenderer(),
            structlog.processors.format_exc_info,
        )

    def get_logger(self, name: str | None = None) -> structlog.stdlib.BoundLogger:
        """Get a configured logger instance.

        Args:
            name: Logger name (defaults to calling module)

        Returns:
            Configured structlog logger
        """
        return structlog.stdlib.get_logger(name)


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    environment: str | None = None,
) -> LoggingService:
    """Set up application logging with the specified configuration.

    Args:
        log_level: Minimum log level to capture
        log_dir: Directory for log files (None for console only)
        environment: Environment name (development/production)

    Returns:
        Configured LoggingService instance
    """
    if environment:
        os.environ["ENVIRONMENT"] = environment

    service = LoggingService(log_level=log_level, log_dir=log_dir)
    service.configure()
    return service
