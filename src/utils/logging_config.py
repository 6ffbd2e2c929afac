"""Logging configuration for SnapMark Bridge."""

import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


SENSITIVE_FIELDS = ('password', 'api_key', 'secret', 'token', 'authorization')


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output."""

    # Color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Format log record with colors."""
        # Work on a copy so file handlers don't receive escape codes
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        record.levelname = f"{color}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


class StructuredFormatter(logging.Formatter):
    """Structured formatter for file output."""

    def format(self, record):
        """Format log record with structured information."""
        record.timestamp = datetime.now(timezone.utc).isoformat()
        record.component = record.name.split('.')[-1]
        return super().format(record)


class LoggingConfig:
    """Centralized logging configuration."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: str = "logs",
        max_file_size: int = 5 * 1024 * 1024,  # 5MB
        backup_count: int = 3,
        enable_console: bool = True,
        enable_file: bool = True
    ):
        """Initialize logging configuration.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files
            max_file_size: Maximum size of each log file in bytes
            backup_count: Number of backup files to keep
            enable_console: Whether to enable console logging
            enable_file: Whether to enable file logging
        """
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        self.log_dir = Path(log_dir)
        self.max_file_size = max_file_size
        self.backup_count = backup_count
        self.enable_console = enable_console
        self.enable_file = enable_file

        if self.enable_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self._setup_logging()

    def _rotating_handler(self, filename: str, level: int, formatter: logging.Formatter) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            filename=self.log_dir / filename,
            maxBytes=self.max_file_size,
            backupCount=self.backup_count,
            encoding='utf-8'
        )
        handler.setLevel(level)
        handler.setFormatter(formatter)
        return handler

    def _setup_logging(self):
        """Attach console and rotating file handlers.

        Endpoint requests go to the ``api`` logger and its own file; they
        reach the console through propagation only.
        """
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)
        root_logger.handlers.clear()

        api_logger = logging.getLogger('api')
        api_logger.handlers.clear()
        api_logger.setLevel(logging.INFO)
        api_logger.propagate = self.enable_console

        if self.enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self.log_level)
            console_handler.setFormatter(ColoredFormatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            root_logger.addHandler(console_handler)

        if self.enable_file:
            file_formatter = StructuredFormatter(
                fmt='%(timestamp)s | %(levelname)-8s | %(component)-15s | %(message)s'
            )
            root_logger.addHandler(self._rotating_handler("snapmark_bridge.log", self.log_level, file_formatter))
            root_logger.addHandler(self._rotating_handler("errors.log", logging.ERROR, file_formatter))
            api_logger.addHandler(self._rotating_handler("api.log", logging.INFO, file_formatter))


class RequestLogger:
    """Logger for outbound HTTP requests."""

    def __init__(self, logger: logging.Logger):
        """Initialize request logger.

        Args:
            logger: Logger instance to use
        """
        self.logger = logger

    def log_outbound_request(
        self,
        operation: str,
        method: str,
        url: str,
        status_code: Optional[int],
        response_time_ms: float,
        error_message: Optional[str] = None
    ):
        """Log a request made to the configured endpoint.

        Args:
            operation: Operation that issued the request (test_connection, get_models)
            method: HTTP method
            url: Requested URL
            status_code: HTTP status code, None when no response was received
            response_time_ms: Elapsed time in milliseconds
            error_message: Error message if the request failed
        """
        message = (
            f"{operation} - \"{method} {url}\" "
            f"{status_code if status_code is not None else '-'} {response_time_ms:.2f}ms"
        )

        if error_message:
            message += f" - Error: {error_message}"

        if status_code is None or status_code >= 500:
            self.logger.error(message)
        elif status_code >= 400:
            self.logger.warning(message)
        else:
            self.logger.info(message)


class ErrorLogger:
    """Failure records written to the ``errors`` logger."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log_exception(
        self,
        exception: Exception,
        context: Optional[str] = None,
        extra_data: Optional[dict] = None
    ):
        """Log an unexpected exception with its traceback.

        Args:
            exception: Exception to log
            context: Where it happened, prefixed to the message
            extra_data: Request details appended to the message
        """
        parts = [f"{type(exception).__name__}: {exception}"]
        if context:
            parts.insert(0, context)
        if extra_data:
            parts.append(f"details={extra_data}")

        self.logger.error(" - ".join(parts), exc_info=exception)

    def log_validation_error(
        self,
        field: str,
        value: str,
        error_message: str,
        form_type: str = "unknown"
    ):
        """Log a rejected setting; sensitive values are masked."""
        if field.lower() in SENSITIVE_FIELDS:
            value = "***MASKED***"

        self.logger.warning(f"Invalid {form_type} field {field}={value!r}: {error_message}")

    def log_configuration_error(self, path: str, error_message: str, operation: str = "unknown"):
        """Log a configuration file that could not be read or written."""
        self.logger.error(f"Configuration {operation} failed for {path}: {error_message}")

    def log_api_error(
        self,
        operation: str,
        endpoint: str,
        error_kind: str,
        error_message: str,
        status_code: Optional[int] = None
    ):
        """Log a failed endpoint operation.

        Args:
            operation: test_connection or get_models
            endpoint: Requested URL
            error_kind: ErrorKind value
            error_message: User-facing message
            status_code: HTTP status code, if a response was received
        """
        status = status_code if status_code is not None else '-'
        self.logger.warning(f"{operation} failed: {endpoint} kind={error_kind} status={status} - {error_message}")


# Global logging configuration
_logging_config: Optional[LoggingConfig] = None


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def setup_logging(
    log_level: str = None,
    log_dir: str = None,
    enable_console: bool = True,
    enable_file: bool = None
) -> LoggingConfig:
    """Setup global logging configuration.

    Args:
        log_level: Logging level, defaults to LOG_LEVEL or INFO
        log_dir: Log directory, defaults to LOG_DIR or ./logs
        enable_console: Whether to enable console logging
        enable_file: Whether to enable file logging, defaults to LOG_TO_FILE

    Returns:
        LoggingConfig instance
    """
    global _logging_config

    log_level = log_level or os.getenv('LOG_LEVEL', 'INFO')
    log_dir = log_dir or os.getenv('LOG_DIR', 'logs')
    if enable_file is None:
        enable_file = _env_flag('LOG_TO_FILE', True)

    _logging_config = LoggingConfig(
        log_level=log_level,
        log_dir=log_dir,
        enable_console=enable_console,
        enable_file=enable_file
    )

    # Keep third-party chatter down
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return _logging_config


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, configuring logging on first use."""
    if _logging_config is None:
        setup_logging()

    return logging.getLogger(name)


def get_api_logger() -> logging.Logger:
    """Logger for outbound endpoint requests."""
    return get_logger("api")


def get_request_logger() -> RequestLogger:
    """Get a request logger instance."""
    return RequestLogger(get_api_logger())


def get_error_logger() -> ErrorLogger:
    """Get an error logger instance."""
    return ErrorLogger(get_logger('errors'))
