"""
Centralized logging configuration for CycleRoute Planner.
Provides structured logging with appropriate levels and formatting.
"""

import functools
import logging
import sys
import time
from datetime import datetime
from pathlib import Path

ROOT_LOGGER_NAME = "cycleroute"


def setup_logging(log_level: str = "INFO", log_to_file: bool = True,
                  log_dir: str = "logs") -> logging.Logger:
    """
    Setup centralized logging configuration for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to also log to a file
        log_dir: Directory for the daily log file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Clear any existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_to_file:
        try:
            directory = Path(log_dir)
            directory.mkdir(exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d")
            log_file = directory / f"cycleroute_{timestamp}.log"

            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            logger.info(f"Logging to file: {log_file}")
        except OSError as e:
            logger.warning(f"Could not setup file logging: {e}")

    logger.info("CycleRoute logging system initialized")
    logger.debug(f"Log level set to: {log_level}")

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Logger instance parented under the application logger
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)

    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def log_function_entry(logger: logging.Logger, func_name: str, **kwargs):
    """Log function entry with parameters."""
    if kwargs:
        params = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        logger.debug(f"Entering {func_name}({params})")
    else:
        logger.debug(f"Entering {func_name}()")


def log_function_exit(logger: logging.Logger, func_name: str, result=None):
    """Log function exit with optional return value type."""
    if result is not None:
        logger.debug(f"Exiting {func_name}() -> {type(result).__name__}")
    else:
        logger.debug(f"Exiting {func_name}()")


def log_error(logger: logging.Logger, error: Exception, context: str = None):
    """
    Log an error with context information.

    Args:
        logger: Logger instance
        error: Exception instance
        context: Additional context about where the error occurred
    """
    error_msg = f"{type(error).__name__}: {str(error)}"
    if context:
        error_msg = f"{context} - {error_msg}"

    logger.error(error_msg, exc_info=True)


def log_performance(logger: logging.Logger, operation: str, duration: float, details: str = None):
    """
    Log performance metrics.

    Args:
        logger: Logger instance
        operation: Description of the operation
        duration: Time taken in seconds
        details: Additional details about the operation
    """
    perf_msg = f"Performance: {operation} took {duration:.3f}s"
    if details:
        perf_msg += f" ({details})"

    logger.info(perf_msg)


def log_execution_time(logger: logging.Logger = None):
    """
    Decorator to log function execution time.

    Args:
        logger: Logger instance (resolved from the function's module if not provided)
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            active_logger = logger or get_logger(func.__module__)

            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = time.time() - start_time
                log_performance(active_logger, f"{func.__name__} (failed)", duration)
                log_error(active_logger, e, f"Error in {func.__name__}")
                raise
            log_performance(active_logger, func.__name__, time.time() - start_time)
            return result

        return wrapper
    return decorator
