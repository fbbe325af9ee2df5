#!/usr/bin/env python3
"""
===========================
= ROUTE 53 ZONE VAULT =
===========================

Title: ZoneVault Utilities Module
Version: v0.1.0
Date: OCT-18-2026

Description:
Shared logging and formatting helpers for the ZoneVault menu.
The zvlib package never imports this module; it logs through its own
module loggers, which setup_logging() attaches to the same handlers.
"""

import datetime
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

# Global logger instance
logger = None
# Tracks whether setup_logging() has been explicitly called
_logging_configured = False

LOGGER_NAME = "zonevault"
# Package loggers that share the menu's handlers
LIBRARY_LOGGER_NAMES = ("zvlib",)
LOG_RETENTION_DAYS = 14


def get_logs_dir() -> Path:
    """Directory holding ZoneVault log files (next to this module)."""
    return Path(__file__).parent / "logs"


def _cleanup_old_logs(logs_dir: Path, log_retention_days: int = LOG_RETENTION_DAYS) -> None:
    """
    Remove log files older than log_retention_days from the logs directory.

    Args:
        logs_dir: Path to the logs directory
        log_retention_days: Number of days to retain log files (default: 14)
    """
    try:
        cutoff = datetime.datetime.now() - datetime.timedelta(days=log_retention_days)
        cutoff_timestamp = cutoff.timestamp()
        removed = 0
        for log_file in logs_dir.glob("*.log"):
            try:
                if log_file.stat().st_mtime < cutoff_timestamp:
                    log_file.unlink()
                    removed += 1
            except OSError:
                pass  # Skip files we cannot stat or remove
        if removed:
            logging.getLogger(LOGGER_NAME).debug(
                f"Cleaned up {removed} log file(s) older than {log_retention_days} days"
            )
    except OSError:
        pass  # Log cleanup is best-effort; never raise


def setup_logging(script_name: str = "zonevault", log_to_file: bool = True) -> logging.Logger:
    """
    Setup logging for ZoneVault with both console and file output.

    Args:
        script_name (str): Name of the script for log file naming
        log_to_file (bool): Whether to log to file in addition to console

    Returns:
        logging.Logger: Configured logger instance
    """
    global logger, _logging_configured

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers = []

    console_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(console_formatter)
    handlers = [console_handler]

    log_filepath = None
    if log_to_file:
        try:
            logs_dir = get_logs_dir()
            logs_dir.mkdir(exist_ok=True)

            # Remove stale log files before creating the new one
            _cleanup_old_logs(logs_dir)

            # MM.DD.YYYY-HHMM
            timestamp = datetime.datetime.now().strftime("%m.%d.%Y-%H%M")
            log_filepath = logs_dir / f"logs-{script_name}-{timestamp}.log"

            file_handler = logging.FileHandler(log_filepath, mode='w', encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(file_formatter)
            handlers.append(file_handler)
        except OSError as e:
            # If file logging fails, continue with console only
            log_filepath = None
            print(f"Failed to setup file logging: {e}. Continuing with console logging only.")

    for name in (LOGGER_NAME,) + LIBRARY_LOGGER_NAMES:
        target = logging.getLogger(name)
        target.setLevel(logging.DEBUG)
        target.handlers = list(handlers)
        target.propagate = False

    if log_filepath:
        logger.info(f"ZoneVault logging initialized - Log file: {log_filepath}")
        logger.info(f"Script: {script_name}")
        logger.info("=" * 80)

    _logging_configured = True
    return logger


def get_logger() -> logging.Logger:
    """
    Get the current logger instance.
    If setup_logging() has not yet been called, returns a logger with a
    NullHandler so that importing utils does not emit output.

    Returns:
        logging.Logger: Logger instance
    """
    global logger
    if logger is None:
        if _logging_configured:
            logger = setup_logging()
        else:
            null_logger = logging.getLogger(LOGGER_NAME)
            if not null_logger.handlers:
                null_logger.addHandler(logging.NullHandler())
            return null_logger
    return logger

# Do NOT call setup_logging() at module import time.


def log_error(error_message: str, error_obj: Optional[Exception] = None) -> None:
    """
    Log an error message to both console and file.

    Args:
        error_message: The error message to display
        error_obj: Optional exception object
    """
    current_logger = get_logger()
    if error_obj:
        current_logger.error(f"{error_message}: {str(error_obj)}")
        current_logger.debug(f"Exception details: {error_obj}", exc_info=True)
    else:
        current_logger.error(error_message)


def log_warning(warning_message: str) -> None:
    get_logger().warning(warning_message)


def log_info(info_message: str) -> None:
    get_logger().info(info_message)


def log_success(success_message: str) -> None:
    get_logger().info(f"SUCCESS: {success_message}")


def log_script_start(script_name: str, description: str = "") -> None:
    """
    Log the start of a script execution with standardized format.

    Args:
        script_name: Name of the script being executed
        description: Optional description of the script's purpose
    """
    current_logger = get_logger()
    current_logger.info("=" * 80)
    current_logger.info(f"SCRIPT START: {script_name}")
    if description:
        current_logger.info(f"DESCRIPTION: {description}")
    current_logger.info(f"START TIME: {get_current_timestamp()}")
    current_logger.info("=" * 80)


def log_script_end(script_name: str, start_time: Optional[datetime.datetime] = None) -> None:
    """
    Log the end of a script execution with standardized format.

    Args:
        script_name: Name of the script that was executed
        start_time: Optional start time to calculate duration
    """
    current_logger = get_logger()
    end_time = datetime.datetime.now()

    current_logger.info("=" * 80)
    current_logger.info(f"SCRIPT END: {script_name}")
    current_logger.info(f"END TIME: {end_time.strftime('%Y-%m-%d %H:%M:%S')}")
    if start_time:
        current_logger.info(f"DURATION: {end_time - start_time}")
    current_logger.info("=" * 80)


def log_section(section_name: str) -> None:
    """Log a section header for better log organization."""
    current_logger = get_logger()
    current_logger.info("-" * 50)
    current_logger.info(f"SECTION: {section_name}")
    current_logger.info("-" * 50)


def log_menu_selection(menu_path: str, selection_name: str) -> None:
    """
    Log menu selections for user activity tracking.

    Args:
        menu_path: Menu option key (e.g., "3")
        selection_name: Name of the selected option
    """
    get_logger().info(f"MENU SELECTION: {menu_path} - {selection_name}")


def log_system_info() -> None:
    """Log system information for debugging purposes (file only)."""
    import platform

    current_logger = get_logger()
    current_logger.debug("SYSTEM INFORMATION:")
    current_logger.debug(f"  Platform: {platform.system()} {platform.release()}")
    current_logger.debug(f"  Python version: {sys.version}")
    current_logger.debug(f"  Working directory: {os.getcwd()}")


def format_bytes(size_bytes: Union[int, float]) -> str:
    """
    Format bytes to human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        str: Formatted size string (e.g., "1.23 KB")
    """
    if size_bytes == 0:
        return "0 B"

    size_names = ("B", "KB", "MB", "GB", "TB")
    i = 0

    while size_bytes >= 1024 and i < len(size_names) - 1:
        size_bytes /= 1024.0
        i += 1

    return f"{size_bytes:.2f} {size_names[i]}"


def get_current_timestamp() -> str:
    """
    Get current timestamp in a standardized format.

    Returns:
        str: Formatted timestamp
    """
    return datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
