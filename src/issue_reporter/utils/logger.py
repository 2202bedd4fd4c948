#!/usr/bin/env python3
"""
Logging for the issue reporter.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
import threading

class ReporterLogger:
    """
    Custom logger for ticket creation with timestamp and formatting.
    """

    def __init__(self, log_file: Optional[str] = None, log_level: str = "INFO"):
        """
        Initialize the reporter logger.

        Args:
            log_file: Path to log file (optional)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        self.logger = logging.getLogger('issue_reporter')
        self.logger.setLevel(getattr(logging, log_level.upper()))

        # Clear any existing handlers
        self.logger.handlers.clear()

        console_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        file_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | [%(threadName)s] | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, log_level.upper()))
        console_handler.setFormatter(console_formatter)
        self.logger.addHandler(console_handler)

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # File gets all logs
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

        # Requests for different reports log concurrently
        self._lock = threading.Lock()

    def _log_with_emoji(self, level: int, emoji: str, message: str, *args, **kwargs):
        """Log message with emoji prefix."""
        with self._lock:
            self.logger.log(level, f"{emoji} {message}", *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._log_with_emoji(logging.DEBUG, '🔍', message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._log_with_emoji(logging.INFO, 'ℹ️', message, *args, **kwargs)

    def success(self, message: str, *args, **kwargs):
        self._log_with_emoji(logging.INFO, '✅', message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._log_with_emoji(logging.WARNING, '⚠️', message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._log_with_emoji(logging.ERROR, '❌', message, *args, **kwargs)

    def critical(self, message: str, *args, **kwargs):
        self._log_with_emoji(logging.CRITICAL, '🚨', message, *args, **kwargs)

    def ticket_start(self, summary: str):
        """Log the start of ticket creation for a report."""
        self._log_with_emoji(logging.INFO, '🔄', f"Creating ticket for report: {summary}")

    def ticket_created(self, ticket_id: str, assignee: str):
        assignee_info = assignee or "unassigned"
        self._log_with_emoji(logging.INFO, '✅', f"Created ticket {ticket_id} ({assignee_info})")

    def ticket_failed(self, error: str):
        self._log_with_emoji(logging.ERROR, '❌', f"Failed to create ticket: {error}")

    def section_truncated(self, section: str, full_length: int, allocation: int):
        self._log_with_emoji(
            logging.INFO, '✂️',
            f"Section '{section}' truncated: {full_length} chars into {allocation} char allocation"
        )

    def overflow_comment(self, ticket_id: str, length: int, status: bool, details: str = ""):
        """Log the outcome of attaching the overflow comment."""
        emoji = "📎" if status else "❌"
        level = logging.INFO if status else logging.ERROR
        message = f"Overflow comment on {ticket_id} ({length} chars): {'ADDED' if status else 'FAILED'}"
        if details:
            message += f" - {details}"
        self._log_with_emoji(level, emoji, message)

    def persisted(self, ticket_id: str, record_id: str):
        self._log_with_emoji(logging.INFO, '💾', f"Saved ticket {ticket_id} to store as {record_id}")


# Global logger instance
_reporter_logger = None

def get_logger(log_file: Optional[str] = None, log_level: str = "INFO") -> ReporterLogger:
    """
    Get or create the global reporter logger instance.

    Args:
        log_file: Path to log file (optional)
        log_level: Logging level

    Returns:
        ReporterLogger instance
    """
    global _reporter_logger
    if _reporter_logger is None:
        _reporter_logger = ReporterLogger(log_file, log_level)
    return _reporter_logger
