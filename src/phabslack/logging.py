"""Centralized logging configuration for phabslack.

Provides rotating file logs with consistent formatting across all components.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Default configuration
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "phabslack.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

# Log format
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
    file: bool = True,
) -> logging.Logger:
    """Set up logging for the webhook service.

    Args:
        log_dir: Directory for log files. Defaults to 'logs' in current directory.
                 Can be overridden with PHABSLACK_LOG_DIR environment variable.
        log_file: Log file name. Defaults to 'phabslack.log'.
        max_bytes: Maximum size per log file before rotation. Defaults to 10MB.
        backup_count: Number of backup files to keep. Defaults to 5.
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to INFO.
               Can be overridden with PHABSLACK_LOG_LEVEL environment variable.
        console: Whether to also log to console. Defaults to True.
        file: Whether to write the rotating log file. Serverless hosts with a
              read-only filesystem should pass False.

    Returns:
        The root phabslack logger.
    """
    if level is None:
        level = os.environ.get("PHABSLACK_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("phabslack")
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    log_path: Path | None = None
    if file:
        if log_dir is None:
            log_dir = os.environ.get("PHABSLACK_LOG_DIR", DEFAULT_LOG_DIR)
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        log_path = log_dir / log_file
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.info("phabslack logging initialized (level=%s, file=%s)", level, log_path)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component.

    Args:
        name: Component name (e.g., 'api', 'phabricator').
              Will be prefixed with 'phabslack.'.

    Returns:
        Logger instance for the component.
    """
    if not name.startswith("phabslack."):
        name = f"phabslack.{name}"
    return logging.getLogger(name)


def truncate_output(output: str, max_length: int = 2000) -> str:
    """Truncate long output (e.g. an upstream response body) for logging."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"\n... [truncated, {len(output) - max_length} more chars]"


def sanitize_for_log(text: str) -> str:
    """Remove sensitive data from log output.

    Args:
        text: Text that may contain sensitive data.

    Returns:
        Sanitized text safe for logging.
    """
    patterns = [
        (r"api-[a-z0-9]{28}", "[CONDUIT_TOKEN]"),  # Conduit API token
        (r"cli-[a-z0-9]{28}", "[CONDUIT_TOKEN]"),  # Conduit CLI token
        (r"v0=[a-f0-9]{64}", "v0=[SIGNATURE]"),  # Slack request signature
        (r"Bearer [a-zA-Z0-9._-]+", "Bearer [REDACTED]"),  # Bearer tokens
        (r"token=[a-zA-Z0-9._-]+", "token=[REDACTED]"),  # Query param tokens
        (r'"token":\s*"[^"]*"', '"token": "[REDACTED]"'),  # Conduit params payload
    ]

    result = text
    for pat, replacement in patterns:
        result = re.sub(pat, replacement, result)

    return result
