"""
Logging configuration for lila-docker

Provides structured logging with both console output and file logging.
Output of external commands goes to dedicated files in the logs/ directory.
"""

import logging
import logging.handlers
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional


def setup_logging(
    log_dir: str = "logs",
    verbose: bool = False,
    log_level: Optional[str] = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Set up logging for lila-docker operations.

    Args:
        log_dir: Directory for log files
        verbose: Enable verbose console output
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
        enable_file_logging: Whether to write logs to files

    Returns:
        Configured logger instance
    """
    log_path = Path(log_dir)
    if enable_file_logging:
        (log_path / "commands").mkdir(parents=True, exist_ok=True)

    if log_level:
        level = getattr(logging, log_level.upper(), logging.INFO)
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if enable_file_logging else level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stderr keeps the console free for the tools' own output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if enable_file_logging:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"lila-docker_{timestamp}.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logger = logging.getLogger("lila_docker")
    logger.debug(f"Logging initialized - Level: {logging.getLevelName(level)}")
    if enable_file_logging:
        logger.debug(f"Log directory: {log_path.absolute()}")

    return logger


def get_subprocess_log_file(operation: str, log_dir: str = "logs") -> str:
    """
    Generate timestamped log file path for an external command.

    Args:
        operation: Operation name (e.g., 'git', 'compose', 'seed')
        log_dir: Base log directory

    Returns:
        Full path to log file for the command output
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = Path(log_dir) / "commands" / f"{operation}_{timestamp}.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)
    return str(log_file)


_SECRET_PATTERNS = [
    (re.compile(r"(--(?:su-)?password=)\S+"), r"\1***"),
    (re.compile(r"\b((?:SU_)?PASSWORD=)\S+"), r"\1***"),
    (re.compile(r"(mongodb://[^:/\s]+:)[^@\s]+(@)"), r"\1***\2"),
]


def mask_sensitive_data(message: str) -> str:
    """
    Mask passwords in log messages.

    Args:
        message: Log message that may contain sensitive data

    Returns:
        Message with sensitive information masked
    """
    for pattern, replacement in _SECRET_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class SubprocessLogHandler:
    """
    Handler for external commands with dedicated logging.
    """

    def __init__(self, operation: str, log_dir: str = "logs"):
        """
        Initialize subprocess log handler.

        Args:
            operation: Name of the operation being logged
            log_dir: Base directory for log files
        """
        self.operation = operation
        self.log_file = get_subprocess_log_file(operation, log_dir)
        self.logger = logging.getLogger(f"lila_docker.subprocess.{operation}")

        for existing in self.logger.handlers[:]:
            self.logger.removeHandler(existing)
            existing.close()

        handler = logging.FileHandler(self.log_file)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        self.logger.addHandler(handler)
        self.logger.setLevel(logging.DEBUG)

    def log_command(self, command: List[str]) -> None:
        """Log the command being executed."""
        masked_command = [mask_sensitive_data(arg) for arg in command]
        self.logger.info(f"Executing command: {' '.join(masked_command)}")

    def log_output(self, output: str, level: int = logging.INFO) -> None:
        """Log command output."""
        if output.strip():
            self.logger.log(level, mask_sensitive_data(output.strip()))

    def log_completion(self, return_code: int, elapsed_time: float) -> None:
        """Log command completion."""
        if return_code == 0:
            self.logger.info(
                f"✓ {self.operation} completed successfully in {elapsed_time:.2f}s"
            )
        else:
            self.logger.error(
                f"✗ {self.operation} failed with return code {return_code} after {elapsed_time:.2f}s"
            )

    def get_log_file_path(self) -> str:
        """Get the path to the log file for this operation."""
        return self.log_file
