"""
Centralized logging configuration for D-Vault.

Provides:
- Console logging with colored, prefixed output by application area
- Optional file logging with timestamps for post-mortem analysis
- Easy-to-use logger factory for different components

Plaintext field values must never be passed to these loggers.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# ANSI color codes for console output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_BLUE = "\033[94m"
    BRIGHT_MAGENTA = "\033[95m"
    BRIGHT_CYAN = "\033[96m"


# Area-specific colors and prefixes
AREA_CONFIG = {
    "main": {"color": Colors.BRIGHT_CYAN, "prefix": "DVAULT.main"},
    "reveal": {"color": Colors.BRIGHT_MAGENTA, "prefix": "DVAULT.reveal"},
    "audit": {"color": Colors.BRIGHT_YELLOW, "prefix": "DVAULT.audit"},
    "decrypt": {"color": Colors.BRIGHT_GREEN, "prefix": "DVAULT.decrypt"},
    "vault": {"color": Colors.BRIGHT_BLUE, "prefix": "DVAULT.vault"},
    "bridge": {"color": Colors.CYAN, "prefix": "DVAULT.bridge"},
}

# Default for unknown areas
DEFAULT_AREA_CONFIG = {"color": Colors.WHITE, "prefix": "DVAULT"}


class ColoredConsoleFormatter(logging.Formatter):
    """Custom formatter that adds colors and area prefixes to console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DIM,
        logging.INFO: Colors.RESET,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BRIGHT_RED + Colors.BOLD,
    }

    def __init__(self, area: str = "main"):
        super().__init__()
        config = AREA_CONFIG.get(area, DEFAULT_AREA_CONFIG)
        self.area_color = config["color"]
        self.area_prefix = config["prefix"]

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.LEVEL_COLORS.get(record.levelno, Colors.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        # Format: [DVAULT.area] HH:MM:SS LEVEL: message
        prefix = f"{self.area_color}[{self.area_prefix}]{Colors.RESET}"
        time_str = f"{Colors.DIM}{timestamp}{Colors.RESET}"
        level_str = f"{level_color}{record.levelname:<8}{Colors.RESET}"

        return f"{prefix} {time_str} {level_str} {record.getMessage()}"


class FileFormatter(logging.Formatter):
    """Formatter for file output with full timestamps and structured format."""

    def __init__(self, area: str = "main"):
        super().__init__()
        config = AREA_CONFIG.get(area, DEFAULT_AREA_CONFIG)
        self.area_prefix = config["prefix"]

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

        # Records propagated from area loggers carry their own prefix
        prefix = self.area_prefix
        if record.name.startswith("dvault."):
            prefix = AREA_CONFIG.get(record.name[len("dvault."):], DEFAULT_AREA_CONFIG)["prefix"]

        # Include extra context if available
        extra = ""
        if hasattr(record, "record_id"):
            extra += f" record_id={record.record_id}"
        if hasattr(record, "field_name"):
            extra += f" field_name={record.field_name}"

        return f"{timestamp} [{prefix}] {record.levelname}: {record.getMessage()}{extra}"


_log_dir: Optional[Path] = None
_file_handler: Optional[logging.FileHandler] = None


def setup_logging(
    log_dir: Optional[str] = None,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Initialize file logging.

    Args:
        log_dir: Directory for log files. Defaults to ~/.dvault/logs
        file_level: Minimum level for file output

    Returns:
        Path to the log directory
    """
    global _log_dir, _file_handler

    if log_dir:
        _log_dir = Path(log_dir)
    else:
        _log_dir = Path.home() / ".dvault" / "logs"

    _log_dir.mkdir(parents=True, exist_ok=True)

    log_filename = datetime.now().strftime("dvault_%Y%m%d_%H%M%S.log")
    log_path = _log_dir / log_filename

    _file_handler = logging.FileHandler(log_path, encoding="utf-8")
    _file_handler.setLevel(file_level)
    _file_handler.setFormatter(FileFormatter("main"))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()
    root_logger.addHandler(_file_handler)

    root_logger.info(f"Logging initialized. Log file: {log_path}")

    return _log_dir


def get_logger(area: str = "main") -> logging.Logger:
    """
    Get a logger for a specific application area.

    Args:
        area: The application area (e.g., "reveal", "audit", "bridge")

    Returns:
        Configured logger instance

    Example:
        logger = get_logger("reveal")
        logger.info("Field password revealed")
        # Output: [DVAULT.reveal] 14:32:15 INFO     Field password revealed
    """
    logger = logging.getLogger(f"dvault.{area}")

    # Only configure if not already done
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(ColoredConsoleFormatter(area))
        logger.addHandler(console_handler)

    return logger


def get_log_dir() -> Optional[Path]:
    """Get the current log directory path."""
    return _log_dir
