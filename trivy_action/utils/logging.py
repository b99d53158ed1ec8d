"""Logging utilities for the trivy-action package."""

import logging
import sys
from enum import Enum
from typing import Optional

ROOT_LOGGER = "trivy_action"


class LogLevel(Enum):
    """Log level enumeration."""
    INFO = "info"
    VERBOSE = "verbose"


# Custom log level
STEP = 25  # Between INFO and WARNING


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors and emojis to log messages."""

    COLORS = {
        logging.DEBUG: "\033[36m",    # Cyan
        logging.INFO: "\033[0m",      # Reset
        STEP: "\033[34m",             # Blue
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",    # Red
        logging.CRITICAL: "\033[35m", # Magenta
    }
    RESET = "\033[0m"

    EMOJIS = {
        logging.DEBUG: "🔍",
        logging.INFO: "ℹ️ ",
        STEP: "📋",
        logging.WARNING: "⚠️ ",
        logging.ERROR: "❌",
        logging.CRITICAL: "💥",
    }

    def format(self, record: logging.LogRecord) -> str:
        emoji = self.EMOJIS.get(record.levelno, "")
        color = self.COLORS.get(record.levelno, self.RESET)
        return f"{color}{emoji} {record.getMessage()}{self.RESET}"


class PlainFormatter(logging.Formatter):
    """Plain formatter without colors (for non-terminal output)."""

    PREFIXES = {
        logging.DEBUG: "[DEBUG]",
        logging.INFO: "[INFO]",
        STEP: "[STEP]",
        logging.WARNING: "[WARN]",
        logging.ERROR: "[ERROR]",
        logging.CRITICAL: "[CRITICAL]",
    }

    def format(self, record: logging.LogRecord) -> str:
        prefix = self.PREFIXES.get(record.levelno, "[LOG]")
        return f"{prefix} {record.getMessage()}"


class GitHubActionsFormatter(logging.Formatter):
    """
    Formatter emitting GitHub Actions workflow commands.

    Errors and warnings become annotations on the job summary, debug
    messages only show when step debug logging is enabled on the runner.
    """

    COMMANDS = {
        logging.DEBUG: "::debug::",
        logging.WARNING: "::warning::",
        logging.ERROR: "::error::",
        logging.CRITICAL: "::error::",
    }

    @staticmethod
    def escape(message: str) -> str:
        """Escape a message for use in a workflow command."""
        return (
            message.replace("%", "%25")
            .replace("\r", "%0D")
            .replace("\n", "%0A")
        )

    def format(self, record: logging.LogRecord) -> str:
        command = self.COMMANDS.get(record.levelno)
        if command is None:
            return record.getMessage()
        return f"{command}{self.escape(record.getMessage())}"


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    use_colors: Optional[bool] = None,
    github_actions: bool = False,
) -> None:
    """
    Set up logging configuration.

    Args:
        level: Desired log level
        use_colors: Whether to use colored output (auto-detect if None)
        github_actions: Emit workflow commands instead of plain lines
    """
    logging.addLevelName(STEP, "STEP")

    log_level = logging.DEBUG if level == LogLevel.VERBOSE else logging.INFO

    # Workflow commands are filtered by the runner, so always pass debug
    if github_actions:
        log_level = logging.DEBUG

    if use_colors is None:
        use_colors = sys.stderr.isatty()

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    if github_actions:
        handler.setFormatter(GitHubActionsFormatter())
    elif use_colors:
        handler.setFormatter(ColoredFormatter())
    else:
        handler.setFormatter(PlainFormatter())

    root_logger.addHandler(handler)


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


# Add custom log methods
def log_step(self: logging.Logger, message: str, *args, **kwargs) -> None:
    """Log a step message."""
    if self.isEnabledFor(STEP):
        self._log(STEP, message, args, **kwargs)


def log_success(self: logging.Logger, message: str, *args, **kwargs) -> None:
    """Log a success message."""
    self.info(f"✅ {message}", *args, **kwargs)


# Monkey-patch Logger class to add custom methods
logging.Logger.step = log_step
logging.Logger.success = log_success
