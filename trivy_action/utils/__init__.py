"""Utility modules for the trivy-action package."""

from .logging import (
    get_logger,
    setup_logging,
    LogLevel,
)
from .subprocess import run_command, CommandResult
from .actions import set_output

__all__ = [
    "get_logger",
    "setup_logging",
    "LogLevel",
    "run_command",
    "CommandResult",
    "set_output",
]
