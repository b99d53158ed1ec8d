"""Subprocess utilities."""

import subprocess
from dataclasses import dataclass
from typing import Optional, List
from .logging import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Result of a command execution."""
    returncode: int
    stdout: str
    stderr: str
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """Check if command was successful."""
        return self.returncode == 0 and self.error is None


def run_command(
    cmd: List[str],
    timeout: Optional[int] = None,
    cwd: Optional[str] = None,
    env: Optional[dict] = None,
) -> CommandResult:
    """
    Run a command and capture its output.

    The command blocks until it exits. Failures to start the process are
    reported through ``CommandResult.error`` rather than raised, so the
    caller can decide how to surface them together with stdout/stderr.

    Args:
        cmd: Command to run as a list of arguments
        timeout: Timeout in seconds (None for no timeout)
        cwd: Working directory
        env: Environment variables

    Returns:
        CommandResult with stdout, stderr, and return code
    """
    logger.debug(f"Running command: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=cwd,
            env=env,
        )
        return CommandResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
    except subprocess.TimeoutExpired as e:
        return CommandResult(
            returncode=-1,
            stdout="",
            stderr="",
            error=f"Command timed out after {e.timeout} seconds",
        )
    except OSError as e:
        # FileNotFoundError, PermissionError, exec format errors
        logger.debug(f"Failed to start {cmd[0]}: {e}")
        return CommandResult(
            returncode=127,
            stdout="",
            stderr="",
            error=str(e),
        )
