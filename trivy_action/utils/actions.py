"""GitHub Actions step outputs."""

import uuid
from typing import Optional

from .logging import get_logger

logger = get_logger(__name__)


def set_output(name: str, value: str, output_file: Optional[str] = None) -> None:
    """
    Set a step output.

    Appends to the file named by ``GITHUB_OUTPUT``. Multi-line values use
    the heredoc syntax with a random delimiter. Outside of a runner the
    value is only logged.

    Args:
        name: Output name
        value: Output value
        output_file: Path of the runner's output file
    """
    if not output_file:
        logger.info(f"Output {name}: {value}")
        return

    with open(output_file, "a", encoding="utf-8") as f:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            f.write(f"{name}={value}\n")
    logger.debug(f"Set output {name}")
