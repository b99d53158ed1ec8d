"""
Trivy Action

Runs the Trivy vulnerability scanner against a container image from CI.
Provides functionality for:
- Validating Trivy command options
- Downloading the Trivy release for the current platform
- Scanning images and rendering findings as markdown
- Creating or updating the GitHub issue for an image
"""

__version__ = "1.0.0"

from .core.validator import TrivyOptionValidator
from .core.downloader import Downloader
from .core.scanner import TrivyScanner
from .core.report import format_report
from .core.issue import GitHubClient

__all__ = [
    "TrivyOptionValidator",
    "Downloader",
    "TrivyScanner",
    "format_report",
    "GitHubClient",
]
