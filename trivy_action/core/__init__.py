"""Core functionality for the trivy-action package."""

from .validator import TrivyOptionValidator
from .downloader import Downloader, check_platform
from .scanner import TrivyScanner
from .report import format_report
from .issue import GitHubClient

__all__ = [
    "TrivyOptionValidator",
    "Downloader",
    "check_platform",
    "TrivyScanner",
    "format_report",
    "GitHubClient",
]
