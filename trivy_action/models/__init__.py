"""Data models for the trivy-action package."""

from .vulnerability import (
    Severity,
    VulnType,
    OutputFormat,
    TrivyOption,
    ReleaseAsset,
    Finding,
    TargetResult,
    StructuredReport,
    RawReport,
    ScanOutput,
)
from .issue import IssueOption, IssueRecord, IssueResponse

__all__ = [
    "Severity",
    "VulnType",
    "OutputFormat",
    "TrivyOption",
    "ReleaseAsset",
    "Finding",
    "TargetResult",
    "StructuredReport",
    "RawReport",
    "ScanOutput",
    "IssueOption",
    "IssueRecord",
    "IssueResponse",
]
