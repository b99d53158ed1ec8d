"""Data models for Trivy scan options and results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict, Any, Union


class Severity(Enum):
    """Severity levels understood by Trivy."""
    UNKNOWN = "UNKNOWN"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @classmethod
    def values(cls) -> List[str]:
        """All severity names, lowest first."""
        return [member.value for member in cls]


class VulnType(Enum):
    """Vulnerability types understood by Trivy."""
    OS = "os"
    LIBRARY = "library"

    @classmethod
    def values(cls) -> List[str]:
        """All vuln-type names."""
        return [member.value for member in cls]


class OutputFormat(Enum):
    """Trivy report formats."""
    JSON = "json"
    TABLE = "table"
    TEMPLATE = "template"


@dataclass
class TrivyOption:
    """Options passed to the trivy command."""
    severity: str = ",".join(Severity.values())
    vuln_type: str = ",".join(VulnType.values())
    ignore_unfixed: bool = False
    format: OutputFormat = OutputFormat.TABLE
    template: Optional[str] = None

    @property
    def severities(self) -> List[str]:
        return self.severity.split(",")

    @property
    def vuln_types(self) -> List[str]:
        return self.vuln_type.split(",")


@dataclass
class ReleaseAsset:
    """A downloadable file attached to a GitHub release."""
    name: str
    download_url: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReleaseAsset":
        """Build from a GitHub release asset payload."""
        return cls(name=data["name"], download_url=data["browser_download_url"])


@dataclass
class Finding:
    """A single vulnerability reported by Trivy."""
    vulnerability_id: str
    pkg_name: str
    installed_version: str
    fixed_version: Optional[str] = None
    title: Optional[str] = None
    severity: Optional[str] = None
    references: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Finding":
        """Build from one entry of a Trivy ``Vulnerabilities`` list."""
        return cls(
            vulnerability_id=data.get("VulnerabilityID", ""),
            pkg_name=data.get("PkgName", ""),
            installed_version=data.get("InstalledVersion", ""),
            fixed_version=data.get("FixedVersion") or None,
            title=data.get("Title") or None,
            severity=data.get("Severity") or None,
            references=list(data.get("References") or []),
        )


@dataclass
class TargetResult:
    """Findings for one scan target (an OS layer or a lock file)."""
    target: str
    findings: Optional[List[Finding]] = None

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TargetResult":
        """Build from one entry of Trivy's JSON results."""
        vulns = data.get("Vulnerabilities")
        findings = None
        if isinstance(vulns, list):
            findings = [Finding.from_dict(v) for v in vulns if isinstance(v, dict)]
        return cls(target=data.get("Target", ""), findings=findings)


@dataclass
class StructuredReport:
    """Decoded JSON output of a scan."""
    targets: List[TargetResult] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Union[List[Any], Dict[str, Any]]) -> "StructuredReport":
        """
        Build from a decoded Trivy JSON document.

        Older Trivy releases emit a bare list of results, newer ones wrap
        it in ``{"Results": [...]}``.
        """
        if isinstance(data, dict):
            data = data.get("Results")
        if not isinstance(data, list):
            return cls()
        return cls(targets=[
            TargetResult.from_dict(item) for item in data if isinstance(item, dict)
        ])

    @property
    def finding_count(self) -> int:
        return sum(len(t.findings or []) for t in self.targets)


@dataclass
class RawReport:
    """Verbatim text output of a scan (table or template format)."""
    text: str


ScanOutput = Union[StructuredReport, RawReport]
