"""
Run configuration.

Settings are resolved once at start-up from, in order of precedence:

1. command line flags
2. GitHub Action inputs (``INPUT_<NAME>`` environment variables)
3. an optional YAML config file (``--config`` or the ``config`` input)
4. built-in defaults

The resulting ActionConfig is passed to every component; nothing else
reads the environment.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import ConfigError
from .models.vulnerability import OutputFormat, Severity, TrivyOption, VulnType

DEFAULT_TRIVY_VERSION = "0.18.3"
DEFAULT_TRIVY_DIR = "~/.cache/trivy-action"
DEFAULT_API_URL = "https://api.github.com"
GITHUB_SERVER = "https://github.com"

DEFAULTS: Dict[str, Any] = {
    "image": None,
    "trivy_version": DEFAULT_TRIVY_VERSION,
    "severity": ",".join(Severity.values()),
    "vuln_type": ",".join(VulnType.values()),
    "ignore_unfixed": False,
    "template": None,
    "issue": False,
    "issue_title": "Security Alert",
    "issue_label": "trivy,vulnerability",
    "issue_assignee": "",
    "token": None,
    "fail_on_vulnerabilities": False,
    "show_commit_hash": False,
    "trivy_dir": None,
}

BOOLEAN_KEYS = {"ignore_unfixed", "issue", "fail_on_vulnerabilities", "show_commit_hash"}


@dataclass
class ActionConfig:
    """Resolved settings for one run."""
    image: Optional[str] = None
    trivy_version: str = DEFAULT_TRIVY_VERSION
    severity: str = DEFAULTS["severity"]
    vuln_type: str = DEFAULTS["vuln_type"]
    ignore_unfixed: bool = False
    template: Optional[str] = None
    issue: bool = False
    issue_title: str = DEFAULTS["issue_title"]
    issue_labels: List[str] = field(default_factory=lambda: ["trivy", "vulnerability"])
    issue_assignees: List[str] = field(default_factory=list)
    token: Optional[str] = None
    fail_on_vulnerabilities: bool = False
    show_commit_hash: bool = False
    trivy_dir: str = DEFAULT_TRIVY_DIR

    # Runner context
    repository: Optional[str] = None
    sha: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    output_file: Optional[str] = None
    github_actions: bool = False

    @property
    def output_format(self) -> OutputFormat:
        """Report format implied by the issue toggle and template."""
        if self.issue:
            return OutputFormat.JSON
        if self.template:
            return OutputFormat.TEMPLATE
        return OutputFormat.TABLE

    def trivy_option(self, output_format: Optional[OutputFormat] = None) -> TrivyOption:
        """Build the trivy command options."""
        return TrivyOption(
            severity=self.severity,
            vuln_type=self.vuln_type,
            ignore_unfixed=self.ignore_unfixed,
            format=output_format or self.output_format,
            template=self.template,
        )

    def require_image(self) -> str:
        if not self.image:
            raise ConfigError("Please specify target image")
        return self.image

    def require_token(self) -> str:
        if not self.token:
            raise ConfigError("Input required and not supplied: token")
        return self.token

    def require_repository(self) -> str:
        if not self.repository or "/" not in self.repository:
            raise ConfigError(
                "Repository is unknown; set GITHUB_REPOSITORY or --repository as owner/repo"
            )
        return self.repository


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def parse_list(value: Any) -> List[str]:
    """Split a comma list, dropping whitespace and empty items."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        items = str(value).split(",")
    return [item.strip() for item in items if item.strip()]


def strip_whitespace(value: str) -> str:
    return "".join(str(value).split())


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """
    Load settings from a YAML file.

    Args:
        path: Path to the YAML file (None for no file)

    Returns:
        Mapping of setting name to value
    """
    if not path:
        return {}

    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"Could not find config file {path}")

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    # Accept both issue_label and issue-label
    return {str(k).replace("-", "_"): v for k, v in data.items()}


def _input(environ: Mapping[str, str], name: str) -> Optional[str]:
    """Read a GitHub Action input; empty strings count as unset."""
    value = environ.get(f"INPUT_{name.upper()}", "").strip()
    return value or None


def resolve_api_url(environ: Mapping[str, str]) -> str:
    api_url = environ.get("GITHUB_API_URL")
    if api_url:
        return api_url
    server_url = environ.get("GITHUB_SERVER_URL", "").rstrip("/")
    if server_url and server_url != GITHUB_SERVER:
        return f"{server_url}/api/v3"
    return DEFAULT_API_URL


def load_config(args: Any = None, environ: Optional[Mapping[str, str]] = None) -> ActionConfig:
    """
    Resolve the run configuration.

    Args:
        args: Parsed command line arguments (attributes may be missing)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        ActionConfig
    """
    if environ is None:
        environ = os.environ

    config_path = getattr(args, "config", None) or _input(environ, "config")
    file_data = load_config_file(config_path)

    def resolve(name: str) -> Any:
        value = getattr(args, name, None)
        if value is not None:
            return value
        value = _input(environ, name)
        if value is not None:
            return value
        if file_data.get(name) is not None:
            return file_data[name]
        return DEFAULTS[name]

    values = {name: resolve(name) for name in DEFAULTS}
    for key in BOOLEAN_KEYS:
        values[key] = parse_bool(values[key])

    image = values["image"] or environ.get("IMAGE_NAME") or None
    trivy_version = str(values["trivy_version"]).strip()
    if trivy_version.startswith("v"):
        trivy_version = trivy_version[1:]

    trivy_dir = values["trivy_dir"] or environ.get("GITHUB_WORKSPACE") or DEFAULT_TRIVY_DIR

    severity = values["severity"]
    if isinstance(severity, (list, tuple)):
        severity = ",".join(severity)
    vuln_type = values["vuln_type"]
    if isinstance(vuln_type, (list, tuple)):
        vuln_type = ",".join(vuln_type)

    return ActionConfig(
        image=image,
        trivy_version=trivy_version,
        severity=strip_whitespace(severity),
        vuln_type=strip_whitespace(vuln_type),
        ignore_unfixed=values["ignore_unfixed"],
        template=values["template"] or None,
        issue=values["issue"],
        issue_title=str(values["issue_title"]),
        issue_labels=parse_list(values["issue_label"]),
        issue_assignees=parse_list(values["issue_assignee"]),
        token=values["token"] or environ.get("GITHUB_TOKEN") or None,
        fail_on_vulnerabilities=values["fail_on_vulnerabilities"],
        show_commit_hash=values["show_commit_hash"],
        trivy_dir=os.path.expanduser(str(trivy_dir)),
        repository=getattr(args, "repository", None) or environ.get("GITHUB_REPOSITORY"),
        sha=environ.get("GITHUB_SHA"),
        api_url=resolve_api_url(environ),
        output_file=environ.get("GITHUB_OUTPUT"),
        github_actions=environ.get("GITHUB_ACTIONS") == "true",
    )
