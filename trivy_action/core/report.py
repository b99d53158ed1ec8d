"""Markdown rendering of Trivy findings."""

from typing import List, Optional

from ..models.vulnerability import Finding, TargetResult

NOT_AVAILABLE = "N/A"

TABLE_HEADER = "|Title|Severity|CVE|Package Name|Installed Version|Fixed Version|References|"
TABLE_ALIGNMENT = "|:--:|:--:|:--:|:--:|:--:|:--:|:--|"


def render_value(value: Optional[str]) -> str:
    """Render an optional cell value, escaping pipes and line breaks."""
    if not value:
        return NOT_AVAILABLE
    value = value.replace("\r\n", "\n").replace("\r", "\n")
    return value.replace("|", "\\|").replace("\n", "<br>")


def render_references(references: List[str]) -> str:
    """Join references with line breaks, in the given order."""
    if not references:
        return NOT_AVAILABLE
    return "<br>".join(render_value(ref) for ref in references)


def render_row(finding: Finding) -> str:
    cells = [
        render_value(finding.title),
        render_value(finding.severity),
        render_value(finding.vulnerability_id),
        render_value(finding.pkg_name),
        render_value(finding.installed_version),
        render_value(finding.fixed_version),
        render_references(finding.references),
    ]
    return "|" + "|".join(cells) + "|"


def render_target(result: TargetResult) -> str:
    """Render a heading and findings table for one target."""
    lines = [f"## {result.target}", "", TABLE_HEADER, TABLE_ALIGNMENT]
    lines.extend(render_row(finding) for finding in result.findings)
    return "\n".join(lines)


def format_report(image: str, targets: List[TargetResult]) -> str:
    """
    Render scan results as a markdown issue body.

    Targets without findings contribute nothing. An empty string means
    there is nothing to report.

    Args:
        image: Scanned image reference
        targets: Per-target scan results

    Returns:
        Markdown text, or "" when no target has findings
    """
    sections = [render_target(t) for t in targets if t.has_findings]
    if not sections:
        return ""

    header = f"_(image scanned: `{image}`)_"
    return header + "\n\n" + "\n\n".join(sections) + "\n"
