"""Data models for GitHub issues."""

from dataclasses import dataclass, field
from typing import List, Dict, Any


@dataclass
class IssueOption:
    """Content of an issue to create or update."""
    title: str
    body: str
    labels: List[str] = field(default_factory=list)
    assignees: List[str] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Request body for the create-issue endpoint."""
        return {
            "title": self.title,
            "body": self.body,
            "labels": self.labels,
            "assignees": self.assignees,
        }


@dataclass
class IssueRecord:
    """An issue as returned by the GitHub API."""
    number: int
    body: str
    html_url: str
    labels: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IssueRecord":
        """Build from a GitHub issue payload."""
        return cls(
            number=data["number"],
            body=data.get("body") or "",
            html_url=data.get("html_url", ""),
            labels=[label["name"] for label in data.get("labels", [])],
        )


@dataclass
class IssueResponse:
    """Identity of the issue that was created or updated."""
    issue_number: int
    html_url: str
