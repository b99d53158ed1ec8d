"""GitHub issue management."""

from typing import Optional, List, Dict, Any

import requests

from ..models.issue import IssueOption, IssueRecord, IssueResponse
from ..utils.logging import get_logger

logger = get_logger(__name__)


class GitHubClient:
    """
    Create or update the vulnerability issue of an image.

    An existing issue is recognized by carrying the configured labels and
    mentioning the image in its body. This is a heuristic: unrelated images
    that share labels and a common substring map to the same issue.
    """

    DEFAULT_API_URL = "https://api.github.com"

    def __init__(
        self,
        token: str,
        repository: str,
        api_url: str = DEFAULT_API_URL,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ):
        """
        Initialize client.

        Args:
            token: GitHub token with issues write permission
            repository: Repository as "owner/repo"
            api_url: GitHub REST API base URL
            session: HTTP session (a new one is created if None)
            timeout: Timeout for each HTTP request in seconds
        """
        self.repository = repository
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "Authorization": f"token {token}",
        })

    @property
    def _issues_url(self) -> str:
        return f"{self.api_url}/repos/{self.repository}/issues"

    def _list_open_issues(self, labels: List[str]) -> List[Dict[str, Any]]:
        issues = []
        url = self._issues_url
        params = {"state": "open", "per_page": 100}
        if labels:
            params["labels"] = ",".join(labels)

        while url:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            issues.extend(response.json())
            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None

        return issues

    def get_trivy_issues(self, image: str, labels: Optional[List[str]]) -> List[IssueRecord]:
        """
        Find open issues for an image.

        Args:
            image: Image reference to look for in issue bodies
            labels: Labels the issue must carry; an empty list matches any open issue

        Returns:
            Matching issues, in API order
        """
        if labels is None:
            return []

        records = []
        for item in self._list_open_issues(labels):
            if "pull_request" in item:
                continue
            record = IssueRecord.from_dict(item)
            if image in record.body:
                records.append(record)
        return records

    def create_issue(self, option: IssueOption) -> IssueResponse:
        response = self.session.post(
            self._issues_url, json=option.to_payload(), timeout=self.timeout
        )
        response.raise_for_status()
        issue = response.json()
        return IssueResponse(issue_number=issue["number"], html_url=issue["html_url"])

    def update_issue(self, issue_number: int, option: IssueOption) -> None:
        """Replace the body of an issue. Title and labels are kept."""
        response = self.session.patch(
            f"{self._issues_url}/{issue_number}",
            json={"body": option.body},
            timeout=self.timeout,
        )
        response.raise_for_status()

    def create_or_update_issue(self, image: str, option: IssueOption) -> IssueResponse:
        """
        Update the first open issue for the image, or create a new one.

        Args:
            image: Scanned image reference
            option: Issue content

        Returns:
            Number and URL of the issue
        """
        trivy_issues = self.get_trivy_issues(image, option.labels)

        if trivy_issues:
            logger.info("Found existing issue. Updating existing issue.")
            existing = trivy_issues[0]
            self.update_issue(existing.number, option)
            return IssueResponse(issue_number=existing.number, html_url=existing.html_url)

        logger.info("Create new issue")
        return self.create_issue(option)
