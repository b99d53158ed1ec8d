"""CLI for the full action pipeline.

Scans an image and, when issue creation is enabled, opens or updates a
GitHub issue with the findings.
"""

import argparse
from typing import Any

from ..config import ActionConfig, load_config
from ..core.issue import GitHubClient
from ..core.report import format_report
from ..core.scanner import TrivyScanner
from ..core.validator import TrivyOptionValidator
from ..models.issue import IssueOption
from ..models.vulnerability import RawReport
from ..utils.actions import set_output
from ..utils.logging import get_logger
from .options import add_common_arguments, add_trivy_arguments, configure_logging, fetch_trivy

logger = get_logger(__name__)


def create_run_parser(subparsers: Any) -> argparse.ArgumentParser:
    """Create the run subparser."""
    parser = subparsers.add_parser(
        "run",
        help="Scan an image and report the findings as a GitHub issue",
        description="""
Download Trivy, scan a container image and report the result.

Without --issue the Trivy report is printed to the log. With --issue the
findings are rendered as markdown and posted to an issue in the current
repository; an open issue with the same labels that mentions the image is
updated instead of creating a new one.

Every option can also be given as a GitHub Action input (INPUT_<NAME>)
or in a YAML file passed with --config.
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print the vulnerability table
  trivy-action run --image alpine:3.10

  # Open or update an issue for HIGH and CRITICAL findings
  trivy-action run --image myapp:latest --severity HIGH,CRITICAL --issue \\
      --repository owner/repo --token $GITHUB_TOKEN
""",
    )

    add_trivy_arguments(parser)
    parser.add_argument(
        "--issue",
        action="store_true",
        default=None,
        help="Create or update a GitHub issue with the findings",
    )
    parser.add_argument(
        "--issue-title",
        help="Title for new issues (default: Security Alert)",
    )
    parser.add_argument(
        "--issue-label",
        help="Comma separated issue labels (default: trivy,vulnerability)",
    )
    parser.add_argument(
        "--issue-assignee",
        help="Comma separated issue assignees",
    )
    parser.add_argument(
        "--token",
        help="GitHub token (default: $INPUT_TOKEN or $GITHUB_TOKEN)",
    )
    parser.add_argument(
        "--repository",
        help="Repository as owner/repo (default: $GITHUB_REPOSITORY)",
    )
    parser.add_argument(
        "--show-commit-hash",
        action="store_true",
        default=None,
        help="Append the commit hash to the issue body",
    )
    parser.add_argument(
        "--fail-on-vulnerabilities",
        action="store_true",
        default=None,
        help="Exit with code 1 when vulnerabilities were reported",
    )
    add_common_arguments(parser)

    return parser


def build_issue_option(config: ActionConfig, body: str) -> IssueOption:
    if config.show_commit_hash and config.sha:
        body += f"\n{config.sha}\n\n"
    return IssueOption(
        title=config.issue_title,
        body=body,
        labels=config.issue_labels,
        assignees=config.issue_assignees,
    )


def run_pipeline(config: ActionConfig) -> int:
    """
    Run scan and reporting for a resolved configuration.

    Args:
        config: Run configuration

    Returns:
        Exit code
    """
    image = config.require_image()
    option = config.trivy_option()
    TrivyOptionValidator(option).validate()
    if config.issue:
        config.require_token()
        config.require_repository()

    trivy_path = fetch_trivy(config)

    logger.step(f"Scanning {image}")
    result = TrivyScanner().scan(trivy_path, image, option)

    if isinstance(result, RawReport):
        logger.info(
            "Not create a issue because issue parameter is false.\n"
            f"Vulnerabilities:\n{result.text}"
        )
        return 0

    issue_content = format_report(image, result.targets)
    if not issue_content:
        logger.info("Vulnerabilities were not found.\nYour maintenance looks good 👍")
        return 0

    logger.info(f"Found {result.finding_count} vulnerabilities")
    client = GitHubClient(
        token=config.token,
        repository=config.repository,
        api_url=config.api_url,
    )
    response = client.create_or_update_issue(image, build_issue_option(config, issue_content))
    logger.success(f"Issue #{response.issue_number}: {response.html_url}")

    set_output("html_url", response.html_url, config.output_file)
    set_output("issue_number", str(response.issue_number), config.output_file)

    if config.fail_on_vulnerabilities:
        logger.error("Vulnerabilities were found")
        return 1
    return 0


def run_run(args: argparse.Namespace) -> int:
    """
    Run the full pipeline.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    config = load_config(args)
    configure_logging(args, config)
    return run_pipeline(config)
