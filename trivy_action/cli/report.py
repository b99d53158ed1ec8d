"""CLI for rendering an existing Trivy JSON report as markdown.

Useful in pipelines where the scan runs in one job and the issue body is
prepared in another.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from ..config import load_config
from ..core.report import format_report
from ..errors import ConfigError
from ..models.vulnerability import StructuredReport
from ..utils.logging import get_logger
from .options import add_common_arguments, configure_logging

logger = get_logger(__name__)


def create_report_parser(subparsers: Any) -> argparse.ArgumentParser:
    """Create the report subparser."""
    parser = subparsers.add_parser(
        "report",
        help="Render a Trivy JSON report as markdown",
        description="""
Render the output of `trivy --format json` as the markdown used for
issue bodies: one table per scan target that has findings.
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  trivy-action report --input findings.json --image alpine:3.10
  trivy-action report --input findings.json --image alpine:3.10 -o issue.md
""",
    )

    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Trivy JSON report",
    )
    parser.add_argument(
        "--image",
        help="Image reference named in the report header",
    )
    parser.add_argument(
        "--output", "-o",
        help="Output file path (default: stdout)",
    )
    add_common_arguments(parser)

    return parser


def run_report(args: argparse.Namespace) -> int:
    """
    Render a report.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    config = load_config(args)
    configure_logging(args, config)
    image = config.require_image()

    input_path = Path(args.input)
    if not input_path.is_file():
        raise ConfigError(f"Could not find {args.input}")

    try:
        data = json.loads(input_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse {args.input}: {e}") from e

    content = format_report(image, StructuredReport.from_json(data).targets)
    if not content:
        logger.info("Vulnerabilities were not found.")
        return 0

    if args.output:
        Path(args.output).write_text(content, encoding="utf-8")
        logger.success(f"Report written to {args.output}")
    else:
        sys.stdout.write(content)
    return 0
