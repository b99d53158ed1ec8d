"""CLI entry points for the trivy-action package."""

import sys
import argparse
from typing import List, Optional

from ..utils.logging import get_logger
from .run import create_run_parser, run_run
from .download import create_download_parser, run_download
from .scan import create_scan_parser, run_scan
from .report import create_report_parser, run_report

logger = get_logger(__name__)


def create_main_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="trivy-action",
        description="Scan container images with Trivy and report findings as GitHub issues",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  run        Scan an image and create or update a GitHub issue
  download   Download the trivy executable
  scan       Scan an image and print the Trivy output
  report     Render a Trivy JSON report as markdown

Examples:
  # GitHub Action step (settings from INPUT_* variables)
  trivy-action run

  # Scan locally and print the table report
  trivy-action scan --image alpine:3.10

  # Render an issue body from saved results
  trivy-action report --input findings.json --image alpine:3.10
""",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    create_run_parser(subparsers)
    create_download_parser(subparsers)
    create_scan_parser(subparsers)
    create_report_parser(subparsers)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_main_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    command_handlers = {
        "run": run_run,
        "download": run_download,
        "scan": run_scan,
        "report": run_report,
    }

    handler = command_handlers.get(args.command)
    if handler:
        try:
            return handler(args)
        except KeyboardInterrupt:
            print("\n\nOperation cancelled by user", file=sys.stderr)
            return 130
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            return 1
    else:
        parser.print_help()
        return 1


__all__ = ["main", "create_main_parser"]
