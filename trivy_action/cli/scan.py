"""CLI for scanning a single image without reporting."""

import argparse
import json
import sys
from dataclasses import asdict
from typing import Any

from ..config import load_config
from ..core.scanner import TrivyScanner
from ..core.validator import TrivyOptionValidator
from ..models.vulnerability import OutputFormat, RawReport
from .options import add_common_arguments, add_trivy_arguments, configure_logging, fetch_trivy


def create_scan_parser(subparsers: Any) -> argparse.ArgumentParser:
    """Create the scan subparser."""
    parser = subparsers.add_parser(
        "scan",
        help="Scan an image and print the Trivy output",
        description="""
Validate the options, download Trivy if needed and scan one image.
The report is written to stdout.
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  trivy-action scan --image alpine:3.10 --severity HIGH,CRITICAL
  trivy-action scan --image alpine:3.10 --format json > findings.json
  trivy-action scan --image alpine:3.10 --template ./contrib/html.tpl
""",
    )

    add_trivy_arguments(parser)
    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        help="Output format (default: template if --template is set, else table)",
    )
    add_common_arguments(parser)

    return parser


def run_scan(args: argparse.Namespace) -> int:
    """
    Scan an image.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    config = load_config(args)
    configure_logging(args, config)

    image = config.require_image()
    output_format = OutputFormat(args.format) if args.format else None
    option = config.trivy_option(output_format)
    TrivyOptionValidator(option).validate()

    trivy_path = fetch_trivy(config)
    result = TrivyScanner().scan(trivy_path, image, option)

    if isinstance(result, RawReport):
        sys.stdout.write(result.text)
    else:
        print(json.dumps([asdict(t) for t in result.targets], indent=2))
    return 0
