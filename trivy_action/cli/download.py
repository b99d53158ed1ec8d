"""CLI for downloading the trivy executable."""

import argparse
import sys
from typing import Any

from ..config import load_config
from ..core.downloader import Downloader
from .options import add_common_arguments, configure_logging, fetch_trivy


def create_download_parser(subparsers: Any) -> argparse.ArgumentParser:
    """Create the download subparser."""
    parser = subparsers.add_parser(
        "download",
        help="Download the trivy executable",
        description="""
Resolve the Trivy release archive for this platform and extract the
trivy executable. Nothing is downloaded if the target directory already
contains it, unless --force is given.
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  trivy-action download --trivy-version latest --trivy-dir ./bin
  trivy-action download --trivy-version 0.18.3 --trivy-dir ./bin --force
""",
    )

    parser.add_argument(
        "--trivy-version",
        help="Trivy release to download, or 'latest' (default: 0.18.3)",
    )
    parser.add_argument(
        "--trivy-dir",
        help="Directory to extract into "
             "(default: $GITHUB_WORKSPACE or ~/.cache/trivy-action)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Download even if trivy is already present",
    )
    add_common_arguments(parser)

    return parser


def run_download(args: argparse.Namespace) -> int:
    """
    Download trivy.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    config = load_config(args)
    configure_logging(args, config)

    if args.force:
        path = Downloader().download(config.trivy_version, config.trivy_dir)
    else:
        path = fetch_trivy(config)

    print(path, file=sys.stdout)
    return 0
