"""Arguments and helpers shared by the CLI commands."""

import argparse

from ..config import ActionConfig, DEFAULT_API_URL
from ..core.downloader import Downloader
from ..utils.logging import setup_logging, LogLevel, get_logger

logger = get_logger(__name__)


def add_trivy_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the scan target and trivy option flags."""
    parser.add_argument(
        "--image",
        help="Container image to scan (default: $INPUT_IMAGE or $IMAGE_NAME)",
    )
    parser.add_argument(
        "--trivy-version",
        help="Trivy release to use, or 'latest' (default: 0.18.3)",
    )
    parser.add_argument(
        "--severity",
        help="Comma separated severities (default: UNKNOWN,LOW,MEDIUM,HIGH,CRITICAL)",
    )
    parser.add_argument(
        "--vuln-type",
        help="Comma separated vulnerability types (default: os,library)",
    )
    parser.add_argument(
        "--ignore-unfixed",
        action="store_true",
        default=None,
        help="Ignore vulnerabilities without a fixed version",
    )
    parser.add_argument(
        "--template",
        help="Trivy template file for report-only runs",
    )
    parser.add_argument(
        "--trivy-dir",
        help="Directory holding the trivy executable "
             "(default: $GITHUB_WORKSPACE or ~/.cache/trivy-action)",
    )


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add config file and logging flags."""
    parser.add_argument(
        "--config",
        help="YAML file with default settings",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def configure_logging(args: argparse.Namespace, config: ActionConfig) -> None:
    level = LogLevel.VERBOSE if getattr(args, "verbose", False) else LogLevel.INFO
    setup_logging(level, github_actions=config.github_actions)


def fetch_trivy(config: ActionConfig) -> str:
    """
    Return the path of the trivy executable, downloading it if needed.

    Args:
        config: Run configuration

    Returns:
        Path to the executable
    """
    # Releases live on github.com; never send an Enterprise token there
    token = config.token if config.api_url == DEFAULT_API_URL else None
    downloader = Downloader(token=token)

    if downloader.trivy_exists(config.trivy_dir):
        logger.debug(f"Using existing trivy in {config.trivy_dir}")
        return f"{config.trivy_dir}/trivy"

    logger.step(f"Downloading Trivy {config.trivy_version}")
    return downloader.download(config.trivy_version, config.trivy_dir)
