"""
Main entry point for the trivy-action package.

Usage:
    python -m trivy_action run [OPTIONS]
    python -m trivy_action download [OPTIONS]
    python -m trivy_action scan [OPTIONS]
    python -m trivy_action report [OPTIONS]
"""

import sys


def main() -> int:
    """Main entry point."""
    from .cli import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
