"""Vulnerability scanning with the trivy command."""

import json
from typing import List

from ..errors import ScanError
from ..models.vulnerability import (
    OutputFormat,
    RawReport,
    ScanOutput,
    StructuredReport,
    TrivyOption,
)
from ..utils.subprocess import run_command
from ..utils.logging import get_logger
from .validator import TrivyOptionValidator

logger = get_logger(__name__)


class TrivyScanner:
    """Run trivy against a container image."""

    @staticmethod
    def build_args(image: str, option: TrivyOption) -> List[str]:
        """
        Build the trivy argument list.

        Args:
            image: Image reference to scan
            option: Validated trivy options

        Returns:
            Arguments, with the image as the last positional argument
        """
        args = [
            "--severity", option.severity,
            "--vuln-type", option.vuln_type,
            "--format", option.format.value,
            "--quiet",
            "--no-progress",
        ]

        if option.ignore_unfixed:
            args.append("--ignore-unfixed")

        if option.format == OutputFormat.TEMPLATE and option.template:
            args.extend(["--template", f"@{option.template}"])

        args.append(image)
        return args

    def scan(self, trivy_path: str, image: str, option: TrivyOption) -> ScanOutput:
        """
        Scan an image.

        Blocks until trivy exits; there is no timeout.

        Args:
            trivy_path: Path to the trivy executable
            image: Image reference to scan
            option: Trivy options

        Returns:
            StructuredReport for JSON output, RawReport otherwise
        """
        TrivyOptionValidator(option).validate()

        cmd = [trivy_path] + self.build_args(image, option)
        result = run_command(cmd)
        stdout = result.stdout

        output = None
        if stdout:
            if option.format == OutputFormat.JSON:
                try:
                    data = json.loads(stdout)
                except json.JSONDecodeError as e:
                    raise ScanError(
                        f"Failed to parse Trivy JSON output: {e}\n"
                        f"stdout: {stdout}\n"
                        f"stderr: {result.stderr}"
                    ) from e
                report = StructuredReport.from_json(data)
                if report.targets:
                    output = report
            elif stdout.strip():
                output = RawReport(text=stdout)

        if output is None:
            raise ScanError(
                "Failed vulnerability scan using Trivy.\n"
                f"stdout: {stdout}\n"
                f"stderr: {result.stderr}\n"
                f"error: {result.error}"
            )

        logger.debug(f"Trivy exited with code {result.returncode}")
        return output
