"""Validation of trivy command options."""

from pathlib import Path
from typing import Iterable, List

from ..errors import OptionError
from ..models.vulnerability import OutputFormat, Severity, TrivyOption, VulnType


class TrivyOptionValidator:
    """
    Check a TrivyOption before anything expensive runs.

    Tokens must match an allowed value exactly; ``HIGHER`` or ``"os "``
    are rejected.
    """

    def __init__(self, option: TrivyOption):
        self.option = option

    def validate(self) -> None:
        """Raise OptionError on the first invalid setting."""
        self.validate_severity()
        self.validate_vuln_type()
        self.validate_template()

    def validate_severity(self) -> None:
        severities = self.option.severities
        if not self._all_allowed(severities, Severity.values()):
            raise OptionError(
                f"Trivy option error: {','.join(severities)} is unknown severity.\n"
                "Trivy supports UNKNOWN, LOW, MEDIUM, HIGH and CRITICAL."
            )

    def validate_vuln_type(self) -> None:
        vuln_types = self.option.vuln_types
        if not self._all_allowed(vuln_types, VulnType.values()):
            raise OptionError(
                f"Trivy option error: {','.join(vuln_types)} is unknown vuln-type.\n"
                "Trivy supports os and library."
            )

    def validate_template(self) -> None:
        template = self.option.template
        if not template:
            if self.option.format == OutputFormat.TEMPLATE:
                raise OptionError("Trivy option error: template format requires a template file")
            return

        path = Path(template)
        if not path.exists():
            raise OptionError(f"Could not find {template}")
        if not path.is_file():
            raise OptionError(f"{template} is not a file")

    @staticmethod
    def _all_allowed(values: List[str], allowed: Iterable[str]) -> bool:
        allowed = set(allowed)
        return all(value in allowed for value in values)
