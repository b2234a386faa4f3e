"""JSON output formatter for validation results."""
import json
from datetime import datetime, timezone
from typing import Any

from license_validator import __version__
from license_validator.constants import LEGAL_DISCLAIMER_SHORT
from license_validator.models.result import ValidationResult


class ResultJsonFormatter:
    """Format validation results as JSON for CI/CD integration."""

    def format_result(self, result: ValidationResult) -> str:
        """Format a validation result as a JSON string.

        Args:
            result: The validation result to format.

        Returns:
            JSON string representation of the result.
        """
        return json.dumps(self._build_output(result), indent=2)

    def _build_output(self, result: ValidationResult) -> dict[str, Any]:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        output: dict[str, Any] = {
            "metadata": {
                "generated_at": timestamp,
                "tool_version": __version__,
                "disclaimer": LEGAL_DISCLAIMER_SHORT,
            },
            "valid": result.is_valid,
            "packages": result.packages,
            "licenses": result.licenses,
            "invalids": result.invalids,
        }
        if result.report is not None:
            output["report"] = result.report
        return output
