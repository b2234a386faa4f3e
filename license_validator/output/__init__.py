"""Output formatters for license-validator."""

from license_validator.output.json_result import ResultJsonFormatter
from license_validator.output.report import TextReportRenderer
from license_validator.output.terminal import TerminalFormatter

__all__ = [
    "ResultJsonFormatter",
    "TerminalFormatter",
    "TextReportRenderer",
]
