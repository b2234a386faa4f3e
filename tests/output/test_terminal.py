"""Tests for terminal formatter."""

from io import StringIO

from rich.console import Console

from license_validator.models.result import ValidationResult
from license_validator.output.terminal import TerminalFormatter


def _render(result: ValidationResult, **kwargs: bool) -> str:
    string_io = StringIO()
    console = Console(file=string_io, width=200)
    TerminalFormatter(console=console, **kwargs).format_result(result)
    return string_io.getvalue()


class TestTerminalFormatter:
    """Tests for TerminalFormatter."""

    def test_formats_packages_as_table(self) -> None:
        result = ValidationResult(
            packages={"click@8.1.0": "BSD-3-Clause", "pydantic@2.0.0": "MIT"},
            licenses=["BSD-3-Clause", "MIT"],
        )

        output = _render(result)

        assert "License Validation Results" in output
        assert "click@8.1.0" in output
        assert "pydantic@2.0.0" in output
        assert "Total packages: 2" in output
        assert "Allowed licenses used: BSD-3-Clause, MIT" in output
        assert "PASS - All 2 packages allowed" in output

    def test_shows_disclaimer(self) -> None:
        output = _render(ValidationResult(packages={"a@1.0.0": "MIT"}))

        assert "NOT LEGAL ADVICE" in output

    def test_lists_invalid_packages(self) -> None:
        result = ValidationResult(
            packages={"a@1.0.0": "MIT", "b@2.0.0": "GPL-3.0"},
            licenses=["MIT"],
            invalids=["b@2.0.0"],
        )

        output = _render(result)

        assert "INVALID - 1 package(s) violate the policy" in output
        assert "b@2.0.0 (GPL-3.0)" in output

    def test_no_license_declared(self) -> None:
        result = ValidationResult(packages={"a@1.0.0": ""}, invalids=["a@1.0.0"])

        output = _render(result)

        assert "a@1.0.0 (no license declared)" in output

    def test_markup_in_license_is_escaped(self) -> None:
        result = ValidationResult(packages={"a@1.0.0": "[bold]MIT[/bold]"})

        output = _render(result)

        assert "[bold]MIT[/bold]" in output

    def test_quiet_prints_status_only(self) -> None:
        result = ValidationResult(packages={"a@1.0.0": "MIT"}, licenses=["MIT"])

        output = _render(result, quiet=True)

        assert "PASS - All 1 packages allowed" in output
        assert "License Validation Results" not in output
        assert "NOT LEGAL ADVICE" not in output

    def test_report_panel(self) -> None:
        result = ValidationResult(
            packages={"a@1.0.0": "MIT"},
            report="a@1.0.0 [license(s): MIT]",
        )

        assert "Discovered Packages" not in _render(result)

        output = _render(result, show_report=True)
        assert "Discovered Packages" in output
        assert "a@1.0.0 [license(s): MIT]" in output
