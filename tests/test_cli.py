"""CLI behavior tests for license-validator."""
import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from license_validator import __version__
from license_validator.cli import main
from license_validator.constants import EXIT_ERROR, EXIT_ISSUES, EXIT_SUCCESS
from license_validator.exceptions import ScanError
from license_validator.models.result import ValidationResult

PASSING = ValidationResult(
    packages={"demo@1.0.0": "MIT", "click@8.1.7": "BSD-3-Clause"},
    licenses=["MIT", "BSD-3-Clause"],
    report="demo@1.0.0 [license(s): MIT]\nclick@8.1.7 [license(s): BSD-3-Clause]",
)

FAILING = ValidationResult(
    packages={"demo@1.0.0": "MIT", "gpl-lib@2.0.0": "GPL-3.0"},
    licenses=["MIT"],
    invalids=["gpl-lib@2.0.0"],
)


def _patch_validate(result: ValidationResult | None = None, error: Exception | None = None):
    mock = AsyncMock(return_value=result, side_effect=error)
    return patch("license_validator.cli.validate_async", mock)


def test_cli_help(cli_runner: CliRunner) -> None:
    """Test that --help outputs usage information."""
    result = cli_runner.invoke(main, ["--help"])

    assert result.exit_code == 0
    assert "Python License Validator" in result.output
    assert "check" in result.output
    assert "--version" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    """Test that --version outputs correct version."""
    result = cli_runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_check_help_shows_options(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(main, ["check", "--help"])

    assert result.exit_code == 0
    for option in ("--allow", "--exception", "--config", "--format", "--report"):
        assert option in result.output


class TestCheckCommand:
    """Tests for the check command."""

    def test_passing_project(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        with _patch_validate(PASSING) as mock_validate:
            result = cli_runner.invoke(
                main, ["check", str(tmp_path), "--allow", "MIT", "-a", "BSD-3-Clause"]
            )

        assert result.exit_code == EXIT_SUCCESS
        assert "License Validation Results" in result.output
        assert "PASS - All 2 packages allowed" in result.output
        root_dir, options = mock_validate.call_args.args
        assert root_dir == str(tmp_path)
        assert options == {
            "allowed_licenses": ["MIT", "BSD-3-Clause"],
            "exceptions": [],
        }

    def test_invalid_packages_exit_with_issues(
        self, cli_runner: CliRunner, tmp_path: Path
    ) -> None:
        with _patch_validate(FAILING):
            result = cli_runner.invoke(main, ["check", str(tmp_path), "-a", "MIT"])

        assert result.exit_code == EXIT_ISSUES
        assert "INVALID - 1 package(s) violate the policy" in result.output
        assert "gpl-lib@2.0.0" in result.output

    def test_exceptions_forwarded(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        with _patch_validate(PASSING) as mock_validate:
            cli_runner.invoke(
                main, ["check", str(tmp_path), "--exception", "foo@^1.0.0", "-e", "bar"]
            )

        _, options = mock_validate.call_args.args
        assert options["exceptions"] == ["foo@^1.0.0", "bar"]

    def test_config_file_discovered_in_root(
        self, cli_runner: CliRunner, tmp_path: Path
    ) -> None:
        (tmp_path / ".license-validator.yaml").write_text(
            "allowed_licenses:\n  - MIT\nexceptions:\n  - foo\n"
        )

        with _patch_validate(PASSING) as mock_validate:
            cli_runner.invoke(main, ["check", str(tmp_path), "--allow", "ISC"])

        _, options = mock_validate.call_args.args
        assert options == {"allowed_licenses": ["MIT", "ISC"], "exceptions": ["foo"]}

    def test_explicit_config_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config_file = tmp_path / "policy.yaml"
        config_file.write_text("allowed_licenses:\n  - Apache-2.0\n")

        with _patch_validate(PASSING) as mock_validate:
            cli_runner.invoke(main, ["check", str(tmp_path), "-c", str(config_file)])

        _, options = mock_validate.call_args.args
        assert options["allowed_licenses"] == ["Apache-2.0"]

    def test_invalid_config_is_an_error(
        self, cli_runner: CliRunner, tmp_path: Path
    ) -> None:
        (tmp_path / ".license-validator.yaml").write_text("unknown_key: 1\n")

        with _patch_validate(PASSING) as mock_validate:
            result = cli_runner.invoke(main, ["check", str(tmp_path)])

        assert result.exit_code == EXIT_ERROR
        assert "ConfigurationError" in result.output
        mock_validate.assert_not_called()

    def test_empty_policy_is_an_error(
        self, cli_runner: CliRunner, tmp_path: Path
    ) -> None:
        result = cli_runner.invoke(main, ["check", str(tmp_path)])

        assert result.exit_code == EXIT_ERROR
        assert "no licenses or packages specified" in result.output

    def test_missing_root_dir_is_an_error(
        self, cli_runner: CliRunner, tmp_path: Path
    ) -> None:
        result = cli_runner.invoke(main, ["check", str(tmp_path / "nope"), "-a", "MIT"])

        assert result.exit_code == EXIT_ERROR
        assert "invalid root_dir" in result.output

    def test_scan_error_is_an_error(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        with _patch_validate(error=ScanError("No pyproject.toml file found")):
            result = cli_runner.invoke(main, ["check", str(tmp_path), "-a", "MIT"])

        assert result.exit_code == EXIT_ERROR
        assert "ScanError: No pyproject.toml file found" in result.output

    def test_verbose_and_quiet_conflict(
        self, cli_runner: CliRunner, tmp_path: Path
    ) -> None:
        result = cli_runner.invoke(main, ["check", str(tmp_path), "-v", "-q"])

        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_quiet_output(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        with _patch_validate(PASSING):
            result = cli_runner.invoke(main, ["check", str(tmp_path), "-a", "MIT", "-q"])

        assert result.exit_code == EXIT_SUCCESS
        assert "PASS" in result.output
        assert "License Validation Results" not in result.output

    def test_report_flag(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        with _patch_validate(PASSING):
            result = cli_runner.invoke(
                main, ["check", str(tmp_path), "-a", "MIT", "--report"]
            )

        assert "Discovered Packages" in result.output
        assert "demo@1.0.0 [license(s): MIT]" in result.output

    def test_json_output(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        with _patch_validate(FAILING):
            result = cli_runner.invoke(
                main, ["check", str(tmp_path), "-a", "MIT", "--format", "json"]
            )

        assert result.exit_code == EXIT_ISSUES
        data = json.loads(result.output)
        assert data["valid"] is False
        assert data["invalids"] == ["gpl-lib@2.0.0"]
        assert "report" not in data

    def test_json_output_with_report(
        self, cli_runner: CliRunner, tmp_path: Path
    ) -> None:
        with _patch_validate(PASSING):
            result = cli_runner.invoke(
                main,
                ["check", str(tmp_path), "-a", "MIT", "--format", "JSON", "--report"],
            )

        assert json.loads(result.output)["report"] == PASSING.report

    def test_output_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        output_file = tmp_path / "result.txt"

        with _patch_validate(PASSING):
            result = cli_runner.invoke(
                main, ["check", str(tmp_path), "-a", "MIT", "-o", str(output_file)]
            )

        assert result.exit_code == EXIT_SUCCESS
        assert "Report written to" in result.output
        content = output_file.read_text(encoding="utf-8")
        assert "License Validation Results" in content
        assert "\x1b[" not in content

    def test_end_to_end(self, cli_runner: CliRunner, project_dir: Path) -> None:
        """Test a real run against a dependency-free project."""
        result = cli_runner.invoke(
            main, ["check", str(project_dir), "--allow", "MIT", "--format", "json"]
        )

        assert result.exit_code == EXIT_SUCCESS
        data = json.loads(result.output)
        assert data["packages"] == {"demo@1.0.0": "MIT"}
        assert data["licenses"] == ["MIT"]
