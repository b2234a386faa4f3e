"""CLI entry point for license-validator."""

from __future__ import annotations

import asyncio
import io
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from license_validator import __version__
from license_validator.config import load_policy_options
from license_validator.constants import EXIT_ERROR, EXIT_ISSUES, EXIT_SUCCESS
from license_validator.exceptions import ConfigurationError, LicenseValidatorError
from license_validator.models.result import ValidationResult
from license_validator.output.json_result import ResultJsonFormatter
from license_validator.output.terminal import TerminalFormatter
from license_validator.validator import validate_async

# Module-level console for consistent output
_console = Console()
# Separate console for errors and log records (writes to stderr)
_error_console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Python License Validator - Check dependency licenses against a policy.

    Discovers the runtime dependencies of a Python project and checks
    that each declares a license on the allow-list, or is covered by a
    package exception.

    \b
    Examples:
        license-validator check --allow MIT --allow BSD-3-Clause
        license-validator check path/to/project --exception "foo@^1.0.0"
        license-validator check --format json
    """
    pass


@main.command()
@click.argument("root_dir", default=".", type=click.Path())
@click.option(
    "--allow",
    "-a",
    "allowed",
    multiple=True,
    help="Allowed license identifier or exact expression (repeatable).",
)
@click.option(
    "--exception",
    "-e",
    "exceptions",
    multiple=True,
    help="Package allowed regardless of license, as NAME or NAME@RANGE "
    "(repeatable).",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["terminal", "json"], case_sensitive=False),
    default="terminal",
    help="Output format for validation results (default: terminal).",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write report to file instead of stdout.",
)
@click.option(
    "--report",
    "show_report",
    is_flag=True,
    default=False,
    help="Include the list of discovered packages and their licenses.",
)
@click.option(
    "--verbose",
    "-v",
    "verbose_flag",
    is_flag=True,
    default=False,
    help="Log how each package was decided.",
)
@click.option(
    "--quiet",
    "-q",
    "quiet_flag",
    is_flag=True,
    default=False,
    help="Show only the status line and invalid packages.",
)
def check(
    root_dir: str,
    allowed: tuple[str, ...],
    exceptions: tuple[str, ...],
    config_path: str | None,
    output_format: str,
    output_path: str | None,
    show_report: bool,
    verbose_flag: bool,
    quiet_flag: bool,
) -> None:
    """Validate dependency licenses of the project in ROOT_DIR.

    Allowed licenses and exceptions come from the configuration file
    (.license-validator.yaml in ROOT_DIR) and are extended by --allow
    and --exception.

    \b
    Examples:
        license-validator check --allow MIT --allow ISC
        license-validator check --allow "(GPL-2.0+ WITH Bison-exception-2.2)"
        license-validator check --exception "internal-tool@>=2.0.0 <3"
        license-validator check --config policy.yaml --format json -o result.json
    """
    if verbose_flag and quiet_flag:
        raise click.UsageError("--verbose and --quiet are mutually exclusive.")

    _configure_logging(verbose_flag)
    format_value = output_format.lower()

    try:
        options = load_policy_options(
            Path(root_dir), config_path, allowed=allowed, exceptions=exceptions
        )

        result = asyncio.run(validate_async(root_dir, options))
        _display_result(result, format_value, output_path, quiet_flag, show_report)

        if not result.is_valid:
            sys.exit(EXIT_ISSUES)
        sys.exit(EXIT_SUCCESS)

    except LicenseValidatorError as e:
        _display_error(e, format_value)
        sys.exit(EXIT_ERROR)


def _configure_logging(verbose: bool) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Log debug records instead of warnings only.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=_error_console, show_path=False)],
        force=True,
    )


def _write_output_to_file(content: str, path: str) -> None:
    """Write report content to file.

    Args:
        content: The report content to write.
        path: The file path to write to.

    Raises:
        ConfigurationError: If file cannot be written.
    """
    file_path = Path(path)

    try:
        if file_path.exists():
            _console.print(
                f"[yellow]Warning: Overwriting existing file: {path}[/yellow]"
            )
        file_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot write to file '{path}': {e}") from e

    _console.print(f"[green]Report written to {path}[/green]")


def _display_result(
    result: ValidationResult,
    format_type: str,
    output_path: str | None = None,
    quiet: bool = False,
    show_report: bool = False,
) -> None:
    """Display validation results in the specified format.

    Args:
        result: The validation result to display.
        format_type: Output format (terminal, json).
        output_path: Optional file path to write output to.
        quiet: Terminal format shows the status line only.
        show_report: Include the discovery report.
    """
    if not show_report:
        result = result.model_copy(update={"report": None})

    if format_type == "json":
        content = ResultJsonFormatter().format_result(result)
    elif output_path:
        # Terminal format to file is rendered without colour
        buffer = Console(file=io.StringIO(), record=True, width=120)
        TerminalFormatter(
            console=buffer, quiet=quiet, show_report=show_report
        ).format_result(result)
        content = buffer.export_text()
    else:
        TerminalFormatter(
            console=_console, quiet=quiet, show_report=show_report
        ).format_result(result)
        return

    if output_path:
        _write_output_to_file(content, output_path)
    else:
        click.echo(content)


def _display_error(error: LicenseValidatorError, format_type: str) -> None:
    """Display error message to user on stderr.

    Args:
        error: The exception that occurred.
        format_type: Output format type for styling.
    """
    message = f"Error: {type(error).__name__}: {error}"

    if format_type == "terminal":
        _error_console.print(f"[red bold]{escape(message)}[/red bold]")
    else:
        click.echo(message, err=True)


if __name__ == "__main__":
    main()
