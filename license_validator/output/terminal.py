"""Terminal output formatter using Rich."""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from license_validator.constants import LEGAL_DISCLAIMER_SHORT
from license_validator.models.result import ValidationResult


class TerminalFormatter:
    """Format validation results for terminal display using Rich."""

    def __init__(
        self,
        console: Optional[Console] = None,
        quiet: bool = False,
        show_report: bool = False,
    ) -> None:
        """Initialize the formatter with a Rich console.

        Args:
            console: Optional Rich Console instance. If not provided,
                a new Console will be created.
            quiet: Only print the status line and invalid packages.
            show_report: Also print the raw discovery report.
        """
        self._console = console if console is not None else Console()
        self._quiet = quiet
        self._show_report = show_report

    def format_result(self, result: ValidationResult) -> None:
        """Display a validation result.

        Args:
            result: The validation result to display.
        """
        if self._quiet:
            self._print_status(result)
            return

        if self._show_report and result.report:
            self._console.print(
                Panel(escape(result.report), title="[bold]Discovered Packages[/bold]")
            )

        self._print_disclaimer()

        invalid = set(result.invalids)
        table = Table(title="License Validation Results")
        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("License", style="green")
        table.add_column("Status")

        for identity, license_display in result.packages.items():
            status = "[red]INVALID[/red]" if identity in invalid else "[green]OK[/green]"
            shown = escape(license_display) if license_display else "[yellow]None[/yellow]"
            table.add_row(escape(identity), shown, status)

        self._console.print(table)

        self._console.print(f"\n[bold]Total packages:[/bold] {len(result.packages)}")
        if result.licenses:
            self._console.print(
                f"[bold]Allowed licenses used:[/bold] {escape(', '.join(result.licenses))}"
            )
        self._print_status(result)

    def _print_status(self, result: ValidationResult) -> None:
        if result.is_valid:
            self._console.print(
                f"[green]PASS[/green] - All {len(result.packages)} packages allowed"
            )
            return

        self._console.print(
            f"[red]INVALID[/red] - {len(result.invalids)} package(s) violate the policy"
        )
        for identity in result.invalids:
            declared = result.packages.get(identity) or "no license declared"
            self._console.print(
                f"  [red]![/red] {escape(identity)} ([yellow]{escape(declared)}[/yellow])"
            )

    def _print_disclaimer(self) -> None:
        panel = Panel(
            LEGAL_DISCLAIMER_SHORT,
            title="[bold yellow]NOT LEGAL ADVICE[/bold yellow]",
            border_style="yellow",
        )
        self._console.print(panel)
        self._console.print("")
