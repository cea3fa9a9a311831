"""Rich display functions for step and package results.

Provides the tables and summary printed at the end of a provisioning run.
"""

from rich.table import Table

from tarbs.models.result import RecordResult, StepResult
from tarbs.utils.formatting import console, print_success


def create_steps_table(results: list[StepResult], dry_run: bool = False) -> Table:
    """Create a Rich table displaying step results.

    Successful steps show "OK", skipped steps "SKIP" and failed steps
    "FAIL" with the error message.

    Args:
        results: Step results in execution order.
        dry_run: Whether this was a dry-run (changes table title).

    Returns:
        Rich Table configured for step display.
    """
    title = "Provisioning Results (Dry Run)" if dry_run else "Provisioning Results"

    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Step", no_wrap=True)
    table.add_column("Message")

    for result in results:
        if result.failed:
            status = "[error]FAIL[/error]"
            message = result.error or "Unknown error"
        elif result.skipped:
            status = "[skipped]SKIP[/skipped]"
            message = result.message or "Not configured"
        else:
            status = "[success]OK[/success]"
            message = result.message or ""

        table.add_row(status, result.name, f"[muted]{message}[/muted]")

    return table


def create_records_table(records: list[RecordResult]) -> Table:
    """Create a Rich table listing package records that failed.

    Args:
        records: Failed record results.

    Returns:
        Rich Table configured for record display.
    """
    table = Table(
        title="Failed Packages",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Source", width=8)
    table.add_column("Package", no_wrap=True)
    table.add_column("Error")

    for result in records:
        table.add_row(
            result.record.tag.label,
            f"[error]{result.record.name}[/error]",
            f"[muted]{result.error or 'Unknown error'}[/muted]",
        )

    return table


def print_results_summary(results: list[StepResult]) -> None:
    """Print a summary of the run.

    Shows a success message when every step succeeded, or a count of
    failed steps and packages otherwise.

    Args:
        results: Step results in execution order.
    """
    failed_steps = [r for r in results if r.failed]
    failed_records = [rec for r in results for rec in r.failed_records]

    if not failed_steps:
        print_success("Installation is done. You can reboot now")
        return

    parts = [f"[error]{len(failed_steps)} step(s) failed[/error]"]
    if failed_records:
        parts.append(f"[error]{len(failed_records)} package(s) failed[/error]")
    console.print("\n" + ", ".join(parts))
