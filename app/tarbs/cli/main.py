"""Main CLI application entry point.

Defines the Typer application, its options and the console script
entry point.
"""

from pathlib import Path
from typing import Annotated

import typer

from tarbs import __version__
from tarbs.cli.display import create_records_table, create_steps_table, print_results_summary
from tarbs.core.context import ProvisionContext
from tarbs.core.errors import SettingsError, TarbsError, ValidationError
from tarbs.core.logs import attach_log_file, setup_logging
from tarbs.core.pipeline import Pipeline, StepHook
from tarbs.core.settings import build_config, load_settings, save_settings, settings_from_config
from tarbs.models.config import ProvisioningConfig
from tarbs.models.result import StepResult
from tarbs.steps import default_steps
from tarbs.utils.formatting import console, print_error, print_info, print_warning
from tarbs.utils.shell import Shell

app = typer.Typer(
    name="tarbs",
    help="Provision a freshly installed Arch Linux system.",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"tarbs version {__version__}")
        raise typer.Exit()


def after_validation(config: ProvisioningConfig, save: bool) -> StepHook:
    """Build the pipeline hook that runs once the initial check has passed.

    The log file is opened and, with ``--save-settings``, the defaults are
    stored only for a configuration that validated.
    """

    def hook(result: StepResult) -> None:
        if result.name != "initial check":
            return
        attach_log_file()
        if not save:
            return
        try:
            path = save_settings(settings_from_config(config))
        except SettingsError as e:
            print_warning(f"Could not save defaults: {e}")
        else:
            print_info(f"Saved defaults to {path}")

    return hook


@app.command()
def install(
    username: Annotated[
        str,
        typer.Option("-u", "--user", help="Set user name.", show_default=False),
    ],
    editor: Annotated[
        str | None,
        typer.Option("-e", "--editor", help="Choose another editor (default: vim)."),
    ] = None,
    edit_packages: Annotated[
        bool,
        typer.Option("-f", "--edit-packages", help="Edit the packages file before installing."),
    ] = False,
    grub: Annotated[
        bool,
        typer.Option("-g", "--grub", help="Install the GRUB bootloader."),
    ] = False,
    efi_dir: Annotated[
        Path | None,
        typer.Option("-d", "--efi-dir", help="EFI boot directory. Needed for GRUB on UEFI."),
    ] = None,
    efi_partition: Annotated[
        str | None,
        typer.Option("-p", "--efi-partition", help="EFI boot partition. Needed for GRUB on UEFI."),
    ] = None,
    locale: Annotated[
        str | None,
        typer.Option("-l", "--locale", help="Set locale, e.g. en_US."),
    ] = None,
    timezone: Annotated[
        str | None,
        typer.Option("-t", "--timezone", help="Set timezone, e.g. Europe/London."),
    ] = None,
    hostname: Annotated[
        str | None,
        typer.Option("-n", "--hostname", help="Set hostname."),
    ] = None,
    laptop: Annotated[
        bool,
        typer.Option("--laptop", help="Configure libinput for touchpads."),
    ] = False,
    packages: Annotated[
        Path | None,
        typer.Option("--packages", help="Package list (downloaded when missing)."),
    ] = None,
    dotfiles: Annotated[
        str | None,
        typer.Option("--dotfiles", help="Dotfiles repository URL."),
    ] = None,
    branch: Annotated[
        str | None,
        typer.Option("--branch", help="Dotfiles repository branch."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be done without making changes."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompts and proceed."),
    ] = False,
    save: Annotated[
        bool,
        typer.Option("--save-settings", help="Store the given options as defaults."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Provision a freshly installed Arch Linux system.

    Creates the user, installs the package list (official repositories,
    AUR and git), deploys the dotfiles and applies system settings.
    Must be run as root.

    Examples:
        tarbs -u alice                              # Only user, packages and dotfiles
        tarbs -u alice -t Europe/Berlin -l en_US -n box
        tarbs -u alice -g -d /boot/efi -p /dev/sda1 # Also install GRUB on UEFI
        tarbs -u alice --dry-run                    # Preview the commands
    """
    setup_logging(verbose=verbose)

    overrides = {
        "editor": editor,
        "edit_packages": edit_packages or None,
        "grub": grub or None,
        "efi_dir": efi_dir,
        "efi_partition": efi_partition,
        "locale": locale,
        "timezone": timezone,
        "hostname": hostname,
        "is_laptop": laptop or None,
        "packages_file": packages,
        "dotfiles_repo": dotfiles,
        "dotfiles_branch": branch,
        "dry_run": dry_run,
        "assume_yes": yes,
    }

    try:
        config = build_config(username, load_settings(), overrides)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    context = ProvisionContext(config=config, shell=Shell(dry_run=config.dry_run))
    pipeline = Pipeline(default_steps(), context, on_step_done=after_validation(config, save))

    try:
        results = pipeline.run()
    except ValidationError as e:
        for problem in e.problems:
            print_error(problem)
        raise typer.Exit(code=1) from e
    except TarbsError as e:
        print_error(str(e))
        print_error("Installation aborted")
        raise typer.Exit(code=1) from e

    console.print()
    console.print(create_steps_table(results, dry_run=config.dry_run))

    failed_records = [rec for r in results for rec in r.failed_records]
    if failed_records:
        console.print(create_records_table(failed_records))

    print_results_summary(results)

    if any(r.failed for r in results):
        raise typer.Exit(code=1)


def run() -> None:
    """Console script entry point.

    Usage errors (unknown flag, missing ``-u``) exit with status 1.
    """
    try:
        app()
    except SystemExit as e:
        if e.code == 2:
            raise SystemExit(1) from None
        raise


if __name__ == "__main__":
    run()
