"""Steps that run before anything on the system is changed."""

import logging
from collections.abc import Callable

import typer

from tarbs.core.context import ProvisionContext
from tarbs.core.credentials import PromptFunc, collect_password, hidden_prompt
from tarbs.core.errors import PipelineAbortedError, ValidationError
from tarbs.core.records import download_records, edit_records, load_records
from tarbs.core.validation import validate_config
from tarbs.models.result import StepResult, step_failed, step_ok, step_skipped
from tarbs.utils.formatting import print_warning

logger = logging.getLogger(__name__)


def initial_check(ctx: ProvisionContext) -> StepResult:
    """Validate the configuration and make sure git is installed.

    Raises:
        ValidationError: If the configuration does not fit the system,
            or pacman cannot be used.
    """
    validate_config(ctx.config, ctx.shell, ctx.paths)

    git = ctx.shell.run(["pacman", "-S", "--noconfirm", "--needed", "git"])
    if not git.success:
        raise ValidationError([f"Could not install git with pacman: {git.error_message}"])
    return step_ok("initial check")


def _confirm(ctx: ProvisionContext, question: str) -> bool:
    if ctx.config.assume_yes:
        return True
    return typer.confirm(question, default=False)


def user_check(ctx: ProvisionContext) -> StepResult:
    """Warn and ask for confirmation when the account already exists.

    Raises:
        PipelineAbortedError: If the user declines to continue.
    """
    exists = ctx.shell.query(["id", "-u", ctx.user]).success
    if not exists:
        return step_ok("user check", f"User '{ctx.user}' will be created")

    print_warning(
        f"User '{ctx.user}' already exists.\n"
        "The following steps will overwrite the user's password and settings"
    )
    if not _confirm(ctx, "Do you really want to continue?"):
        raise PipelineAbortedError(f"User '{ctx.user}' already exists")
    return step_ok("user check", f"Reusing existing user '{ctx.user}'")


def make_password_step(
    prompt: PromptFunc = hidden_prompt,
) -> Callable[[ProvisionContext], StepResult]:
    """Create the password step with the given prompt function."""

    def ask_password(ctx: ProvisionContext) -> StepResult:
        """Collect the account password."""
        ctx.credential = collect_password(ctx.user, prompt)
        return step_ok("password")

    return ask_password


def prepare_package_list(ctx: ProvisionContext) -> StepResult:
    """Download, optionally edit, and parse the package record list.

    Raises:
        RecordParseError: If the record list is malformed.
    """
    config = ctx.config

    downloaded = download_records(config, ctx.shell)
    if downloaded is not None and not downloaded.success:
        return step_failed("package list", f"Download failed: {downloaded.error_message}")

    if ctx.dry_run and not config.packages_file.exists():
        return step_skipped("package list", "Package list not downloaded in dry-run mode")

    if config.edit_packages:
        code = edit_records(config)
        if code != 0:
            logger.warning("Editor exited with status %d", code)

    ctx.records = load_records(config.packages_file)
    return step_ok("package list", f"{len(ctx.records)} package(s)")
