"""Dotfiles and shell plugin steps."""

from tarbs.core.context import ProvisionContext
from tarbs.core.repo_sync import RepoSync
from tarbs.models.result import StepResult, step_failed, step_ok

ANTIBODY_INSTALLER = "https://git.io/antibody"


def install_dotfiles(ctx: ProvisionContext) -> StepResult:
    """Sync the dotfiles repository into the user's home directory."""
    synced = RepoSync(ctx.shell, ctx.user).sync(
        ctx.config.dotfiles_repo,
        ctx.home,
        branch=ctx.config.dotfiles_branch,
    )
    if synced.failed:
        return step_failed("dotfiles", synced.error or "sync failed")

    # Keep `git status` in the home directory readable.
    hide = ctx.shell.run(
        ["git", "config", "--local", "status.showUntrackedFiles", "no"],
        user=ctx.user,
        cwd=str(ctx.home),
    )
    if not hide.success:
        return step_failed("dotfiles", hide.error_message)
    return step_ok("dotfiles", f"Synced {ctx.config.dotfiles_repo}")


def install_antibody(ctx: ProvisionContext) -> StepResult:
    """Install the antibody zsh plugin manager into ``~/.local/bin``."""
    bindir = ctx.home / ".local" / "bin"
    result = ctx.shell.run(
        ["sh", "-c", f"curl -sfL {ANTIBODY_INSTALLER} | sh -s - -b '{bindir}'"],
        user=ctx.user,
    )
    if not result.success:
        return step_failed("antibody", result.error_message)
    return step_ok("antibody", f"Installed into {bindir}")
