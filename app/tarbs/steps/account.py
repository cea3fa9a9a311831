"""User account and sudo policy steps."""

import logging
from collections.abc import Callable

from tarbs.core.context import ProvisionContext
from tarbs.models.result import StepResult, step_failed, step_ok
from tarbs.utils.files import replace_tagged_lines

logger = logging.getLogger(__name__)

SUDOERS_TAG = "#TARBS"

INSTALL_POLICY = ["%wheel ALL=(ALL) NOPASSWD: ALL"]

FINAL_POLICY = [
    "%wheel ALL=(ALL) ALL",
    "%wheel ALL=(ALL) NOPASSWD: "
    + ",".join(
        [
            "/usr/bin/shutdown",
            "/usr/bin/reboot",
            "/usr/bin/systemctl suspend",
            "/usr/bin/wifi-menu",
            "/usr/bin/mount",
            "/usr/bin/umount",
            "/usr/bin/pacman -Syu",
            "/usr/bin/pacman -Syyu",
            "/usr/bin/packer -Syu",
            "/usr/bin/packer -Syyu",
            "/usr/bin/systemctl restart NetworkManager",
            "/usr/bin/rc-service NetworkManager restart",
            "/usr/bin/pacman -Syyu --noconfirm",
            "/usr/bin/loadkeys",
            "/usr/bin/yay",
        ]
    ),
]


def add_user(ctx: ProvisionContext) -> StepResult:
    """Create the account (or adopt an existing one) and set its password.

    The credential is cleared whether or not setting the password worked.
    """
    shell = ctx.shell
    user = ctx.user
    home = str(ctx.home)
    errors: list[str] = []

    try:
        created = shell.run(["useradd", "-m", "-g", "wheel", "-s", ctx.config.login_shell, user])
        if not created.success:
            logger.debug("useradd failed, adopting existing user: %s", created.error_message)
            for args in (
                ["usermod", "-a", "-G", "wheel", user],
                ["mkdir", "-p", home],
                ["chown", f"{user}:wheel", home],
            ):
                result = shell.run(args)
                if not result.success:
                    errors.append(result.error_message)

        video = shell.run(["usermod", "-a", "-G", "video", user])
        if not video.success:
            errors.append(video.error_message)

        source_dir = ctx.paths.source_dir_of(user)
        for args in (
            ["mkdir", "-p", str(source_dir)],
            ["chown", "-R", f"{user}:wheel", str(source_dir.parent)],
        ):
            result = shell.run(args)
            if not result.success:
                errors.append(result.error_message)

        if ctx.credential is not None:
            password = shell.run(["chpasswd"], input_text=f"{user}:{ctx.credential.secret}\n")
            if not password.success:
                errors.append(f"chpasswd failed: {password.error_message}")
    finally:
        ctx.clear_credential()

    if errors:
        return step_failed("add user", "; ".join(errors))
    return step_ok("add user", f"User '{user}' ready")


def make_sudoers_step(lines: list[str]) -> Callable[[ProvisionContext], StepResult]:
    """Create a step replacing the tagged sudoers policy with ``lines``."""

    def set_sudoers(ctx: ProvisionContext) -> StepResult:
        """Replace the tagged sudoers lines."""
        try:
            replace_tagged_lines(ctx.paths.sudoers, lines, SUDOERS_TAG, dry_run=ctx.dry_run)
        except OSError as e:
            return step_failed("sudoers", str(e))
        return step_ok("sudoers", f"{len(lines)} policy line(s)")

    return set_sudoers
