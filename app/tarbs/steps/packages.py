"""Package installation steps."""

from tarbs.core.context import ProvisionContext
from tarbs.core.dispatcher import PackageDispatcher
from tarbs.core.errors import AurHelperError
from tarbs.core.repo_sync import RepoSync
from tarbs.installers.aur import AurInstaller
from tarbs.installers.git import GitInstaller
from tarbs.installers.pacman import PacmanInstaller
from tarbs.models.record import PackageRecord
from tarbs.models.result import StepResult, step_failed, step_ok
from tarbs.utils.files import force_symlink
from tarbs.utils.formatting import print_info

BASE_PACKAGES: list[tuple[str, str]] = [
    ("xorg-server", "Xorg X Server"),
    ("xorg-xinit", "X.Org initialisation program"),
    ("xorg-xsetroot", "Utility for setting root window to pattern or color"),
    ("xorg-xrandr", "Interface for RandR interface"),
    ("libxinerama", "X11 Xinerama extension library"),
]

LIBINPUT_CONF = "40-libinput.conf"


def build_dispatcher(ctx: ProvisionContext) -> PackageDispatcher:
    """Create the dispatcher with one installer per package source."""
    repo_sync = RepoSync(ctx.shell, ctx.user)
    return PackageDispatcher(
        [
            PacmanInstaller(ctx.shell),
            AurInstaller(ctx.shell, ctx.user, helper_path=ctx.paths.yay),
            GitInstaller(ctx.shell, repo_sync, ctx.paths.source_dir_of(ctx.user)),
        ]
    )


def bootstrap_aur_helper(ctx: ProvisionContext) -> StepResult:
    """Install yay; the pipeline cannot continue without it."""
    installer = AurInstaller(ctx.shell, ctx.user, helper_path=ctx.paths.yay)
    if installer.is_bootstrapped():
        return step_ok("aur helper", "yay already installed")
    try:
        installer.bootstrap()
    except AurHelperError as e:
        return step_failed("aur helper", f"yay has to be installed to continue: {e}")
    return step_ok("aur helper", "yay installed")


def refresh_keys(ctx: ProvisionContext) -> StepResult:
    """Refresh the Arch Linux keyring."""
    result = PacmanInstaller(ctx.shell).refresh_keyring()
    if not result.success:
        return step_failed("keyring", result.error_message)
    return step_ok("keyring")


def _install_base(pacman: PacmanInstaller) -> list[str]:
    """Install the X base packages, returning the names that failed."""
    failed: list[str] = []
    for name, description in BASE_PACKAGES:
        print_info(f"Install {name}. \"{description}\"")
        if not pacman.install_package(name).success:
            failed.append(name)
    return failed


def _setup_libinput(ctx: ProvisionContext, pacman: PacmanInstaller) -> str | None:
    """Install libinput and enable its X11 configuration.

    Returns:
        Error message, or None on success.
    """
    print_info("Configure libinput for laptops")
    result = pacman.install_package("libinput")
    if not result.success:
        return f"libinput: {result.error_message}"
    try:
        force_symlink(
            ctx.paths.xorg_share_dir / LIBINPUT_CONF,
            ctx.paths.xorg_conf_dir / LIBINPUT_CONF,
            dry_run=ctx.dry_run,
        )
    except OSError as e:
        return f"libinput: {e}"
    return None


def _print_progress(index: int, total: int, record: PackageRecord) -> None:
    print_info(f"[{index}/{total}] {record.name}. {record.description}")


def install_packages(ctx: ProvisionContext) -> StepResult:
    """Install the base packages, then every record of the package list.

    Failed records don't stop the loop. The step fails when any base
    package or record failed, carrying one result per record.
    """
    pacman = PacmanInstaller(ctx.shell)
    errors: list[str] = []

    failed_base = _install_base(pacman)
    if failed_base:
        errors.append(f"base packages failed: {', '.join(failed_base)}")

    if ctx.config.is_laptop:
        libinput_error = _setup_libinput(ctx, pacman)
        if libinput_error:
            errors.append(libinput_error)

    records = build_dispatcher(ctx).run(ctx.records, progress=_print_progress)
    failed_records = [r for r in records if r.failed]
    if failed_records:
        errors.append(f"{len(failed_records)} of {len(records)} package(s) failed")

    message = f"{len(records) - len(failed_records)} of {len(records)} package(s) installed"
    return StepResult(
        name="packages",
        success=not errors,
        message=message,
        error="; ".join(errors) or None,
        records=tuple(records),
    )
