"""AUR installer implementation.

Installs packages from the Arch User Repository with the yay helper,
running as the provisioned (unprivileged) user.
"""

import logging
import shutil
import tempfile
from pathlib import Path

from tarbs.core.errors import AurHelperError
from tarbs.installers.base import Installer
from tarbs.models.record import PackageRecord, PackageTag
from tarbs.models.result import RecordResult
from tarbs.utils.shell import Shell

logger = logging.getLogger(__name__)

YAY_REPO = "https://aur.archlinux.org/yay.git"


class AurInstaller(Installer):
    """Installer for AUR packages.

    Attributes:
        user: Account yay runs as. makepkg refuses to run as root.
        helper_path: Location of the yay binary.
    """

    # Answers to any prompt yay still asks despite --noconfirm
    _YES = "y\n" * 32

    def __init__(self, shell: Shell, user: str, helper_path: Path = Path("/usr/bin/yay")) -> None:
        super().__init__(shell)
        self.user = user
        self.helper_path = helper_path

    @property
    def tag(self) -> PackageTag:
        """Return AUR as the handled tag."""
        return PackageTag.AUR

    def is_bootstrapped(self) -> bool:
        """Check if the AUR helper is installed."""
        return self.helper_path.exists()

    def bootstrap(self) -> None:
        """Build and install yay from the AUR unless it is already present.

        Raises:
            AurHelperError: If cloning or building yay fails.
        """
        if self.is_bootstrapped():
            logger.debug("yay already installed at %s", self.helper_path)
            return

        git = self.shell.run(["pacman", "--noconfirm", "--needed", "-S", "git", "base-devel"])
        if not git.success:
            raise AurHelperError(f"Could not install build tools: {git.error_message}")

        builddir = Path(tempfile.mkdtemp(prefix="tarbs-yay-"))
        try:
            chown = self.shell.run(["chown", "-R", f"{self.user}:wheel", str(builddir)])
            if not chown.success:
                raise AurHelperError(f"Could not prepare build directory: {chown.error_message}")

            clone = self.shell.run(
                ["git", "clone", "--depth", "1", YAY_REPO, str(builddir / "yay")],
                user=self.user,
            )
            if not clone.success:
                raise AurHelperError(f"Could not clone yay: {clone.error_message}")

            build = self.shell.run(
                ["makepkg", "--noconfirm", "-si"],
                user=self.user,
                cwd=str(builddir / "yay"),
            )
            if not build.success:
                raise AurHelperError(f"Could not build yay: {build.error_message}")
        finally:
            shutil.rmtree(builddir, ignore_errors=True)

        logger.info("Installed yay")

    def install(self, record: PackageRecord) -> RecordResult:
        """Install an AUR package with yay as the provisioned user.

        Args:
            record: AUR record.

        Returns:
            RecordResult for the package.
        """
        self._check_tag(record)
        logger.debug("yay install %s as %s", record.name, self.user)
        result = self.shell.run(
            ["yay", "--noconfirm", "-S", record.name],
            user=self.user,
            input_text=self._YES,
        )
        return self._result_from_command(record, result)
