"""pacman installer implementation.

Installs packages from the official repositories.
"""

import logging

from tarbs.installers.base import Installer
from tarbs.models.record import PackageRecord, PackageTag
from tarbs.models.result import RecordResult
from tarbs.utils.shell import CommandResult

logger = logging.getLogger(__name__)


class PacmanInstaller(Installer):
    """Installer for official repository packages.

    Uses ``pacman --needed`` so already-installed packages are a no-op.
    """

    @property
    def tag(self) -> PackageTag:
        """Return OFFICIAL as the handled tag."""
        return PackageTag.OFFICIAL

    def install(self, record: PackageRecord) -> RecordResult:
        """Install a package with pacman.

        Args:
            record: Official repository record.

        Returns:
            RecordResult for the package.
        """
        self._check_tag(record)
        logger.debug("pacman install %s", record.name)
        return self._result_from_command(record, self.install_package(record.name))

    def install_package(self, name: str) -> CommandResult:
        """Install a single package by name, outside of the record list.

        Args:
            name: Package name.

        Returns:
            CommandResult of the pacman invocation.
        """
        return self.shell.run(["pacman", "--noconfirm", "--needed", "-S", name])

    def refresh_keyring(self) -> CommandResult:
        """Refresh the Arch Linux keyring before installing packages."""
        return self.shell.run(["pacman", "--noconfirm", "-Sy", "archlinux-keyring"])
