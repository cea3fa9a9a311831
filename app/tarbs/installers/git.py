"""Git installer implementation.

Syncs a program's repository into the user's source directory and runs
its ``make install``.
"""

import logging
from pathlib import Path

from tarbs.core.repo_sync import RepoSync
from tarbs.installers.base import Installer
from tarbs.models.record import PackageRecord, PackageTag
from tarbs.models.result import RecordResult
from tarbs.utils.shell import Shell

logger = logging.getLogger(__name__)


class GitInstaller(Installer):
    """Installer for programs built from git repositories.

    The repository must provide a Makefile with an ``install`` target.

    Attributes:
        source_dir: Parent directory of the cloned programs.
        repo_sync: Sync helper that clones as the provisioned user.
    """

    def __init__(self, shell: Shell, repo_sync: RepoSync, source_dir: Path) -> None:
        super().__init__(shell)
        self.repo_sync = repo_sync
        self.source_dir = source_dir

    @property
    def tag(self) -> PackageTag:
        """Return GIT as the handled tag."""
        return PackageTag.GIT

    def target_dir(self, record: PackageRecord) -> Path:
        """Return the checkout directory for a git record."""
        return self.source_dir / record.program_name

    def install(self, record: PackageRecord) -> RecordResult:
        """Sync the repository and run ``make install`` in it.

        Args:
            record: Git record whose name is the repository URL.

        Returns:
            RecordResult for the program.
        """
        self._check_tag(record)
        target = self.target_dir(record)

        synced = self.repo_sync.sync(record.name, target)
        if synced.failed:
            return RecordResult(record=record, success=False, error=synced.error)

        logger.debug("make install in %s", target)
        result = self.shell.run(["make", "install"], cwd=str(target))
        return self._result_from_command(record, result)
