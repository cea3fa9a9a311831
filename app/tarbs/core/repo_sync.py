"""Repository sync.

Clones a git repository into a temporary directory and merges its
contents over a destination directory: files present in both places are
overwritten, files only present in the destination survive. Used for
the dotfiles repository and for git-built programs.
"""

import logging
import shutil
import tempfile
from pathlib import Path

from tarbs.models.result import StepResult, step_failed, step_ok
from tarbs.utils.files import merge_tree
from tarbs.utils.shell import Shell

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "master"


class RepoSync:
    """Synchronize git repositories into directories owned by a user.

    Attributes:
        shell: Command runner.
        user: Owner of the synced files; git runs as this user.
        group: Group assigned together with ``user``.
    """

    def __init__(self, shell: Shell, user: str, group: str = "wheel") -> None:
        self.shell = shell
        self.user = user
        self.group = group

    def sync(
        self,
        source_url: str,
        destination: Path,
        branch: str = DEFAULT_BRANCH,
    ) -> StepResult:
        """Sync ``source_url`` at ``branch`` into ``destination``.

        Args:
            source_url: Repository to clone.
            destination: Directory to merge the clone into.
            branch: Branch to clone.

        Returns:
            StepResult named after the repository; failed if any of
            clone, ownership change or copy failed.
        """
        name = f"sync {source_url}"
        logger.debug("Syncing %s (%s) into %s", source_url, branch, destination)

        if self.shell.dry_run:
            self.shell.run(self._clone_args(source_url, "<tmpdir>", branch), user=self.user)
            logger.info("[dry-run] merge clone of %s into %s", source_url, destination)
            return step_ok(name, "Dry-run completed")

        tempdir = Path(tempfile.mkdtemp(prefix="tarbs-"))
        try:
            destination.mkdir(parents=True, exist_ok=True)

            owner = self.shell.run(
                ["chown", "-R", f"{self.user}:{self.group}", str(tempdir), str(destination)]
            )
            if not owner.success:
                return step_failed(name, f"chown failed: {owner.error_message}")

            clone = self.shell.run(
                self._clone_args(source_url, str(tempdir), branch),
                user=self.user,
            )
            if not clone.success:
                return step_failed(name, f"git clone failed: {clone.error_message}")

            merge_tree(tempdir, destination)

            # Files copied by root must end up owned by the user.
            owner = self.shell.run(
                ["chown", "-R", f"{self.user}:{self.group}", str(destination)]
            )
            if not owner.success:
                return step_failed(name, f"chown failed: {owner.error_message}")
        except OSError as e:
            return step_failed(name, f"copy failed: {e}")
        finally:
            shutil.rmtree(tempdir, ignore_errors=True)

        return step_ok(name, f"Synced into {destination}")

    @staticmethod
    def _clone_args(source_url: str, target: str, branch: str) -> list[str]:
        """Build a shallow, recursive clone command."""
        return [
            "git",
            "clone",
            "--recursive",
            "-b",
            branch,
            "--depth",
            "1",
            source_url,
            target,
        ]
