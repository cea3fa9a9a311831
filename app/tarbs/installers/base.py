"""Abstract base class for package installers.

This module defines the Installer interface that every package source
strategy (official repositories, AUR, git) implements.
"""

from abc import ABC, abstractmethod

from tarbs.models.record import PackageRecord, PackageTag
from tarbs.models.result import RecordResult
from tarbs.utils.shell import CommandResult, Shell


class Installer(ABC):
    """Abstract base class for all package installers.

    Installers install a single package record from one source. They
    never raise for a failed installation; the failure is reported in
    the returned RecordResult.

    Attributes:
        shell: Command runner (carries dry-run mode).

    Example:
        >>> installer = PacmanInstaller(Shell(dry_run=True))
        >>> result = installer.install(PackageRecord(PackageTag.OFFICIAL, "htop"))
        >>> result.success
        True
    """

    def __init__(self, shell: Shell) -> None:
        """Initialize the installer.

        Args:
            shell: Command runner used for every external command.
        """
        self.shell = shell

    @property
    def dry_run(self) -> bool:
        """Check if installer is in dry-run mode."""
        return self.shell.dry_run

    @property
    @abstractmethod
    def tag(self) -> PackageTag:
        """Return the package tag this installer handles."""

    @abstractmethod
    def install(self, record: PackageRecord) -> RecordResult:
        """Install one package record.

        Args:
            record: Record to install. Its tag matches :attr:`tag`.

        Returns:
            RecordResult describing the outcome.
        """

    def _result_from_command(self, record: PackageRecord, result: CommandResult) -> RecordResult:
        """Convert a command result into a record result."""
        if result.success:
            message = "Dry-run completed" if self.dry_run else "Installed"
            return RecordResult(record=record, success=True, message=message)
        return RecordResult(record=record, success=False, error=result.error_message)

    def _check_tag(self, record: PackageRecord) -> None:
        """Reject records meant for another installer.

        Raises:
            ValueError: If the record's tag doesn't match this installer.
        """
        if record.tag != self.tag:
            msg = (
                f"Record tag {record.tag.label} doesn't match "
                f"installer tag {self.tag.label}"
            )
            raise ValueError(msg)
