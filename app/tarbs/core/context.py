"""Run context shared by the provisioning steps."""

from dataclasses import dataclass, field
from pathlib import Path

from tarbs.core.credentials import Credential
from tarbs.core.paths import SystemPaths
from tarbs.models.config import ProvisioningConfig
from tarbs.models.record import PackageRecord
from tarbs.utils.shell import Shell


@dataclass(slots=True)
class ProvisionContext:
    """Everything a step needs, passed explicitly.

    ``config`` never changes during a run. ``credential`` and ``records``
    are filled in by the password and package list steps.

    Attributes:
        config: Immutable provisioning configuration.
        shell: Command runner (carries dry-run mode).
        paths: System file locations.
        credential: Password of the account, until it has been set.
        records: Package records to install, in file order.
    """

    config: ProvisioningConfig
    shell: Shell
    paths: SystemPaths = field(default_factory=SystemPaths)
    credential: Credential | None = None
    records: list[PackageRecord] = field(default_factory=list)

    @property
    def user(self) -> str:
        """Return the provisioned account name."""
        return self.config.username

    @property
    def home(self) -> Path:
        """Return the provisioned account's home directory."""
        return self.paths.home_of(self.config.username)

    @property
    def dry_run(self) -> bool:
        """Check if the run only simulates changes."""
        return self.shell.dry_run

    def clear_credential(self) -> None:
        """Drop the password from memory."""
        if self.credential is not None:
            self.credential.clear()
            self.credential = None
