"""Result models for provisioning steps and package records.

These immutable structures capture the outcome of each unit of work so
the orchestrator can decide whether to continue, abort or report.
"""

from dataclasses import dataclass

from tarbs.models.record import PackageRecord


@dataclass(frozen=True, slots=True)
class RecordResult:
    """Result of installing a single package record.

    Attributes:
        record: The record that was processed.
        success: Whether the installation completed successfully.
        message: Optional success message or additional information.
        error: Optional error message if the installation failed.
    """

    record: PackageRecord
    success: bool
    message: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the installation failed."""
        return not self.success


@dataclass(frozen=True, slots=True)
class StepResult:
    """Result of a single provisioning step.

    Attributes:
        name: Step name, e.g. ``"timezone"``.
        success: Whether the step completed successfully.
        skipped: True when the step had nothing to do (setting unset).
        message: Optional success message or additional information.
        error: Optional error message if the step failed.
        records: Per-record results for the package installation step.
    """

    name: str
    success: bool
    skipped: bool = False
    message: str | None = None
    error: str | None = None
    records: tuple[RecordResult, ...] = ()

    @property
    def failed(self) -> bool:
        """Check if the step failed."""
        return not self.success

    @property
    def failed_records(self) -> tuple[RecordResult, ...]:
        """Return the records that failed to install."""
        return tuple(r for r in self.records if r.failed)


def step_ok(name: str, message: str | None = None) -> StepResult:
    """Create a successful step result."""
    return StepResult(name=name, success=True, message=message)


def step_skipped(name: str, message: str | None = None) -> StepResult:
    """Create a skipped step result."""
    return StepResult(name=name, success=True, skipped=True, message=message)


def step_failed(name: str, error: str) -> StepResult:
    """Create a failed step result."""
    return StepResult(name=name, success=False, error=error)
