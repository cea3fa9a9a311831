"""Package source dispatching.

Routes each package record to the installer registered for its tag and
collects one result per record, in record order.
"""

import logging
from collections.abc import Callable, Iterable, Sequence

from tarbs.installers.base import Installer
from tarbs.models.record import PackageRecord, PackageTag
from tarbs.models.result import RecordResult

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, PackageRecord], None]


class PackageDispatcher:
    """Dispatch package records to their installers.

    Exactly one installer handles each record, chosen solely by the
    record's tag. A failed record never stops the loop; the caller
    decides what to do with the failures.

    Attributes:
        installers: Installer per package tag.
    """

    def __init__(self, installers: Iterable[Installer]) -> None:
        """Initialize the dispatcher.

        Args:
            installers: One installer per tag.

        Raises:
            ValueError: If two installers claim the same tag.
        """
        self.installers: dict[PackageTag, Installer] = {}
        for installer in installers:
            if installer.tag in self.installers:
                msg = f"Duplicate installer for tag {installer.tag.label}"
                raise ValueError(msg)
            self.installers[installer.tag] = installer

    def installer_for(self, record: PackageRecord) -> Installer | None:
        """Return the installer registered for the record's tag."""
        return self.installers.get(record.tag)

    def run(
        self,
        records: Sequence[PackageRecord],
        progress: ProgressCallback | None = None,
    ) -> list[RecordResult]:
        """Install every record in order.

        Args:
            records: Records in file order.
            progress: Called with ``(index, total, record)`` before each
                installation, index starting at 1.

        Returns:
            One RecordResult per record, in the same order.
        """
        total = len(records)
        results: list[RecordResult] = []

        for index, record in enumerate(records, start=1):
            if progress is not None:
                progress(index, total, record)
            logger.debug("[%d/%d] %s. %s", index, total, record.name, record.description)

            installer = self.installer_for(record)
            if installer is None:
                results.append(
                    RecordResult(
                        record=record,
                        success=False,
                        error=f"No installer for {record.tag.label} packages",
                    )
                )
                continue

            result = installer.install(record)
            if result.failed:
                logger.warning("Failed to install %s: %s", record.name, result.error)
            results.append(result)

        return results
