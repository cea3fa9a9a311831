"""Package record list I/O.

The record list is a comma-separated file with one header line followed
by ``tag,name,description`` rows. Descriptions may be double-quoted and
contain commas.
"""

import csv
import io
import logging
from pathlib import Path

from tarbs.core.errors import RecordParseError
from tarbs.models.config import ProvisioningConfig
from tarbs.models.record import PackageRecord, PackageTag
from tarbs.utils.shell import CommandResult, Shell, run_interactive

logger = logging.getLogger(__name__)


def parse_records(text: str) -> list[PackageRecord]:
    """Parse record list text into package records.

    The first line is a header and is skipped. Blank lines are ignored.
    Record order is preserved.

    Args:
        text: Full content of the record list.

    Returns:
        Records in file order.

    Raises:
        RecordParseError: If a row has an unknown tag or no package name.
    """
    reader = csv.reader(io.StringIO(text))
    records: list[PackageRecord] = []

    for line_no, row in enumerate(reader, start=1):
        if line_no == 1 or not any(column.strip() for column in row):
            continue
        if len(row) < 2:
            msg = f"Line {line_no}: expected 'tag,name,description', got {','.join(row)!r}"
            raise RecordParseError(msg)

        try:
            tag = PackageTag.from_column(row[0])
            record = PackageRecord(
                tag=tag,
                name=row[1].strip(),
                description=",".join(row[2:]).strip(),
            )
        except ValueError as e:
            raise RecordParseError(f"Line {line_no}: {e}") from e
        records.append(record)

    logger.debug("Parsed %d package record(s)", len(records))
    return records


def load_records(path: Path) -> list[PackageRecord]:
    """Load and parse a record list file.

    Args:
        path: Path to the record list.

    Returns:
        Records in file order.

    Raises:
        RecordParseError: If the file cannot be read or is malformed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RecordParseError(f"Failed to read package list {path}: {e}") from e
    return parse_records(text)


def download_records(config: ProvisioningConfig, shell: Shell) -> CommandResult | None:
    """Download the record list unless a local copy already exists.

    Args:
        config: Provisioning configuration.
        shell: Command runner.

    Returns:
        The curl result, or None when the local file was already present.
    """
    if config.packages_file.exists():
        logger.debug("Using local package list %s", config.packages_file)
        return None

    logger.info("Downloading package list from %s", config.packages_url)
    return shell.run(
        ["curl", "-fsSL", "-o", str(config.packages_file), config.packages_url],
        timeout=120.0,
    )


def edit_records(config: ProvisioningConfig) -> int:
    """Open the record list in the configured editor.

    Args:
        config: Provisioning configuration.

    Returns:
        Exit code of the editor.
    """
    return run_interactive([config.editor, str(config.packages_file)])
