"""Block device inspection helpers.

Thin wrappers around ``blkid`` and ``df`` used by validation and the
bootloader step. All of them are read-only queries.
"""

import logging
import re
from pathlib import Path

from tarbs.utils.shell import Shell

logger = logging.getLogger(__name__)


def partition_exists(shell: Shell, partition: str) -> bool:
    """Check that ``partition`` is listed by blkid.

    Args:
        shell: Command runner.
        partition: Device path, e.g. ``/dev/sda1``.

    Returns:
        True if blkid reports the device.
    """
    result = shell.query(["blkid"])
    if not result.success:
        return False
    return any(line.split(":", 1)[0] == partition for line in result.stdout.splitlines())


def is_fat_partition(shell: Shell, partition: str) -> bool:
    """Check that ``partition`` holds a FAT filesystem."""
    result = shell.query(["blkid", "-s", "TYPE", "-o", "value", partition])
    if not result.success:
        return False
    return result.stdout.strip().lower() in ("vfat", "fat", "fat12", "fat16", "fat32", "msdos")


def _df_rows(shell: Shell) -> list[tuple[str, str]]:
    """Return ``(source, mountpoint)`` pairs reported by df."""
    result = shell.query(["df", "--output=source,target"])
    if not result.success:
        logger.debug("df failed: %s", result.error_message)
        return []

    rows: list[tuple[str, str]] = []
    for line in result.stdout.splitlines()[1:]:
        parts = line.split(None, 1)
        if len(parts) == 2:
            rows.append((parts[0], parts[1].strip()))
    return rows


def find_mountpoint(shell: Shell, device: str) -> Path | None:
    """Return where ``device`` is mounted, or None if it is not mounted."""
    for source, target in _df_rows(shell):
        if source == device:
            return Path(target)
    return None


def find_root_device(shell: Shell) -> str | None:
    """Return the device mounted at ``/``."""
    for source, target in _df_rows(shell):
        if target == "/":
            return source
    return None


def parent_disk(partition: str) -> str:
    """Return the disk a partition belongs to.

    ``/dev/sda2`` becomes ``/dev/sda``; ``/dev/nvme0n1p2`` and
    ``/dev/mmcblk0p1`` become ``/dev/nvme0n1`` and ``/dev/mmcblk0``.
    """
    match = re.fullmatch(r"(.*\d)p\d+", partition)
    if match:
        return match.group(1)
    return partition.rstrip("0123456789")
