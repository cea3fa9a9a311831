"""Pre-flight validation of the provisioning configuration.

Every check runs eagerly in one pass before anything on the system is
changed. All failed checks are collected and raised together.
"""

import logging
import os
import re

from tarbs.core.errors import ValidationError
from tarbs.core.paths import SystemPaths
from tarbs.models.config import ProvisioningConfig
from tarbs.utils.disks import find_mountpoint, is_fat_partition, partition_exists
from tarbs.utils.shell import Shell, command_exists

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_-]*$")
HOSTNAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9.\-_]*$")


def is_valid_username(name: str) -> bool:
    """Check a username against the useradd naming rules."""
    return USERNAME_PATTERN.fullmatch(name) is not None


def is_valid_hostname(name: str) -> bool:
    """Check a hostname against the accepted pattern."""
    return HOSTNAME_PATTERN.fullmatch(name) is not None


def is_uefi(paths: SystemPaths) -> bool:
    """Check whether the machine booted via UEFI."""
    return paths.firmware_efi.is_dir()


def timezone_exists(timezone: str, paths: SystemPaths) -> bool:
    """Check that a zoneinfo entry exists for ``timezone``.

    Absolute paths and parent references are rejected so the lookup
    cannot leave the zoneinfo directory.
    """
    if not timezone or timezone.startswith("/") or ".." in timezone.split("/"):
        return False
    return (paths.zoneinfo / timezone).is_file()


def locale_exists(locale: str, paths: SystemPaths) -> bool:
    """Check that ``locale`` appears in the locale definition file.

    Both commented (``#en_US.UTF-8 UTF-8``) and active entries count.
    """
    if not locale:
        return False
    try:
        text = paths.locale_gen.read_text(encoding="utf-8")
    except OSError:
        return False
    pattern = re.compile(rf"^#?\s*{re.escape(locale)}[.\s@]", re.MULTILINE)
    return pattern.search(text) is not None


def _validate_efi(config: ProvisioningConfig, shell: Shell) -> list[str]:
    """Validate the EFI directory and partition for a UEFI GRUB install."""
    problems: list[str] = []

    if config.efi_dir is None:
        problems.append("Installation on UEFI system. EFI directory not set.")
    if config.efi_partition is None:
        problems.append("Installation on UEFI system. EFI partition not set.")
    if problems or config.efi_partition is None or config.efi_dir is None:
        return problems

    partition = config.efi_partition
    if not partition_exists(shell, partition):
        problems.append(f"Partition '{partition}' does not exist!")
        return problems
    if not is_fat_partition(shell, partition):
        problems.append(f"Partition '{partition}' is not a FAT32 partition!")

    mountpoint = find_mountpoint(shell, partition)
    if mountpoint is not None and mountpoint != config.efi_dir:
        problems.append(f"Partition '{partition}' is already mounted elsewhere ({mountpoint})")

    return problems


def collect_problems(
    config: ProvisioningConfig,
    shell: Shell,
    paths: SystemPaths,
) -> list[str]:
    """Run every check and return the failures.

    Args:
        config: Configuration to validate.
        shell: Command runner for blkid/df queries.
        paths: System file locations.

    Returns:
        Human-readable description of each failed check.
    """
    problems: list[str] = []

    if not config.dry_run and os.geteuid() != 0:
        problems.append("You are not running this script as root.")

    if not is_valid_username(config.username):
        problems.append(f"Username '{config.username}' not valid!")

    if not command_exists(config.editor):
        problems.append(f"Editor '{config.editor}' not found")

    if config.grub and is_uefi(paths):
        problems.extend(_validate_efi(config, shell))

    if config.timezone is not None and not timezone_exists(config.timezone, paths):
        problems.append(
            f"Timezone '{config.timezone}' not found. "
            "Check if it is correctly spelled, e.g. Europe/London"
        )

    if config.locale is not None and not locale_exists(config.locale, paths):
        problems.append(
            f"Locale '{config.locale}' not found. Check if it is correctly spelled, e.g. en_US"
        )

    if config.hostname is not None and not is_valid_hostname(config.hostname):
        problems.append(f"Hostname '{config.hostname}' not valid")

    return problems


def validate_config(
    config: ProvisioningConfig,
    shell: Shell,
    paths: SystemPaths,
) -> None:
    """Validate the configuration against the live system.

    Args:
        config: Configuration to validate.
        shell: Command runner for blkid/df queries.
        paths: System file locations.

    Raises:
        ValidationError: If any check fails.
    """
    problems = collect_problems(config, shell, paths)
    if problems:
        for problem in problems:
            logger.debug("Validation failed: %s", problem)
        raise ValidationError(problems)
    logger.debug("Configuration for user %s is valid", config.username)
