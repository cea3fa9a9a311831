"""GRUB bootloader step.

On UEFI machines the EFI partition is mounted at the EFI directory
(unless it already is) and GRUB is installed as an EFI application.
On BIOS machines GRUB is installed to the disk holding ``/``.
"""

import logging

from tarbs.core.context import ProvisionContext
from tarbs.core.validation import is_uefi
from tarbs.installers.pacman import PacmanInstaller
from tarbs.models.result import StepResult, step_failed, step_ok, step_skipped
from tarbs.utils.disks import find_mountpoint, find_root_device, parent_disk
from tarbs.utils.formatting import print_info

logger = logging.getLogger(__name__)

GRUB_PACKAGES = ("grub", "os-prober", "ntfs-3g")


def _install_efi(ctx: ProvisionContext, pacman: PacmanInstaller) -> str | None:
    """Mount the EFI partition and install GRUB for x86_64-efi.

    Returns:
        Error message, or None on success.
    """
    efi_dir = ctx.config.efi_dir
    partition = ctx.config.efi_partition
    if efi_dir is None or partition is None:
        return "EFI directory and EFI partition are required on UEFI systems"

    if not pacman.install_package("efibootmgr").success:
        return "Could not install efibootmgr"

    if not efi_dir.is_dir():
        print_info("Creating EFI dir")
        created = ctx.shell.run(["mkdir", "-p", str(efi_dir)])
        if not created.success:
            return f"mkdir {efi_dir}: {created.error_message}"

    if find_mountpoint(ctx.shell, partition) == efi_dir:
        logger.debug("%s already mounted at %s", partition, efi_dir)
    else:
        print_info(f"Mounting partition '{partition}' to '{efi_dir}'")
        mounted = ctx.shell.run(["mount", partition, str(efi_dir)])
        if not mounted.success:
            return f"mount {partition}: {mounted.error_message}"

    print_info("Installing GRUB")
    installed = ctx.shell.run(
        [
            "grub-install",
            f"--efi-directory={efi_dir}",
            "--bootloader-id=GRUB",
            "--target=x86_64-efi",
        ]
    )
    if not installed.success:
        return f"grub-install: {installed.error_message}"
    return None


def _install_bios(ctx: ProvisionContext) -> str | None:
    """Install GRUB to the disk holding the root filesystem.

    Returns:
        Error message, or None on success.
    """
    root = find_root_device(ctx.shell)
    if root is None:
        return "Could not determine the root device"

    disk = parent_disk(root)
    print_info("Installing GRUB")
    installed = ctx.shell.run(["grub-install", "--target=i386-pc", disk])
    if not installed.success:
        return f"grub-install {disk}: {installed.error_message}"
    return None


def install_grub(ctx: ProvisionContext) -> StepResult:
    """Install and configure GRUB when requested."""
    if not ctx.config.grub:
        return step_skipped("bootloader")

    pacman = PacmanInstaller(ctx.shell)
    for name in GRUB_PACKAGES:
        result = pacman.install_package(name)
        if not result.success:
            return step_failed("bootloader", f"Could not install {name}: {result.error_message}")

    error = _install_efi(ctx, pacman) if is_uefi(ctx.paths) else _install_bios(ctx)
    if error:
        return step_failed("bootloader", error)

    configured = ctx.shell.run(["grub-mkconfig", "-o", str(ctx.paths.grub_cfg)])
    if not configured.success:
        return step_failed("bootloader", f"grub-mkconfig: {configured.error_message}")
    return step_ok("bootloader", "GRUB installed")
