"""Provisioning configuration model.

This module defines the immutable configuration that is built once from
defaults, the optional settings file and the command line, and then
passed explicitly to every provisioning component.
"""

from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DOTFILES_REPO = "https://github.com/thehnm/dotfiles.git"
DEFAULT_PACKAGES_URL = "https://raw.githubusercontent.com/thehnm/tarbs/master/packages.csv"
DEFAULT_SERVICES: tuple[str, ...] = ("NetworkManager", "cronie", "ntpdate", "sshd")


class ProvisioningConfig(BaseModel):
    """Complete, immutable configuration of a provisioning run.

    Attributes:
        username: Account to create and provision.
        editor: Editor used to edit the package list; must be on PATH.
        grub: Install and configure the GRUB bootloader.
        edit_packages: Open the package list in the editor before installing.
        is_laptop: Configure libinput for touchpads.
        efi_dir: Mount point of the EFI system partition (UEFI only).
        efi_partition: Device of the EFI system partition (UEFI only).
        locale: Locale to generate and activate, e.g. ``en_US``.
        timezone: Timezone, e.g. ``Europe/London``.
        hostname: Machine hostname.
        dotfiles_repo: Git repository synced into the user's home.
        dotfiles_branch: Branch of the dotfiles repository.
        packages_file: Local package record list.
        packages_url: Where to download the record list when it is missing.
        login_shell: Login shell of the created user.
        services: systemd units to enable and start.
        dry_run: Log mutating commands and writes instead of performing them.
        assume_yes: Answer interactive confirmations with yes.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    username: Annotated[str, Field(description="Account to create")]
    editor: Annotated[str, Field(description="Editor for the package list")] = "vim"
    grub: Annotated[bool, Field(description="Install GRUB")] = False
    edit_packages: Annotated[bool, Field(description="Edit package list first")] = False
    is_laptop: Annotated[bool, Field(description="Configure libinput")] = False
    efi_dir: Annotated[Path | None, Field(description="EFI mount point")] = None
    efi_partition: Annotated[str | None, Field(description="EFI partition device")] = None
    locale: Annotated[str | None, Field(description="Locale, e.g. en_US")] = None
    timezone: Annotated[str | None, Field(description="Timezone, e.g. Europe/London")] = None
    hostname: Annotated[str | None, Field(description="Machine hostname")] = None
    dotfiles_repo: Annotated[str, Field(description="Dotfiles repository URL")] = (
        DEFAULT_DOTFILES_REPO
    )
    dotfiles_branch: Annotated[str, Field(description="Dotfiles branch")] = "master"
    packages_file: Annotated[Path, Field(description="Package record list")] = Path(
        "packages.csv"
    )
    packages_url: Annotated[str, Field(description="Record list download URL")] = (
        DEFAULT_PACKAGES_URL
    )
    login_shell: Annotated[str, Field(description="Login shell")] = "/bin/zsh"
    services: Annotated[tuple[str, ...], Field(description="Services to enable")] = (
        DEFAULT_SERVICES
    )
    dry_run: Annotated[bool, Field(description="Simulate mutating steps")] = False
    assume_yes: Annotated[bool, Field(description="Skip confirmations")] = False
