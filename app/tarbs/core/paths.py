"""Path management for tarbs.

Two kinds of paths live here:

- XDG-compliant application paths for the settings file, theme override
  and run log (``~/.config/tarbs/``, ``~/.local/state/tarbs/``).
- ``SystemPaths``, the set of system files and directories the
  provisioning steps read and write. It can be rebased under another
  root directory so the steps can be exercised against a scratch tree.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "tarbs"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/tarbs/ (or XDG_CONFIG_HOME/tarbs/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    Returns:
        Path to ~/.local/state/tarbs/ (or XDG_STATE_HOME/tarbs/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_settings_path() -> Path:
    """Get the settings file path.

    Returns:
        Path to ~/.config/tarbs/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_log_path() -> Path:
    """Get the run log path.

    Returns:
        Path to ~/.local/state/tarbs/tarbs.log.
    """
    return get_state_dir() / "tarbs.log"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_state_dir() -> Path:
    """Create the state directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_state_dir(), "state")


# =============================================================================
# System paths
# =============================================================================


@dataclass(frozen=True, slots=True)
class SystemPaths:
    """Locations of the system files touched during provisioning.

    Attributes:
        firmware_efi: Present when the machine booted via UEFI.
        zoneinfo: Timezone database directory.
        localtime: Symlink selecting the active timezone.
        locale_gen: Locale definition file consumed by locale-gen.
        locale_conf: System locale settings.
        hostname: Machine hostname file.
        hosts: Static host table.
        sudoers: sudo policy file.
        pacman_conf: pacman configuration.
        pulse_client_conf: PulseAudio client configuration.
        modprobe_dir: Kernel module configuration directory.
        xorg_share_dir: Distribution X11 configuration snippets.
        xorg_conf_dir: Local X11 configuration snippets.
        home_root: Parent directory of user home directories.
        bin_sh: The system /bin/sh link.
        dash: The dash shell binary.
        yay: The AUR helper binary.
        pulseaudio: The pulseaudio binary.
        grub_cfg: Generated GRUB configuration.
    """

    firmware_efi: Path = Path("/sys/firmware/efi")
    zoneinfo: Path = Path("/usr/share/zoneinfo")
    localtime: Path = Path("/etc/localtime")
    locale_gen: Path = Path("/etc/locale.gen")
    locale_conf: Path = Path("/etc/locale.conf")
    hostname: Path = Path("/etc/hostname")
    hosts: Path = Path("/etc/hosts")
    sudoers: Path = Path("/etc/sudoers")
    pacman_conf: Path = Path("/etc/pacman.conf")
    pulse_client_conf: Path = Path("/etc/pulse/client.conf")
    modprobe_dir: Path = Path("/etc/modprobe.d")
    xorg_share_dir: Path = Path("/usr/share/X11/xorg.conf.d")
    xorg_conf_dir: Path = Path("/etc/X11/xorg.conf.d")
    home_root: Path = Path("/home")
    bin_sh: Path = Path("/bin/sh")
    dash: Path = Path("/usr/bin/dash")
    yay: Path = Path("/usr/bin/yay")
    pulseaudio: Path = Path("/usr/bin/pulseaudio")
    grub_cfg: Path = Path("/boot/grub/grub.cfg")

    def rebase(self, root: Path) -> "SystemPaths":
        """Return a copy with every path moved under ``root``.

        Args:
            root: New filesystem root.

        Returns:
            SystemPaths whose entries all live below ``root``.
        """
        rebased = {
            f.name: root / getattr(self, f.name).relative_to("/") for f in fields(self)
        }
        return SystemPaths(**rebased)

    def home_of(self, username: str) -> Path:
        """Return the home directory of ``username``."""
        return self.home_root / username

    def source_dir_of(self, username: str) -> Path:
        """Return the directory holding git-built programs of ``username``."""
        return self.home_of(username) / ".local" / "src"
