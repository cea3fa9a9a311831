"""Settings file I/O.

An optional ``config.toml`` provides defaults for every provisioning
option except the username. Command-line flags override it.

Example::

    [defaults]
    editor = "nvim"
    timezone = "Europe/Berlin"
    services = ["NetworkManager", "sshd"]
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as ModelValidationError

from tarbs.core.errors import SettingsError, SettingsParseError
from tarbs.core.paths import get_settings_path
from tarbs.models.config import ProvisioningConfig


class SettingsDefaults(BaseModel):
    """Default values read from the ``[defaults]`` table.

    Every field is optional; unset fields fall back to the
    ProvisioningConfig defaults.
    """

    model_config = ConfigDict(extra="forbid")

    editor: str | None = None
    grub: bool | None = None
    edit_packages: bool | None = None
    is_laptop: bool | None = None
    efi_dir: Path | None = None
    efi_partition: str | None = None
    locale: str | None = None
    timezone: str | None = None
    hostname: str | None = None
    dotfiles_repo: str | None = None
    dotfiles_branch: str | None = None
    packages_file: Path | None = None
    packages_url: str | None = None
    login_shell: str | None = None
    services: Annotated[
        list[str] | None,
        Field(description="systemd units to enable"),
    ] = None


def load_settings(path: Path | None = None) -> SettingsDefaults:
    """Load defaults from the settings file.

    A missing file is not an error; it yields empty defaults.

    Args:
        path: Settings file. If None, uses the default settings path.

    Returns:
        Validated SettingsDefaults.

    Raises:
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the file cannot be read or its content is invalid.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        return SettingsDefaults()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    unknown = set(data) - {"defaults"}
    if unknown:
        raise SettingsError(f"Unknown settings section(s): {', '.join(sorted(unknown))}")

    try:
        return SettingsDefaults.model_validate(data.get("defaults", {}))
    except ModelValidationError as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def save_settings(settings: SettingsDefaults, path: Path | None = None) -> Path:
    """Save defaults to the settings file atomically.

    Args:
        settings: Defaults to store. Unset fields are omitted.
        path: Settings file. If None, uses the default settings path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    data: dict[str, Any] = {"defaults": settings.model_dump(mode="json", exclude_none=True)}

    tmp_path: Path | None = None
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


def settings_from_config(config: ProvisioningConfig) -> SettingsDefaults:
    """Extract the reusable defaults of a configuration.

    The username and per-run switches (dry-run, assume-yes) are not
    stored.
    """
    data = config.model_dump(exclude={"username", "dry_run", "assume_yes"})
    data["services"] = list(data["services"])
    return SettingsDefaults.model_validate(data)


def build_config(
    username: str,
    defaults: SettingsDefaults,
    overrides: dict[str, Any],
) -> ProvisioningConfig:
    """Merge settings defaults and command-line overrides.

    Args:
        username: Account to provision.
        defaults: Values from the settings file.
        overrides: Values given on the command line. ``None`` entries
            are ignored so unset flags don't mask the settings file.

    Returns:
        Frozen ProvisioningConfig.

    Raises:
        SettingsError: If the merged values are invalid.
    """
    values: dict[str, Any] = defaults.model_dump(exclude_none=True)
    if "services" in values:
        values["services"] = tuple(values["services"])
    values.update({key: value for key, value in overrides.items() if value is not None})
    values["username"] = username

    try:
        return ProvisioningConfig(**values)
    except ModelValidationError as e:
        raise SettingsError(f"Invalid configuration: {e}") from e
