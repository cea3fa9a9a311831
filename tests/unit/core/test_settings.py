"""Unit tests for settings file I/O."""

from pathlib import Path

import pytest

from tarbs.core.errors import SettingsError, SettingsParseError
from tarbs.core.settings import (
    SettingsDefaults,
    build_config,
    load_settings,
    save_settings,
    settings_from_config,
)
from tarbs.models.config import ProvisioningConfig


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing settings file yields empty defaults."""
        settings = load_settings(tmp_path / "config.toml")

        assert settings == SettingsDefaults()

    def test_reads_defaults(self, tmp_path: Path) -> None:
        """Values of the [defaults] table are loaded."""
        path = tmp_path / "config.toml"
        path.write_text(
            '[defaults]\neditor = "nvim"\ntimezone = "Europe/Berlin"\nservices = ["sshd"]\n'
        )

        settings = load_settings(path)

        assert settings.editor == "nvim"
        assert settings.timezone == "Europe/Berlin"
        assert settings.services == ["sshd"]

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises SettingsParseError."""
        path = tmp_path / "config.toml"
        path.write_text("[defaults\n")

        with pytest.raises(SettingsParseError):
            load_settings(path)

    def test_unknown_section(self, tmp_path: Path) -> None:
        """Only the [defaults] table is allowed."""
        path = tmp_path / "config.toml"
        path.write_text("[packages]\nfoo = 1\n")

        with pytest.raises(SettingsError, match="Unknown settings section"):
            load_settings(path)

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Unknown keys are rejected."""
        path = tmp_path / "config.toml"
        path.write_text('[defaults]\nusername = "alice"\n')

        with pytest.raises(SettingsError, match="Invalid settings content"):
            load_settings(path)


class TestSaveSettings:
    """Tests for save_settings() and settings_from_config()."""

    def test_save_and_load(self, tmp_path: Path) -> None:
        """Saved defaults load back unchanged."""
        path = tmp_path / "tarbs" / "config.toml"
        settings = SettingsDefaults(editor="nvim", efi_dir=Path("/boot/efi"), grub=True)

        assert save_settings(settings, path) == path
        assert load_settings(path) == settings

    def test_unset_fields_omitted(self, tmp_path: Path) -> None:
        """Only set fields are written."""
        path = tmp_path / "config.toml"

        save_settings(SettingsDefaults(hostname="box"), path)

        assert path.read_text() == '[defaults]\nhostname = "box"\n'

    def test_settings_from_config(self) -> None:
        """Per-run values are not kept as defaults."""
        config = ProvisioningConfig(username="alice", hostname="box", dry_run=True)

        settings = settings_from_config(config)

        assert settings.hostname == "box"
        assert settings.services == list(config.services)
        assert "username" not in settings.model_dump()


class TestBuildConfig:
    """Tests for build_config()."""

    def test_command_line_wins(self) -> None:
        """Command-line values override the settings file."""
        defaults = SettingsDefaults(editor="nvim", timezone="UTC")

        config = build_config("alice", defaults, {"editor": "nano", "timezone": None})

        assert config.username == "alice"
        assert config.editor == "nano"
        assert config.timezone == "UTC"

    def test_services_become_tuple(self) -> None:
        """Services from the settings file replace the default list."""
        config = build_config("alice", SettingsDefaults(services=["sshd"]), {})

        assert config.services == ("sshd",)

    def test_invalid_value(self) -> None:
        """Invalid merged values raise SettingsError."""
        with pytest.raises(SettingsError, match="Invalid configuration"):
            build_config("alice", SettingsDefaults(), {"grub": "maybe"})
