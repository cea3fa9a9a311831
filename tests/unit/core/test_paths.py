"""Unit tests for path management."""

from pathlib import Path

import pytest

from tarbs.core.paths import (
    SystemPaths,
    ensure_state_dir,
    get_config_dir,
    get_log_path,
    get_settings_path,
)


class TestXdgPaths:
    """Tests for XDG application paths."""

    def test_respects_xdg_variables(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """XDG environment variables override the home defaults."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
        monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))

        assert get_config_dir() == tmp_path / "config" / "tarbs"
        assert get_settings_path() == tmp_path / "config" / "tarbs" / "config.toml"
        assert get_log_path() == tmp_path / "state" / "tarbs" / "tarbs.log"

    def test_home_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without XDG variables the directories live under the home directory."""
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert get_config_dir() == tmp_path / ".config" / "tarbs"

    def test_ensure_state_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """The state directory is created on demand."""
        monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))

        path = ensure_state_dir()

        assert path.is_dir()


class TestSystemPaths:
    """Tests for SystemPaths."""

    def test_defaults(self) -> None:
        """Defaults point at the real system locations."""
        paths = SystemPaths()

        assert paths.localtime == Path("/etc/localtime")
        assert paths.home_of("alice") == Path("/home/alice")
        assert paths.source_dir_of("alice") == Path("/home/alice/.local/src")

    def test_rebase(self, tmp_path: Path) -> None:
        """Every path moves below the new root."""
        paths = SystemPaths().rebase(tmp_path)

        assert paths.sudoers == tmp_path / "etc" / "sudoers"
        assert paths.firmware_efi == tmp_path / "sys" / "firmware" / "efi"
        assert paths.home_of("alice") == tmp_path / "home" / "alice"
