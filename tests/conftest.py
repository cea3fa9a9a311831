"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path
from typing import Any

import pytest
from fakes import ContextFactory, FakeShell

from tarbs.core.context import ProvisionContext
from tarbs.core.paths import SystemPaths
from tarbs.models.config import ProvisioningConfig


@pytest.fixture
def fake_shell() -> FakeShell:
    """Recording shell in normal mode."""
    return FakeShell()


@pytest.fixture
def system_paths(tmp_path: Path) -> SystemPaths:
    """System paths rebased under a scratch root with the usual files."""
    paths = SystemPaths().rebase(tmp_path / "root")

    (paths.zoneinfo / "Europe").mkdir(parents=True)
    (paths.zoneinfo / "Europe" / "Berlin").write_bytes(b"TZif2")
    (paths.zoneinfo / "UTC").write_bytes(b"TZif2")

    paths.locale_gen.parent.mkdir(parents=True, exist_ok=True)
    paths.locale_gen.write_text(
        "# Locale definitions\n"
        "#de_DE.UTF-8 UTF-8\n"
        "#de_DE ISO-8859-1\n"
        "#en_US.UTF-8 UTF-8\n"
        "#en_US ISO-8859-1\n",
        encoding="utf-8",
    )
    paths.sudoers.write_text("root ALL=(ALL) ALL\n", encoding="utf-8")
    paths.home_root.mkdir(parents=True)
    return paths


@pytest.fixture
def make_context(system_paths: SystemPaths, fake_shell: FakeShell) -> ContextFactory:
    """Factory building a ProvisionContext for user ``alice``.

    Keyword arguments are passed to ProvisioningConfig. ``shell`` may be
    given to replace the default FakeShell.
    """

    def factory(shell: FakeShell | None = None, **config: Any) -> ProvisionContext:
        config.setdefault("username", "alice")
        return ProvisionContext(
            config=ProvisioningConfig(**config),
            shell=shell or fake_shell,
            paths=system_paths,
        )

    return factory
