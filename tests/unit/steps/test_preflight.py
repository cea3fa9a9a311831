"""Unit tests for the pre-flight steps."""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from fakes import ContextFactory, FakeShell

from tarbs.core.errors import PipelineAbortedError, RecordParseError, ValidationError
from tarbs.steps.preflight import (
    initial_check,
    make_password_step,
    prepare_package_list,
    user_check,
)

PACKAGE_LIST = "TAG,NAME,PURPOSE\n,htop,monitor\nA,yay-bin,helper\n"


@pytest.fixture(autouse=True)
def as_root_with_editor() -> Iterator[None]:
    """Pretend to run as root with every editor installed."""
    with (
        patch("tarbs.core.validation.os.geteuid", return_value=0),
        patch("tarbs.core.validation.command_exists", return_value=True),
    ):
        yield


class TestInitialCheck:
    """Tests for initial_check()."""

    def test_installs_git(self, make_context: ContextFactory, fake_shell: FakeShell) -> None:
        """A valid configuration leads to git being installed."""
        assert initial_check(make_context()).success
        assert fake_shell.commands == [("pacman", "-S", "--noconfirm", "--needed", "git")]

    def test_invalid_config(self, make_context: ContextFactory, fake_shell: FakeShell) -> None:
        """Validation errors propagate before anything runs."""
        with pytest.raises(ValidationError):
            initial_check(make_context(username="Bob"))
        assert fake_shell.calls == []

    def test_pacman_unusable(self, make_context: ContextFactory, fake_shell: FakeShell) -> None:
        """A failing pacman is a validation error."""
        fake_shell.respond(("pacman",), returncode=1, stderr="error: failed to init transaction")

        with pytest.raises(ValidationError, match="Could not install git"):
            initial_check(make_context())


class TestUserCheck:
    """Tests for user_check()."""

    def test_new_user(self, make_context: ContextFactory, fake_shell: FakeShell) -> None:
        """A missing user will be created."""
        fake_shell.respond(("id",), returncode=1, stderr="id: 'alice': no such user")

        result = user_check(make_context())

        assert result.success
        assert fake_shell.queries == [("id", "-u", "alice")]

    def test_existing_user_confirmed(self, make_context: ContextFactory) -> None:
        """An existing user needs confirmation."""
        with (
            patch("tarbs.steps.preflight.typer.confirm", return_value=True) as mock_confirm,
            patch("tarbs.steps.preflight.print_warning") as mock_warning,
        ):
            result = user_check(make_context())

        assert result.success
        mock_confirm.assert_called_once()
        mock_warning.assert_called_once()

    def test_existing_user_declined(self, make_context: ContextFactory) -> None:
        """Declining aborts the run."""
        with (
            patch("tarbs.steps.preflight.typer.confirm", return_value=False),
            patch("tarbs.steps.preflight.print_warning"),
            pytest.raises(PipelineAbortedError),
        ):
            user_check(make_context())

    def test_assume_yes(self, make_context: ContextFactory) -> None:
        """--yes skips the confirmation."""
        with (
            patch("tarbs.steps.preflight.typer.confirm") as mock_confirm,
            patch("tarbs.steps.preflight.print_warning"),
        ):
            assert user_check(make_context(assume_yes=True)).success

        mock_confirm.assert_not_called()


class TestPasswordStep:
    """Tests for the password step."""

    def test_sets_credential(self, make_context: ContextFactory) -> None:
        """The collected password is stored on the context."""
        answers = iter(["hunter2", "hunter2"])
        ctx = make_context()

        result = make_password_step(lambda text: next(answers))(ctx)

        assert result.success
        assert ctx.credential is not None
        assert ctx.credential.secret == "hunter2"


class TestPreparePackageList:
    """Tests for prepare_package_list()."""

    def test_loads_local_list(
        self, tmp_path: Path, make_context: ContextFactory, fake_shell: FakeShell
    ) -> None:
        """An existing list is parsed without downloading."""
        packages = tmp_path / "packages.csv"
        packages.write_text(PACKAGE_LIST)
        ctx = make_context(packages_file=packages)

        result = prepare_package_list(ctx)

        assert result.success
        assert [r.name for r in ctx.records] == ["htop", "yay-bin"]
        assert fake_shell.calls == []

    def test_edit_before_loading(self, tmp_path: Path, make_context: ContextFactory) -> None:
        """With -f the list is opened in the editor first."""
        packages = tmp_path / "packages.csv"
        packages.write_text(PACKAGE_LIST)
        ctx = make_context(packages_file=packages, edit_packages=True)

        with patch("tarbs.steps.preflight.edit_records", return_value=0) as mock_edit:
            prepare_package_list(ctx)

        mock_edit.assert_called_once_with(ctx.config)

    def test_download_failure(
        self, tmp_path: Path, make_context: ContextFactory, fake_shell: FakeShell
    ) -> None:
        """A failed download fails the step."""
        fake_shell.respond(("curl",), returncode=22, stderr="curl: (22) 404")
        ctx = make_context(packages_file=tmp_path / "packages.csv")

        result = prepare_package_list(ctx)

        assert result.failed
        assert "404" in (result.error or "")

    def test_dry_run_without_list(self, tmp_path: Path, make_context: ContextFactory) -> None:
        """Dry-run skips parsing when the list was not downloaded."""
        ctx = make_context(
            shell=FakeShell(dry_run=True),
            packages_file=tmp_path / "packages.csv",
            dry_run=True,
        )

        result = prepare_package_list(ctx)

        assert result.skipped
        assert ctx.records == []

    def test_malformed_list(self, tmp_path: Path, make_context: ContextFactory) -> None:
        """A malformed list raises before installation starts."""
        packages = tmp_path / "packages.csv"
        packages.write_text("TAG,NAME,PURPOSE\nX,htop,monitor\n")

        with pytest.raises(RecordParseError):
            prepare_package_list(make_context(packages_file=packages))
