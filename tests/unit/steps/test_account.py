"""Unit tests for the user account and sudoers steps."""

from fakes import ContextFactory, FakeShell

from tarbs.core.credentials import Credential
from tarbs.steps.account import (
    FINAL_POLICY,
    INSTALL_POLICY,
    SUDOERS_TAG,
    add_user,
    make_sudoers_step,
)


class TestAddUser:
    """Tests for add_user()."""

    def test_creates_user(self, make_context: ContextFactory, fake_shell: FakeShell) -> None:
        """useradd, video group, source dir and password are handled in order."""
        ctx = make_context()
        credential = Credential("hunter2")
        ctx.credential = credential

        result = add_user(ctx)

        assert result.success
        assert fake_shell.commands[0] == (
            "useradd",
            "-m",
            "-g",
            "wheel",
            "-s",
            "/bin/zsh",
            "alice",
        )
        assert ("usermod", "-a", "-G", "video", "alice") in fake_shell.commands
        assert ("mkdir", "-p", str(ctx.home / ".local" / "src")) in fake_shell.commands
        [chpasswd] = fake_shell.calls_starting_with("chpasswd")
        assert chpasswd.input_text == "alice:hunter2\n"
        assert "hunter2" not in " ".join(chpasswd.args)

    def test_credential_cleared(self, make_context: ContextFactory, fake_shell: FakeShell) -> None:
        """The password is dropped even when chpasswd fails."""
        fake_shell.respond(("chpasswd",), returncode=1, stderr="chpasswd: error")
        ctx = make_context()
        credential = Credential("hunter2")
        ctx.credential = credential

        result = add_user(ctx)

        assert result.failed
        assert credential.cleared
        assert ctx.credential is None

    def test_existing_user(self, make_context: ContextFactory, fake_shell: FakeShell) -> None:
        """An existing user is added to wheel and gets a home directory."""
        fake_shell.respond(("useradd",), returncode=9, stderr="useradd: user exists")
        ctx = make_context()

        result = add_user(ctx)

        assert result.success
        assert ("usermod", "-a", "-G", "wheel", "alice") in fake_shell.commands
        assert ("mkdir", "-p", str(ctx.home)) in fake_shell.commands
        assert ("chown", "alice:wheel", str(ctx.home)) in fake_shell.commands


class TestSudoers:
    """Tests for the sudoers policy steps."""

    def test_install_then_final_policy(self, make_context: ContextFactory) -> None:
        """The final policy replaces the temporary one, other lines stay."""
        ctx = make_context()

        assert make_sudoers_step(INSTALL_POLICY)(ctx).success
        assert f"NOPASSWD: ALL {SUDOERS_TAG}" in ctx.paths.sudoers.read_text()

        assert make_sudoers_step(FINAL_POLICY)(ctx).success
        lines = ctx.paths.sudoers.read_text().splitlines()

        assert lines[0] == "root ALL=(ALL) ALL"
        tagged = [line for line in lines if line.endswith(SUDOERS_TAG)]
        assert len(tagged) == len(FINAL_POLICY)
        assert tagged[0] == f"%wheel ALL=(ALL) ALL {SUDOERS_TAG}"
        assert all("NOPASSWD: ALL " not in line for line in lines)

    def test_dry_run(self, make_context: ContextFactory) -> None:
        """Dry-run leaves sudoers untouched."""
        ctx = make_context(shell=FakeShell(dry_run=True), dry_run=True)

        assert make_sudoers_step(INSTALL_POLICY)(ctx).success
        assert ctx.paths.sudoers.read_text() == "root ALL=(ALL) ALL\n"
