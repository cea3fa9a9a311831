"""Shell execution utilities.

Provides subprocess execution that always captures the exit status,
plus a Shell wrapper that knows about the target user and dry-run mode.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        args: The command that was executed.
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    args: tuple[str, ...]
    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0

    @property
    def error_message(self) -> str:
        """Return a short human-readable failure description."""
        detail = self.stderr.strip() or self.stdout.strip()
        if detail:
            return detail.splitlines()[-1]
        return f"'{self.args[0]}' exited with status {self.returncode}"


def run_command(
    args: list[str],
    *,
    check: bool = False,
    timeout: float | None = 60.0,
    cwd: str | None = None,
    input_text: str | None = None,
) -> CommandResult:
    """Execute a shell command and return the result.

    Args:
        args: Command and arguments to execute.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.
        input_text: Text passed to the command on stdin.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=check,
        timeout=timeout,
        cwd=cwd,
        input=input_text,
    )
    return CommandResult(
        args=tuple(args),
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


def run_interactive(
    args: list[str],
    *,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> int:
    """Execute a command interactively, inheriting the terminal.

    Unlike run_command(), this does NOT capture stdout/stderr,
    allowing the subprocess to interact with the user's terminal
    directly. Used to open the package list in an editor.

    Args:
        args: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Additional environment variables (merged with current env).

    Returns:
        Exit code of the command.

    Raises:
        FileNotFoundError: If command executable is not found.
        OSError: If command cannot be executed.
    """
    full_env = {**os.environ, **(env or {})}
    result = subprocess.run(
        args,
        check=False,
        cwd=cwd,
        env=full_env,
    )
    return result.returncode


class Shell:
    """Command runner shared by every provisioning component.

    Mutating commands go through :meth:`run`, which honours dry-run mode.
    Read-only inspection commands (``blkid``, ``df``, ``id``) go through
    :meth:`query` and always execute.

    Attributes:
        dry_run: If True, mutating commands are logged but not executed.
    """

    def __init__(self, dry_run: bool = False) -> None:
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if the shell is in dry-run mode."""
        return self._dry_run

    def run(
        self,
        args: list[str],
        *,
        user: str | None = None,
        cwd: str | None = None,
        input_text: str | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Execute a mutating command, optionally as another user.

        Missing executables are reported as a failed result with
        return code 127, the same status a shell would report.

        Args:
            args: Command and arguments to execute.
            user: Run the command through ``sudo -u <user>``.
            cwd: Working directory for the command.
            input_text: Text passed on stdin. Never logged.
            timeout: Maximum time in seconds to wait for command. By default
                the command blocks until it exits; package builds have no
                upper bound.

        Returns:
            CommandResult for the executed (or simulated) command.
        """
        full_args = ["sudo", "-u", user, *args] if user else list(args)

        if self._dry_run:
            logger.info("[dry-run] %s", " ".join(full_args))
            return CommandResult(args=tuple(full_args), stdout="", stderr="", returncode=0)

        logger.debug("Running: %s", " ".join(full_args))
        try:
            result = run_command(full_args, timeout=timeout, cwd=cwd, input_text=input_text)
        except FileNotFoundError as e:
            return CommandResult(args=tuple(full_args), stdout="", stderr=str(e), returncode=127)
        except subprocess.TimeoutExpired:
            msg = f"Timed out after {timeout} seconds"
            return CommandResult(args=tuple(full_args), stdout="", stderr=msg, returncode=124)

        if not result.success:
            logger.debug(
                "Command failed (%d): %s: %s",
                result.returncode,
                " ".join(full_args),
                result.error_message,
            )
        return result

    def query(self, args: list[str], *, timeout: float | None = 60.0) -> CommandResult:
        """Execute a read-only command, regardless of dry-run mode.

        Args:
            args: Command and arguments to execute.
            timeout: Maximum time in seconds to wait for command.

        Returns:
            CommandResult of the command.
        """
        try:
            return run_command(args, timeout=timeout)
        except FileNotFoundError as e:
            return CommandResult(args=tuple(args), stdout="", stderr=str(e), returncode=127)
