"""Password collection for the provisioned account.

The password is read twice with hidden input and held in a Credential
only until the account has been created, then cleared.
"""

from collections.abc import Callable

import typer

from tarbs.utils.formatting import print_error, print_warning

PromptFunc = Callable[[str], str]


class Credential:
    """A password held in memory until it is explicitly cleared."""

    __slots__ = ("_secret",)

    def __init__(self, secret: str) -> None:
        self._secret: str | None = secret

    @property
    def secret(self) -> str:
        """Return the password.

        Raises:
            RuntimeError: If the credential has already been cleared.
        """
        if self._secret is None:
            msg = "Credential has been cleared"
            raise RuntimeError(msg)
        return self._secret

    @property
    def cleared(self) -> bool:
        """Check if the password has been dropped."""
        return self._secret is None

    def clear(self) -> None:
        """Drop the password reference."""
        self._secret = None

    def __repr__(self) -> str:
        state = "cleared" if self.cleared else "set"
        return f"Credential(<{state}>)"


def hidden_prompt(text: str) -> str:
    """Prompt for a value without echoing it.

    An empty answer is returned as an empty string instead of re-prompting.
    """
    value: str = typer.prompt(text, hide_input=True, default="", show_default=False)
    return value


def collect_password(username: str, prompt: PromptFunc = hidden_prompt) -> Credential:
    """Ask for a password twice until both entries match.

    Two empty entries count as a match. A warning is printed in that
    case, but the empty password is accepted.

    Args:
        username: Account the password is for (shown in the prompt).
        prompt: Function reading one hidden line.

    Returns:
        Credential holding the confirmed password.
    """
    while True:
        first = prompt(f"Enter password for {username}")
        second = prompt(f"Reenter password for {username}")
        if first.encode() == second.encode():
            break
        del first, second
        print_error("Passwords do not match. Please enter your password again")

    if not first:
        print_warning(f"Empty password accepted for '{username}'.")
    return Credential(first)
