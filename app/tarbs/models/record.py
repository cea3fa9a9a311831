"""Package record models.

This module defines the structures representing one row of the package
record list: which package to install and from which source.
"""

from dataclasses import dataclass
from enum import Enum


class PackageTag(Enum):
    """Install source of a package record.

    The value is the literal tag used in the record list's first column.

    Attributes:
        OFFICIAL: Official repositories, installed with pacman.
        AUR: Arch User Repository, installed with the AUR helper.
        GIT: A git repository built with ``make install``.
    """

    OFFICIAL = ""
    AUR = "A"
    GIT = "G"

    @classmethod
    def from_column(cls, value: str) -> "PackageTag":
        """Decode a record list tag column.

        Args:
            value: Raw column text. Surrounding whitespace is ignored.

        Returns:
            The matching PackageTag.

        Raises:
            ValueError: If the tag is not one of "", "A" or "G".
        """
        try:
            return cls(value.strip())
        except ValueError:
            msg = f"Unknown package tag {value.strip()!r} (expected '', 'A' or 'G')"
            raise ValueError(msg) from None

    @property
    def label(self) -> str:
        """Short human-readable source name."""
        return {
            PackageTag.OFFICIAL: "pacman",
            PackageTag.AUR: "aur",
            PackageTag.GIT: "git",
        }[self]


@dataclass(frozen=True, slots=True)
class PackageRecord:
    """A single entry of the package record list.

    Attributes:
        tag: Install source of the package.
        name: Package name, or repository URL for git records.
        description: Human-readable description shown while installing.
    """

    tag: PackageTag
    name: str
    description: str = ""

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    @property
    def is_git(self) -> bool:
        """Check if the record is a git repository."""
        return self.tag == PackageTag.GIT

    @property
    def program_name(self) -> str:
        """Return the program name, derived from the URL for git records.

        ``https://example.com/foo.git`` becomes ``foo``.
        """
        if not self.is_git:
            return self.name
        base = self.name.rstrip("/").rsplit("/", 1)[-1]
        return base.removesuffix(".git")
