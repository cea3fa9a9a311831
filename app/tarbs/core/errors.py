"""Exception hierarchy for tarbs."""


class TarbsError(Exception):
    """Base exception for provisioning errors."""


class ValidationError(TarbsError):
    """Raised when the configuration does not fit the live system.

    Attributes:
        problems: Every failed check, in the order they were run.
    """

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class RecordParseError(TarbsError):
    """Raised when the package record list is malformed."""


class SettingsError(TarbsError):
    """Base exception for settings file errors."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


class AurHelperError(TarbsError):
    """Raised when the AUR helper cannot be bootstrapped."""


class PipelineAbortedError(TarbsError):
    """Raised when a fatal step fails or the run is interrupted."""
