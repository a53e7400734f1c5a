"""Exception hierarchy for the HDR to ENV conversion pipeline."""

from __future__ import annotations


class HdrToEnvError(Exception):
    """Base error for all pipeline failures.

    Attributes
    ----------
    exit_code : int
        Process exit code used by the CLI when this error terminates a run.
    """

    exit_code: int = 1


class ConfigurationError(HdrToEnvError):
    """Invalid run configuration (resolution, directories, engine source)."""

    exit_code = 2


class DiscoveryError(HdrToEnvError):
    """Input directory scan or file read failed."""

    exit_code = 3


class SandboxBootstrapError(HdrToEnvError):
    """Browser failed to launch or the rendering engine failed to load."""

    exit_code = 4


class ConversionError(HdrToEnvError):
    """Conversion of a single HDR source failed inside the sandbox."""

    exit_code = 5

    def __init__(self, message: str, *, source_name: str | None = None) -> None:
        super().__init__(message)
        self.source_name = source_name


class PersistenceError(HdrToEnvError):
    """Writing a converted ENV payload to disk failed."""

    exit_code = 6
