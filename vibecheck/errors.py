"""Exception types raised by the scanner outside of individual checkers."""

from __future__ import annotations


class VibeCheckError(Exception):
    """Base class for all vibecheck errors."""


class ScanSetupError(VibeCheckError):
    """The scan cannot start at all (e.g. the root directory does not exist)."""


class ConfigError(VibeCheckError):
    """An explicitly requested configuration file is missing or malformed."""


class UnsupportedFormatError(VibeCheckError, ValueError):
    """A report format outside text/json/markdown/html was requested."""

    def __init__(self, fmt: str) -> None:
        super().__init__(f"Unsupported report format: {fmt!r}")
        self.format = fmt


class ExtendsCycleError(ConfigError):
    """A config's ``extends`` chain refers back to itself."""
