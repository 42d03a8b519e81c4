from __future__ import annotations


class DiskTopError(Exception):
    """Base class for errors reported by disktop."""


class SizeFormatError(DiskTopError, ValueError):
    """A size expression such as ``10M`` could not be parsed."""


class ConfigError(DiskTopError):
    """The configuration file is unreadable or holds invalid values."""


class RootError(DiskTopError):
    """The scan root cannot be accessed, so no traversal is possible."""

    def __init__(self, root: str, cause: OSError):
        super().__init__(f"cannot access {root!r}: {cause.strerror or cause}")
        self.root = root
        self.cause = cause
