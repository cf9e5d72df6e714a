"""Exception types for the packing core."""


class RemixError(Exception):
    """Base exception for packing errors."""

    pass


class RootPathError(RemixError):
    """The scan root is missing, not a directory, or unreadable.

    This is the only error that aborts a packing run; every other failure
    degrades the result set instead.
    """

    pass


class FileAccessError(RemixError, OSError):
    """Metadata or content of a single file could not be read."""

    pass


class PatternError(RemixError, ValueError):
    """A user-supplied glob pattern has invalid syntax."""

    pass


class ConfigError(RemixError):
    """Configuration file is malformed or contains unknown keys."""

    pass


class SensitiveScanError(RemixError):
    """The directory-wide sensitive content scan could not complete."""

    pass
