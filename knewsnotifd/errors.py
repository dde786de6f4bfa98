"""
Exception types for knewsnotifd.

Fatal errors (configuration, webhook reachability) stop the process at
startup. Everything else is raised inside a poll cycle and handled at the
cycle boundary.
"""


class KNewsNotifdError(Exception):
    """Base class for all knewsnotifd errors."""

    pass


class ConfigError(KNewsNotifdError):
    """Raised when a required setting is missing or invalid."""

    pass


class ReachabilityError(KNewsNotifdError):
    """Raised when the webhook cannot be contacted at startup."""

    pass


class FetchError(KNewsNotifdError):
    """Raised when the remote feed cannot be downloaded."""

    pass


class SnapshotWriteError(FetchError):
    """Raised when the downloaded feed cannot be written to disk."""

    pass


class ParseError(KNewsNotifdError):
    """Raised when the feed snapshot cannot be read or decoded."""

    pass


class MissingFieldError(KNewsNotifdError):
    """
    Raised when a feed entry lacks a required field.

    Parameters
    ----------
    field_name : str
        Name of the missing field.
    """

    def __init__(self, field_name: str):
        super().__init__(f"Entry is missing required field '{field_name}'")
        self.field_name = field_name


class DeliveryError(KNewsNotifdError):
    """Raised when a webhook message could not be delivered."""

    pass
