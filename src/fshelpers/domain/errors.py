class FshelpersError(Exception):
    """Base exception for domain-specific errors."""


class ConfigurationError(FshelpersError):
    """Bad CLI args or unusable settings (e.g., zero workers, bad duration)."""


class QueueClosedError(FshelpersError):
    """A value was put on a pipeline queue after it was closed."""


class StoreError(FshelpersError):
    """The content store could not commit an entry (e.g., source ran short)."""
