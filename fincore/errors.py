"""Exceptions raised by the finance core."""


class FinanceError(Exception):
    """Base class for every error raised by fincore."""


class ConfigurationError(FinanceError):
    """Raised when a context is configured with both or neither of group/period ids."""


class ValidationError(FinanceError, ValueError):
    """Raised when a record is malformed; the operation is aborted before any I/O."""


class TransportError(FinanceError, IOError):
    """Raised by a storage collaborator when a request cannot be completed."""


class LifecycleError(FinanceError):
    """Raised on a request lifecycle transition that is not allowed."""
