"""
Service Errors

An empty log window is a valid result (maximum drift); these
exceptions are for failures the caller has to handle.
"""


class DriftServiceError(Exception):
    """Base class for service-layer failures."""


class StoreUnavailableError(DriftServiceError):
    """
    A required store read failed.

    The original exception is kept as `cause` (and as __cause__
    when raised with `from`).
    """

    def __init__(self, operation: str, cause: Exception = None):
        self.operation = operation
        self.cause = cause
        message = f"Store unavailable during {operation}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
