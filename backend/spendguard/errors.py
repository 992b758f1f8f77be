"""Domain errors raised by the service layer.

Routers never catch these; ``main`` registers a handler that renders each one
as ``{"detail": message}`` with the status code carried by the class.
"""


class SpendguardError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SpendguardError):
    """Bad or missing input. Raised before anything is written."""

    status_code = 400


class NotFoundError(SpendguardError):
    status_code = 404


class NoGoalsError(SpendguardError):
    """Savings distribution requested for a user with no savings/custom goals."""

    status_code = 404


class UpstreamError(SpendguardError):
    """The database or the text-generation service failed."""

    status_code = 502
