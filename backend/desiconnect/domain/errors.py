"""
Domain errors

Services raise these; the API layer turns them into JSON responses with
`status_code`.
"""


class DomainError(Exception):
    """Base class for failures surfaced to API callers"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailedError(DomainError):
    status_code = 400


class InvalidTransitionError(DomainError):
    status_code = 400


class AuthenticationError(DomainError):
    status_code = 401


class PermissionDeniedError(DomainError):
    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ConcurrentUpdateError(DomainError):
    """The row changed state between read and write"""

    status_code = 409
