"""Service-layer errors, mapped to HTTP responses in rolegate.api.errors."""


class ServiceError(Exception):
    """Base class for errors raised by services. Maps to 500."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(ServiceError):
    """The caller supplied data the operation cannot accept."""

    status_code = 400


class DuplicateError(InvalidRequestError):
    """A unique field (username, role name) is already taken."""


class NotFoundError(ServiceError):
    status_code = 404


class AuthenticationError(ServiceError):
    """Bad credentials, inactive account, or unusable token."""

    status_code = 401
