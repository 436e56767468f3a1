"""Domain exceptions.

Services raise these; ``app.api.errors`` maps them to HTTP responses. A
roadmap that exists but belongs to another user raises ``NotFoundError`` so
callers cannot probe for other users' ids.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SchemaValidationError(AppError):
    """A document is missing a required field or has a value outside its enum."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppError):
    """Bad credentials, or a missing, invalid or expired token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidCredentialsError(AuthenticationError):
    """Email/password mismatch on login."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AppError):
    """The resource already exists (duplicate email on registration)."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ProviderNotConfiguredError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class GenerationError(AppError):
    """The roadmap could not be generated."""


class GenerationServiceError(GenerationError):
    """The text-generation endpoint was unreachable or answered with an error."""


class GenerationParseError(GenerationError):
    """The text-generation reply did not contain a usable JSON object."""
