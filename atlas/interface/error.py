"""Interface layer errors.

Maps domain and adapter errors to HTTP responses.
"""

from fastapi import HTTPException, status
import logfire

from atlas.adapter.error import AuthenticationError, GeocodingError
from atlas.domain.error import (
    AuthenticationRequiredError,
    DomainError,
    NotAuthorizedError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)


def to_http_exception(error: Exception) -> HTTPException:
    """Translate an error raised by a use case into an HTTPException.

    Args:
        error: Error raised while handling the request

    Returns:
        HTTPException carrying the matching status code
    """
    if isinstance(error, AuthenticationRequiredError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": str(error), "redirect_to": error.redirect_to},
        )
    if isinstance(error, AuthenticationError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=error.description
        )
    if isinstance(error, NotAuthorizedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, (ValidationError, ValueError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, GeocodingError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    if isinstance(error, (PersistenceError, DomainError)):
        logfire.error("Store error", error=str(error))
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(error)
        )

    logfire.error("Unexpected error", error=str(error), error_type=type(error).__name__)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred",
    )
