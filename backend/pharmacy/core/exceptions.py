"""
Error types for the pharmacy backend.

Domain errors (PharmacyError subclasses) are raised by the services and turned
into JSON responses by the handler registered in main.py. Identity and
permission failures use BusinessError, which builds generic HTTPExceptions so
nothing about accounts or resources leaks to the client.
"""
import logging

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


class PharmacyError(Exception):
    """Base for errors reported synchronously to the caller."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "Error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.code


class NotFoundError(PharmacyError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NotFound"


class ProductNotFoundError(PharmacyError):
    """A sale named a product id that is not in the catalog."""

    code = "ProductNotFound"


class InsufficientStockError(PharmacyError):
    code = "InsufficientStock"


class InvalidRequestError(PharmacyError):
    """Malformed input, e.g. a non-positive quantity."""

    code = "ValidationError"


class InvalidTransitionError(PharmacyError):
    """Status change out of a terminal purchase state."""

    status_code = status.HTTP_409_CONFLICT
    code = "InvalidTransition"


class ConflictError(PharmacyError):
    status_code = status.HTTP_409_CONFLICT
    code = "Conflict"


class BusinessError:
    """Generic HTTP errors for the identity layer."""

    @staticmethod
    def unauthorized(reason: str = "", detail: str = "Authentication failed") -> HTTPException:
        """
        401 for authentication failures.

        Same response for wrong password and unknown user, so accounts
        cannot be enumerated.
        """
        logger.warning(f"Unauthorized access attempt: {reason}")
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @staticmethod
    def forbidden(reason: str = "") -> HTTPException:
        """403 for role checks."""
        logger.warning(f"Forbidden access: {reason}")
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
