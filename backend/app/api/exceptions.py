"""
Custom exceptions for API layer.
Separates business exceptions from HTTP exceptions.
"""
from fastapi import HTTPException, status


class BadRequestError(Exception):
    """Raised when request input is malformed or not allowed."""
    pass


class FileNotFoundInStoreError(Exception):
    """Raised when no record exists for a well-formed file ID."""
    pass


class UpstreamFailureError(Exception):
    """Raised when the object store or record store fails."""
    pass


def handle_business_exception(e: Exception) -> HTTPException:
    """
    Convert business exceptions to HTTP exceptions.
    This keeps business logic clean of HTTP concerns.
    """
    if isinstance(e, BadRequestError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    elif isinstance(e, FileNotFoundInStoreError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e) or "File not found")
    elif isinstance(e, UpstreamFailureError):
        # Storage details stay in the logs
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
    else:
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
