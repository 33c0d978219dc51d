"""
Store Exceptions

Failure taxonomy shared by the identifier validator, the resource store and
the HTTP error handler. Kept at package root so that every layer can import
it without circular imports.

Every error carries the content kind and the offending identifier (when
known) plus the HTTP status it maps to.
"""

from typing import Optional


class StoreError(Exception):
    """Base class for all resource store failures."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        resource_id: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.resource_id = resource_id


class MissingIdentifierError(StoreError):
    """Raised when the identifier is absent, empty or whitespace only."""

    status_code = 400


class InvalidIdentifierError(StoreError):
    """Raised when the identifier does not match the identifier grammar."""

    status_code = 400


class InvalidContentError(StoreError):
    """Raised when a request body fails validation for its content kind."""

    status_code = 400


class ResourceNotFoundError(StoreError):
    """Raised when no file exists at the resource location."""

    status_code = 404


class ResourceExistsError(StoreError):
    """Raised by create when a file already exists at the resource location."""

    status_code = 409


class StorageInternalError(StoreError):
    """
    Raised on unexpected I/O failures, or when a stored file no longer
    passes validation for its own kind (corrupted out of band).
    """

    status_code = 500
