"""Error taxonomy for a document import run.

Fatal errors (abort the run):
- AuthError: credentials rejected or could not be refreshed
- FetchError: the source document could not be retrieved

Non-fatal errors (recorded, processing continues):
- UnsupportedElementError: a structural element with no builder
- AssetFetchError: an inline image that could not be downloaded
- RepositoryError: a failed mutation against the target repository
"""

from __future__ import annotations


class GdocImportError(Exception):
    """Base exception for all import errors."""


class ConfigurationError(GdocImportError):
    """Raised when required settings are missing."""


class AuthError(GdocImportError):
    """Raised when authentication fails (401/403 or token refresh)."""


class FetchError(GdocImportError):
    """Raised when the source document cannot be fetched."""


class DocumentNotFoundError(FetchError):
    """Raised when the document is not found (404)."""


class APIError(FetchError):
    """Raised when the API returns an error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class UnsupportedElementError(GdocImportError):
    """A structural element that no builder handles."""

    def __init__(self, index: int, kind: str) -> None:
        super().__init__(f"Import for element #{index} ({kind}) not implemented")
        self.index = index
        self.kind = kind


class AssetFetchError(GdocImportError):
    """An inline object whose binary could not be fetched or named."""

    def __init__(self, inline_object_id: str, reason: str) -> None:
        super().__init__(f"Image {inline_object_id}: {reason}")
        self.inline_object_id = inline_object_id
        self.reason = reason


class RepositoryError(GdocImportError):
    """Raised when the target repository rejects an operation."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
