"""Transport layer for fetching source documents and their images.

Defines the Transport protocol and implementations:
- GoogleDocsTransport: Production transport using Google Docs API
- LocalFileTransport: Test transport reading from local golden files
"""

from __future__ import annotations

import json
import mimetypes
import ssl
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

if TYPE_CHECKING:
    from pathlib import Path

import certifi
import httpx

from gdocimport.errors import APIError, AuthError, DocumentNotFoundError, FetchError

# API constants
API_BASE = "https://docs.googleapis.com/v1/documents"
DEFAULT_TIMEOUT = 60


@dataclass(frozen=True)
class DocumentData:
    """Complete document data from Google Docs API."""

    document_id: str
    title: str
    raw: dict[str, Any]  # Full API response


@dataclass(frozen=True)
class FetchedContent:
    """A downloaded binary with its response headers (lower-cased names)."""

    body: bytes
    headers: dict[str, str] = field(default_factory=dict)

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())


class Transport(ABC):
    """Abstract base class for document data transport."""

    @abstractmethod
    async def get_document(self, document_id: str) -> DocumentData:
        """Fetch complete document data.

        Args:
            document_id: The document identifier

        Returns:
            DocumentData with full document contents

        Raises:
            AuthError: If the credentials are rejected
            FetchError: If the document cannot be retrieved
        """
        ...

    @abstractmethod
    async def fetch_content(self, url: str) -> FetchedContent:
        """Download a binary resource such as an inline image.

        Args:
            url: Absolute URL of the resource

        Returns:
            FetchedContent with body bytes and headers

        Raises:
            FetchError: If the download fails
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        ...


class GoogleDocsTransport(Transport):
    """Production transport that fetches data from Google Docs API.

    Handles authentication, SSL, and HTTP communication.
    """

    def __init__(
        self,
        access_token: str,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            access_token: OAuth2 access token with documents.readonly scope
            timeout: Request timeout in seconds
            http_transport: Optional httpx transport (used by tests)
        """
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        self._client = httpx.AsyncClient(
            timeout=timeout,
            verify=ssl_context,
            transport=http_transport,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )
        # Content URIs are pre-signed and live on another host; no bearer token.
        self._content_client = httpx.AsyncClient(
            timeout=timeout,
            verify=ssl_context,
            transport=http_transport,
            follow_redirects=True,
        )

    async def get_document(self, document_id: str) -> DocumentData:
        """Fetch document data from Google Docs API."""
        url = f"{API_BASE}/{document_id}"
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            result: dict[str, Any] = response.json()
        except httpx.HTTPStatusError as e:
            self._handle_http_error(e)
            raise  # unreachable, but makes type checker happy
        except httpx.RequestError as e:
            raise FetchError(f"Network error: {e}") from e
        except ValueError as e:
            raise FetchError(f"Invalid JSON in document response: {e}") from e

        return DocumentData(
            document_id=result.get("documentId", document_id),
            title=result.get("title", ""),
            raw=result,
        )

    async def fetch_content(self, url: str) -> FetchedContent:
        """Download a content URI."""
        try:
            response = await self._content_client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise FetchError(f"Download failed ({status}): {url}") from e
        except httpx.RequestError as e:
            raise FetchError(f"Network error: {e}") from e

        return FetchedContent(
            body=response.content,
            headers={k.lower(): v for k, v in response.headers.items()},
        )

    def _handle_http_error(self, e: httpx.HTTPStatusError) -> None:
        """Handle HTTP errors and raise appropriate exceptions."""
        status = e.response.status_code
        if status == 401:
            raise AuthError("Invalid or expired access token") from e
        if status == 403:
            raise AuthError("Access denied. Check your scopes and permissions.") from e
        if status == 404:
            raise DocumentNotFoundError(
                "Document not found. Check the ID and sharing permissions."
            ) from e
        body = e.response.text
        raise APIError(f"API error ({status}): {body}", status_code=status) from e

    async def close(self) -> None:
        """Close the HTTP clients."""
        await self._client.aclose()
        await self._content_client.aclose()


class LocalFileTransport(Transport):
    """Test transport that reads from local golden files.

    Expected directory structure:
        golden_dir/
            <document_id>.json
            content/
                <last path segment of the content URI>
    """

    def __init__(self, golden_dir: Path) -> None:
        """Initialize the transport.

        Args:
            golden_dir: Directory containing golden test files
        """
        self._golden_dir = golden_dir
        self.fetched_urls: list[str] = []

    async def get_document(self, document_id: str) -> DocumentData:
        """Read document data from local file."""
        path = self._golden_dir / f"{document_id}.json"
        if not path.exists():
            raise DocumentNotFoundError(f"No golden file for document {document_id}")
        response = json.loads(path.read_text(encoding="utf-8"))

        return DocumentData(
            document_id=response.get("documentId", document_id),
            title=response.get("title", ""),
            raw=response,
        )

    async def fetch_content(self, url: str) -> FetchedContent:
        """Serve a file from ``content/`` named after the URL's last segment."""
        self.fetched_urls.append(url)
        name = urlparse(url).path.rsplit("/", 1)[-1]
        path = self._golden_dir / "content" / name
        if not name or not path.is_file():
            raise FetchError(f"Download failed (404): {url}")
        content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        return FetchedContent(
            body=path.read_bytes(),
            headers={
                "content-type": content_type,
                "content-disposition": f'inline; filename="{name}"',
            },
        )

    async def close(self) -> None:
        """No-op for local file transport."""
