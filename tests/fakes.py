"""Fake implementations and raw document builders for tests.

The fakes let tests control the behavior of the transport and the target
repository (missing headers, failing mutations) without a network.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from gdocimport.errors import DocumentNotFoundError, FetchError, RepositoryError
from gdocimport.importer import Importer
from gdocimport.repository import (
    Draft,
    InMemoryRepository,
    Repository,
    TargetContentObject,
)
from gdocimport.transport import DocumentData, FetchedContent, Transport

GOLDEN_DIR = Path(__file__).parent / "golden"

SHOWCASE_DOC_ID = "showcase-doc"

DOCUMENT_PARENT = "1/2"
IMAGE_PARENT = "1/43/51"


def make_importer(transport: Transport, repository: Repository) -> Importer:
    return Importer(
        transport,
        repository,
        document_content_type="google_docs_document",
        document_parent_location=DOCUMENT_PARENT,
        image_content_type="image",
        image_parent_location=IMAGE_PARENT,
    )


# ---------------------------------------------------------------------------
# Raw Docs API builders
# ---------------------------------------------------------------------------


def text_run(content: str, url: str | None = None) -> dict[str, Any]:
    style: dict[str, Any] = {}
    if url is not None:
        style["link"] = {"url": url}
    return {"textRun": {"content": content, "textStyle": style}}


def image_run(inline_object_id: str) -> dict[str, Any]:
    return {"inlineObjectElement": {"inlineObjectId": inline_object_id}}


def paragraph(*elements: dict[str, Any], style: str = "NORMAL_TEXT") -> dict[str, Any]:
    return {
        "paragraph": {
            "elements": list(elements),
            "paragraphStyle": {"namedStyleType": style},
        }
    }


def table(rows: list[list[str]]) -> dict[str, Any]:
    return {
        "table": {
            "rows": len(rows),
            "columns": len(rows[0]) if rows else 0,
            "tableRows": [
                {
                    "tableCells": [
                        {"content": [paragraph(text_run(text + "\n"))]} for text in row
                    ]
                }
                for row in rows
            ],
        }
    }


def inline_image(content_uri: str | None) -> dict[str, Any]:
    image: dict[str, Any] = {}
    if content_uri is not None:
        image["contentUri"] = content_uri
    return {"inlineObjectProperties": {"embeddedObject": {"imageProperties": image}}}


def document(
    *content: dict[str, Any],
    document_id: str = "doc-1",
    title: str = "Doc",
    inline_objects: dict[str, Any] | None = None,
) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "documentId": document_id,
        "title": title,
        "body": {"content": list(content)},
    }
    if inline_objects:
        raw["inlineObjects"] = inline_objects
    return raw


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeTransport(Transport):
    """Serves in-memory documents and binaries.

    Binaries are registered per URL together with the headers to return,
    so tests can omit or mangle Content-Disposition.
    """

    def __init__(self) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self.contents: dict[str, FetchedContent] = {}
        self.fetched_urls: list[str] = []
        self.closed = False

    def add_document(self, raw: dict[str, Any]) -> None:
        self.documents[raw["documentId"]] = raw

    def add_content(
        self, url: str, body: bytes, headers: dict[str, str] | None = None
    ) -> None:
        self.contents[url] = FetchedContent(
            body=body, headers={k.lower(): v for k, v in (headers or {}).items()}
        )

    async def get_document(self, document_id: str) -> DocumentData:
        raw = self.documents.get(document_id)
        if raw is None:
            raise DocumentNotFoundError(f"Unknown document {document_id}")
        return DocumentData(
            document_id=document_id, title=raw.get("title", ""), raw=raw
        )

    async def fetch_content(self, url: str) -> FetchedContent:
        self.fetched_urls.append(url)
        content = self.contents.get(url)
        if content is None:
            raise FetchError(f"Download failed (404): {url}")
        return content

    async def close(self) -> None:
        self.closed = True


class FailingRepository(InMemoryRepository):
    """In-memory repository whose mutations can be made to fail.

    Set ``fail_on`` to an operation name (``"create_draft"``,
    ``"create_draft_from"``, ``"update_draft"``, ``"publish"``,
    ``"discard_draft"``) and optionally ``fail_remote_id`` to restrict the
    failure to one object.
    """

    def __init__(self) -> None:
        super().__init__()
        self.fail_on: set[str] = set()
        self.fail_remote_id: str | None = None

    def _maybe_fail(self, operation: str, remote_id: str) -> None:
        if operation not in self.fail_on:
            return
        if self.fail_remote_id is not None and remote_id != self.fail_remote_id:
            return
        raise RepositoryError(f"Simulated {operation} failure", 500)

    async def create_draft(
        self,
        content_type: str,
        fields: dict[str, Any],
        remote_id: str,
        parent_location: str,
    ) -> Draft:
        self._maybe_fail("create_draft", remote_id)
        return await super().create_draft(
            content_type, fields, remote_id, parent_location
        )

    async def create_draft_from(self, content: TargetContentObject) -> Draft:
        self._maybe_fail("create_draft_from", content.remote_id)
        return await super().create_draft_from(content)

    async def update_draft(self, draft: Draft, fields: dict[str, Any]) -> Draft:
        self._maybe_fail("update_draft", draft.remote_id)
        return await super().update_draft(draft, fields)

    async def publish(self, draft: Draft) -> TargetContentObject:
        self._maybe_fail("publish", draft.remote_id)
        return await super().publish(draft)

    async def discard_draft(self, draft: Draft) -> None:
        self._maybe_fail("discard_draft", draft.remote_id)
        await super().discard_draft(draft)
