"""Importer - main interface for a single document import run.

Orchestrates fetch → decode → build → reconcile using the transport,
dispatcher and reconciler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from gdocimport.assets import AssetResolver
from gdocimport.dispatcher import Dispatcher
from gdocimport.reconciler import Reconciler, ReconcileResult
from gdocimport.source import decode_document

if TYPE_CHECKING:
    from gdocimport.errors import GdocImportError
    from gdocimport.repository import Repository
    from gdocimport.richtext import RichTextDocument
    from gdocimport.transport import Transport


@dataclass
class ImportResult:
    """Result of an import run."""

    document_id: str
    reconcile: ReconcileResult
    body: RichTextDocument
    skipped: list[GdocImportError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.reconcile.success

    @property
    def message(self) -> str:
        if not self.success:
            return f"Storing {self.reconcile.remote_id} failed: {self.reconcile.error}"
        action = self.reconcile.action.value
        text = f"Content object {action}: {self.reconcile.remote_id}"
        if self.skipped:
            text += f" ({len(self.skipped)} element(s) skipped)"
        return text


class Importer:
    """Imports one Google Docs document into the target repository."""

    def __init__(
        self,
        transport: Transport,
        repository: Repository,
        *,
        document_content_type: str,
        document_parent_location: str,
        image_content_type: str,
        image_parent_location: str,
    ) -> None:
        self._transport = transport
        self._repository = repository
        self._document_content_type = document_content_type
        self._document_parent_location = document_parent_location
        self._image_content_type = image_content_type
        self._image_parent_location = image_parent_location

    async def run(self, document_id: str) -> ImportResult:
        """Import a document.

        Args:
            document_id: The Google Docs document identifier

        Returns:
            ImportResult; skipped elements do not make the run fail

        Raises:
            AuthError: If the transport credentials are rejected
            FetchError: If the document cannot be fetched or decoded
        """
        with logger.contextualize(document_id=document_id):
            document_data = await self._transport.get_document(document_id)
            source = decode_document(document_data.raw, document_data.document_id)
            logger.info("Loaded document {} ({!r})", source.id, source.title)

            resolver = AssetResolver(
                self._transport,
                self._repository,
                content_type=self._image_content_type,
                parent_location=self._image_parent_location,
            )
            outcome = await Dispatcher(resolver).build(source)

            reconciler = Reconciler(
                self._repository,
                content_type=self._document_content_type,
                parent_location=self._document_parent_location,
            )
            reconcile = await reconciler.reconcile(source, outcome.document)

            result = ImportResult(
                document_id=source.id,
                reconcile=reconcile,
                body=outcome.document,
                skipped=outcome.skipped,
            )
            if result.success:
                logger.info(result.message)
            logger.info("Done.")
            return result
