"""Create-or-update of the imported document in the target repository.

State machine per document:

    NotFound  --create_draft-->       Draft  --publish--> Published
    Published --create_draft_from-->  Draft' --publish--> Published'

A failure on any edge discards the open draft, leaving the object at its
last stable state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from loguru import logger

from gdocimport.errors import RepositoryError
from gdocimport.repository import Found, RichTextValue, field_summary

if TYPE_CHECKING:
    from gdocimport.repository import (
        Draft,
        FieldValue,
        Repository,
        TargetContentObject,
    )
    from gdocimport.richtext import RichTextDocument
    from gdocimport.source import SourceDocument

DOCUMENT_REMOTE_ID_PREFIX = "gdoc-"


def document_remote_id(document_id: str) -> str:
    return DOCUMENT_REMOTE_ID_PREFIX + document_id


class ReconcileAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of storing one document."""

    action: ReconcileAction
    remote_id: str
    content: TargetContentObject | None = None
    error: RepositoryError | None = None

    @property
    def success(self) -> bool:
        return self.action is not ReconcileAction.FAILED


class Reconciler:
    """Stores a RichText document under the source document's remote id."""

    def __init__(
        self,
        repository: Repository,
        *,
        content_type: str,
        parent_location: str,
    ) -> None:
        self._repository = repository
        self._content_type = content_type
        self._parent_location = parent_location

    async def reconcile(
        self, source: SourceDocument, document: RichTextDocument
    ) -> ReconcileResult:
        """Create or update the target object for ``source``.

        Args:
            source: The imported source document
            document: The assembled RichText body

        Returns:
            ReconcileResult; repository failures are reported as FAILED
            instead of raised
        """
        remote_id = document_remote_id(source.id)
        fields: dict[str, FieldValue] = {
            "title": source.title,
            "body": RichTextValue(document.to_xml_string()),
        }
        logger.debug("Storing {}: {}", remote_id, field_summary(fields))

        try:
            lookup = await self._repository.load_by_remote_id(remote_id)
            if isinstance(lookup, Found):
                content = await self._update(lookup.content, fields)
                action = ReconcileAction.UPDATED
            else:
                content = await self._create(remote_id, fields)
                action = ReconcileAction.CREATED
        except RepositoryError as e:
            logger.error("Storing {} failed: {}", remote_id, e)
            return ReconcileResult(ReconcileAction.FAILED, remote_id, error=e)

        return ReconcileResult(action, remote_id, content=content)

    async def _update(
        self, existing: TargetContentObject, fields: dict[str, FieldValue]
    ) -> TargetContentObject:
        draft = await self._repository.create_draft_from(existing)
        return await self._commit(draft, fields)

    async def _create(
        self, remote_id: str, fields: dict[str, FieldValue]
    ) -> TargetContentObject:
        draft = await self._repository.create_draft(
            self._content_type, fields, remote_id, self._parent_location
        )
        return await self._commit(draft, None)

    async def _commit(
        self, draft: Draft, fields: dict[str, FieldValue] | None
    ) -> TargetContentObject:
        try:
            if fields is not None:
                draft = await self._repository.update_draft(draft, fields)
            return await self._repository.publish(draft)
        except RepositoryError:
            await self._discard(draft)
            raise

    async def _discard(self, draft: Draft) -> None:
        try:
            await self._repository.discard_draft(draft)
        except RepositoryError as e:
            logger.error(
                "Could not discard draft {}/{}: {}",
                draft.content_id,
                draft.version_no,
                e,
            )
