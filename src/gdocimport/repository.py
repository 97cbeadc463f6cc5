"""Target content repository interface.

Defines the Repository protocol and implementations:
- RestRepository (see ``gdocimport.rest``): eZ Platform REST API
- InMemoryRepository: dict-backed store for tests and dry runs

Content follows a draft/publish lifecycle. A draft is invisible until it is
published; publishing a draft of an existing object supersedes the previous
published version without deleting it.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, TypeAlias

from gdocimport.errors import RepositoryError


@dataclass(frozen=True)
class RichTextValue:
    """Value of a RichText field: a serialized DocBook document."""

    xml: str


@dataclass(frozen=True)
class ImageValue:
    """Value of an image field: the binary and its original file name."""

    file_name: str
    data: bytes
    alternative_text: str = ""


FieldValue: TypeAlias = str | RichTextValue | ImageValue


@dataclass(frozen=True)
class TargetContentObject:
    """A published content object in the target repository."""

    id: str
    remote_id: str
    content_type: str = ""
    version_no: int = 1
    fields: dict[str, FieldValue] = field(default_factory=dict)


@dataclass(frozen=True)
class Draft:
    """An unpublished version of a content object.

    ``is_new`` is True when the object has never been published, in which
    case discarding the draft removes the object altogether.
    """

    content_id: str
    remote_id: str
    version_no: int
    content_type: str = ""
    is_new: bool = False
    fields: dict[str, FieldValue] = field(default_factory=dict)


@dataclass(frozen=True)
class Found:
    content: TargetContentObject


@dataclass(frozen=True)
class NotFound:
    remote_id: str


LookupResult: TypeAlias = Found | NotFound


class Repository(ABC):
    """Abstract base class for the target content repository."""

    @abstractmethod
    async def load_by_remote_id(self, remote_id: str) -> LookupResult:
        """Look up a published object by its remote id.

        Returns:
            Found with the object, or NotFound when no object has that id
        """
        ...

    @abstractmethod
    async def create_draft(
        self,
        content_type: str,
        fields: dict[str, FieldValue],
        remote_id: str,
        parent_location: str,
    ) -> Draft:
        """Create a new, unpublished object.

        Args:
            content_type: Content type identifier
            fields: Field identifier to value mapping
            remote_id: Remote id to assign to the new object
            parent_location: Location the object is placed under
        """
        ...

    @abstractmethod
    async def create_draft_from(self, content: TargetContentObject) -> Draft:
        """Open a new draft version of a published object."""
        ...

    @abstractmethod
    async def update_draft(self, draft: Draft, fields: dict[str, FieldValue]) -> Draft:
        """Set field values on a draft."""
        ...

    @abstractmethod
    async def publish(self, draft: Draft) -> TargetContentObject:
        """Publish a draft, making it the current version."""
        ...

    @abstractmethod
    async def discard_draft(self, draft: Draft) -> None:
        """Delete an unpublished draft."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        ...


class InMemoryRepository(Repository):
    """Repository that keeps every object and version in memory.

    Published versions are kept per object so superseded revisions stay
    inspectable through ``versions()``.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._published: dict[str, list[TargetContentObject]] = {}
        self._remote_ids: dict[str, str] = {}
        self._drafts: dict[tuple[str, int], Draft] = {}
        self._locations: dict[str, str] = {}
        self.operations: list[tuple[str, str]] = []

    async def load_by_remote_id(self, remote_id: str) -> LookupResult:
        content_id = self._remote_ids.get(remote_id)
        if content_id is None or content_id not in self._published:
            return NotFound(remote_id)
        return Found(self._published[content_id][-1])

    async def create_draft(
        self,
        content_type: str,
        fields: dict[str, FieldValue],
        remote_id: str,
        parent_location: str,
    ) -> Draft:
        if remote_id in self._remote_ids:
            raise RepositoryError(f"Remote id already in use: {remote_id}", 400)
        content_id = str(next(self._ids))
        self._remote_ids[remote_id] = content_id
        self._locations[content_id] = parent_location
        draft = Draft(
            content_id=content_id,
            remote_id=remote_id,
            version_no=1,
            content_type=content_type,
            is_new=True,
            fields=dict(fields),
        )
        self._drafts[(content_id, 1)] = draft
        self.operations.append(("create_draft", remote_id))
        return draft

    async def create_draft_from(self, content: TargetContentObject) -> Draft:
        versions = self._published.get(content.id)
        if not versions:
            raise RepositoryError(f"Content not found: {content.id}", 404)
        current = versions[-1]
        draft = Draft(
            content_id=current.id,
            remote_id=current.remote_id,
            version_no=current.version_no + 1,
            content_type=current.content_type,
            fields=dict(current.fields),
        )
        self._drafts[(draft.content_id, draft.version_no)] = draft
        self.operations.append(("create_draft_from", current.remote_id))
        return draft

    async def update_draft(self, draft: Draft, fields: dict[str, FieldValue]) -> Draft:
        self._require_draft(draft)
        updated = replace(draft, fields={**draft.fields, **fields})
        self._drafts[(draft.content_id, draft.version_no)] = updated
        self.operations.append(("update_draft", draft.remote_id))
        return updated

    async def publish(self, draft: Draft) -> TargetContentObject:
        current = self._require_draft(draft)
        del self._drafts[(draft.content_id, draft.version_no)]
        content = TargetContentObject(
            id=current.content_id,
            remote_id=current.remote_id,
            content_type=current.content_type,
            version_no=current.version_no,
            fields=dict(current.fields),
        )
        self._published.setdefault(content.id, []).append(content)
        self.operations.append(("publish", draft.remote_id))
        return content

    async def discard_draft(self, draft: Draft) -> None:
        self._drafts.pop((draft.content_id, draft.version_no), None)
        if draft.is_new:
            self._remote_ids.pop(draft.remote_id, None)
            self._locations.pop(draft.content_id, None)
        self.operations.append(("discard_draft", draft.remote_id))

    async def close(self) -> None:
        """No-op for the in-memory repository."""

    # -- inspection helpers ------------------------------------------------

    def versions(self, content_id: str) -> list[TargetContentObject]:
        """All published versions of an object, oldest first."""
        return list(self._published.get(content_id, []))

    def published(self) -> list[TargetContentObject]:
        """Current published version of every object."""
        return [versions[-1] for versions in self._published.values()]

    def drafts(self) -> list[Draft]:
        return list(self._drafts.values())

    def location_of(self, content_id: str) -> str | None:
        return self._locations.get(content_id)

    def _require_draft(self, draft: Draft) -> Draft:
        current = self._drafts.get((draft.content_id, draft.version_no))
        if current is None:
            raise RepositoryError(
                f"Draft {draft.content_id}/{draft.version_no} does not exist", 404
            )
        return current


def field_summary(fields: dict[str, Any]) -> str:
    """Short description of field values for log lines."""
    parts: list[str] = []
    for name, value in fields.items():
        if isinstance(value, RichTextValue):
            parts.append(f"{name}=<richtext {len(value.xml)} chars>")
        elif isinstance(value, ImageValue):
            parts.append(f"{name}=<image {value.file_name} {len(value.data)} bytes>")
        else:
            parts.append(f"{name}={value!r}")
    return ", ".join(parts)
