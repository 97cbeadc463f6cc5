"""Resolve inline images to image objects in the target repository.

Each inline object maps to exactly one image object, identified by the remote
id ``gdoc-image-<inline object id>``. An existing object is reused as is; the
binary is only downloaded when no object with that remote id exists yet.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import unquote

from loguru import logger

from gdocimport.errors import AssetFetchError, FetchError, RepositoryError
from gdocimport.repository import Found, ImageValue

if TYPE_CHECKING:
    from gdocimport.repository import Draft, Repository, TargetContentObject
    from gdocimport.transport import Transport

IMAGE_REMOTE_ID_PREFIX = "gdoc-image-"

_FILENAME_EXT_RE = re.compile(r"filename\*\s*=\s*[^']*'[^']*'([^;]+)", re.IGNORECASE)
_FILENAME_QUOTED_RE = re.compile(r'filename\s*=\s*"([^"]*)"', re.IGNORECASE)
_FILENAME_TOKEN_RE = re.compile(r'filename\s*=\s*([^;\s"]+)', re.IGNORECASE)


def image_remote_id(inline_object_id: str) -> str:
    return IMAGE_REMOTE_ID_PREFIX + inline_object_id


def filename_from_disposition(header: str | None) -> str | None:
    """Extract the file name from a Content-Disposition header.

    Supports RFC 5987 ``filename*=UTF-8''name``, quoted ``filename="name"``
    and bare ``filename=name`` forms. Directory parts are stripped.

    Returns:
        The file name, or None if the header carries no usable name
    """
    if not header:
        return None
    for pattern in (_FILENAME_EXT_RE, _FILENAME_QUOTED_RE, _FILENAME_TOKEN_RE):
        match = pattern.search(header)
        if match:
            name = unquote(match.group(1).strip())
            name = name.replace("\\", "/").rsplit("/", 1)[-1]
            if name:
                return name
    return None


class AssetResolver:
    """Creates image objects at most once per inline object id."""

    def __init__(
        self,
        transport: Transport,
        repository: Repository,
        *,
        content_type: str,
        parent_location: str,
    ) -> None:
        self._transport = transport
        self._repository = repository
        self._content_type = content_type
        self._parent_location = parent_location
        self._resolved: dict[str, TargetContentObject] = {}
        self.created: list[TargetContentObject] = []

    async def resolve(
        self, inline_object_id: str, content_uri: str | None
    ) -> TargetContentObject:
        """Return the image object for an inline object, creating it if absent.

        Args:
            inline_object_id: Docs API inline object id
            content_uri: Download URI of the image binary

        Returns:
            The stored, published image object

        Raises:
            AssetFetchError: If the image cannot be downloaded or named
            RepositoryError: If the repository rejects the new image
        """
        cached = self._resolved.get(inline_object_id)
        if cached is not None:
            return cached

        remote_id = image_remote_id(inline_object_id)
        lookup = await self._repository.load_by_remote_id(remote_id)
        if isinstance(lookup, Found):
            logger.debug("Reusing image {} (content {})", remote_id, lookup.content.id)
            self._resolved[inline_object_id] = lookup.content
            return lookup.content

        if not content_uri:
            raise AssetFetchError(inline_object_id, "inline object has no content URI")

        try:
            fetched = await self._transport.fetch_content(content_uri)
        except FetchError as e:
            raise AssetFetchError(inline_object_id, str(e)) from e

        file_name = filename_from_disposition(fetched.header("content-disposition"))
        if file_name is None:
            raise AssetFetchError(
                inline_object_id, "response has no usable content-disposition header"
            )

        content = await self._store(
            inline_object_id, remote_id, file_name, fetched.body
        )
        self._resolved[inline_object_id] = content
        self.created.append(content)
        logger.info("Image object created: {} ({})", remote_id, file_name)
        return content

    async def _store(
        self, inline_object_id: str, remote_id: str, file_name: str, data: bytes
    ) -> TargetContentObject:
        name = f"Google Docs image ({inline_object_id})"
        draft = await self._repository.create_draft(
            self._content_type,
            {"name": name, "image": ImageValue(file_name=file_name, data=data)},
            remote_id,
            self._parent_location,
        )
        try:
            return await self._repository.publish(draft)
        except RepositoryError:
            await self._discard(draft)
            raise

    async def _discard(self, draft: Draft) -> None:
        try:
            await self._repository.discard_draft(draft)
        except RepositoryError as e:
            logger.error("Could not discard image draft {}: {}", draft.remote_id, e)
