"""Repository implementation over the eZ Platform REST API (v2).

Endpoints used, relative to ``<base url>/api/ezp/v2``:

    GET     /content/objects?remoteId=<id>           look up by remote id
    GET     /content/types?identifier=<identifier>   resolve a content type
    POST    /content/objects                         create object + draft
    COPY    /content/objects/<id>/currentversion     draft from published
    PATCH   /content/objects/<id>/versions/<no>      update draft fields
    PUBLISH /content/objects/<id>/versions/<no>      publish draft
    DELETE  /content/objects/<id>/versions/<no>      discard draft
    DELETE  /content/objects/<id>                    discard unpublished object
"""

from __future__ import annotations

import base64
import ssl
from typing import Any

import certifi
import httpx
from loguru import logger

from gdocimport.errors import RepositoryError
from gdocimport.repository import (
    Draft,
    FieldValue,
    Found,
    ImageValue,
    LookupResult,
    NotFound,
    Repository,
    RichTextValue,
    TargetContentObject,
)

API_PREFIX = "/api/ezp/v2"
DEFAULT_TIMEOUT = 60
_MEDIA_TYPE = "application/vnd.ez.api.{}+json"


def media_type(name: str) -> str:
    return _MEDIA_TYPE.format(name)


def encode_field_value(value: FieldValue) -> Any:
    """Encode a field value in the REST input format."""
    if isinstance(value, RichTextValue):
        return {"xml": value.xml}
    if isinstance(value, ImageValue):
        return {
            "fileName": value.file_name,
            "fileSize": len(value.data),
            "alternativeText": value.alternative_text,
            "data": base64.b64encode(value.data).decode("ascii"),
        }
    return value


class RestRepository(Repository):
    """Production repository backed by an eZ Platform installation.

    Authenticates with HTTP basic auth; the REST user needs content
    create/edit/publish policies on both parent locations.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        *,
        language_code: str = "eng-GB",
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the repository client.

        Args:
            base_url: Site URL, e.g. ``https://cms.example.com``
            username: REST user login
            password: REST user password
            language_code: Main language of created content
            timeout: Request timeout in seconds
            http_transport: Optional httpx transport (used by tests)
        """
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + API_PREFIX,
            auth=(username, password),
            timeout=timeout,
            verify=ssl_context,
            transport=http_transport,
        )
        self._language_code = language_code
        self._content_types: dict[str, str] = {}

    async def load_by_remote_id(self, remote_id: str) -> LookupResult:
        response = await self._request(
            "GET",
            "/content/objects",
            accept="ContentInfo",
            params={"remoteId": remote_id},
            allow_not_found=True,
        )
        if response is None:
            return NotFound(remote_id)
        data = self._member(response, "Content")
        return Found(
            TargetContentObject(
                id=str(_require(data, "_id")),
                remote_id=data.get("_remoteId", remote_id),
                content_type=_last_segment(data.get("ContentType", {}).get("_href")),
                version_no=_version_no(data),
            )
        )

    async def create_draft(
        self,
        content_type: str,
        fields: dict[str, FieldValue],
        remote_id: str,
        parent_location: str,
    ) -> Draft:
        type_href = await self._content_type_href(content_type)
        body = {
            "ContentCreate": {
                "ContentType": {"_href": type_href},
                "mainLanguageCode": self._language_code,
                "LocationCreate": {
                    "ParentLocation": {
                        "_href": f"{API_PREFIX}/content/locations/{parent_location}"
                    },
                    "priority": "0",
                    "hidden": "false",
                    "sortField": "PATH",
                    "sortOrder": "ASC",
                },
                "alwaysAvailable": "true",
                "remoteId": remote_id,
                "fields": {"field": self._encode_fields(fields)},
            }
        }
        response = await self._request(
            "POST",
            "/content/objects",
            accept="Content",
            content_type="ContentCreate",
            json=body,
        )
        data = self._member(response, "Content")
        draft = Draft(
            content_id=str(_require(data, "_id")),
            remote_id=remote_id,
            version_no=_version_no(data),
            content_type=content_type,
            is_new=True,
            fields=dict(fields),
        )
        logger.debug("Created draft {}/{}", draft.content_id, draft.version_no)
        return draft

    async def create_draft_from(self, content: TargetContentObject) -> Draft:
        response = await self._request(
            "COPY",
            f"/content/objects/{content.id}/currentversion",
            accept="Version",
        )
        version = self._member(response, "Version")
        return Draft(
            content_id=content.id,
            remote_id=content.remote_id,
            version_no=int(_require(version, "VersionInfo", "versionNo")),
            content_type=content.content_type,
        )

    async def update_draft(self, draft: Draft, fields: dict[str, FieldValue]) -> Draft:
        body = {
            "VersionUpdate": {
                "initialLanguageCode": self._language_code,
                "fields": {"field": self._encode_fields(fields)},
            }
        }
        await self._request(
            "PATCH",
            f"/content/objects/{draft.content_id}/versions/{draft.version_no}",
            accept="Version",
            content_type="VersionUpdate",
            json=body,
        )
        return Draft(
            content_id=draft.content_id,
            remote_id=draft.remote_id,
            version_no=draft.version_no,
            content_type=draft.content_type,
            is_new=draft.is_new,
            fields={**draft.fields, **fields},
        )

    async def publish(self, draft: Draft) -> TargetContentObject:
        await self._request(
            "PUBLISH",
            f"/content/objects/{draft.content_id}/versions/{draft.version_no}",
        )
        return TargetContentObject(
            id=draft.content_id,
            remote_id=draft.remote_id,
            content_type=draft.content_type,
            version_no=draft.version_no,
            fields=dict(draft.fields),
        )

    async def discard_draft(self, draft: Draft) -> None:
        if draft.is_new:
            path = f"/content/objects/{draft.content_id}"
        else:
            path = f"/content/objects/{draft.content_id}/versions/{draft.version_no}"
        await self._request("DELETE", path)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------

    async def _content_type_href(self, identifier: str) -> str:
        cached = self._content_types.get(identifier)
        if cached is not None:
            return cached
        response = await self._request(
            "GET",
            "/content/types",
            accept="ContentTypeInfoList",
            params={"identifier": identifier},
        )
        info = self._json(response).get("ContentTypeInfoList", {})
        types = info.get("ContentType", [])
        if not types:
            raise RepositoryError(f"Unknown content type: {identifier}", 404)
        href: str = _require(types[0], "_href")
        self._content_types[identifier] = href
        return href

    def _encode_fields(self, fields: dict[str, FieldValue]) -> list[dict[str, Any]]:
        return [
            {
                "fieldDefinitionIdentifier": name,
                "languageCode": self._language_code,
                "fieldValue": encode_field_value(value),
            }
            for name, value in fields.items()
        ]

    async def _request(
        self,
        method: str,
        path: str,
        *,
        accept: str | None = None,
        content_type: str | None = None,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        allow_not_found: bool = False,
    ) -> httpx.Response | None:
        """Send a request; None for a tolerated 404."""
        headers: dict[str, str] = {}
        if accept:
            headers["Accept"] = media_type(accept)
        if content_type:
            headers["Content-Type"] = media_type(content_type)
        try:
            response = await self._client.request(
                method,
                path,
                headers=headers,
                json=json,
                params=params,
                follow_redirects=True,
            )
        except httpx.RequestError as e:
            raise RepositoryError(f"Network error: {e}") from e

        if allow_not_found and response.status_code == 404:
            return None
        if not response.is_success:
            status = response.status_code
            raise RepositoryError(
                f"{method} {path} failed ({status}): {response.text[:500]}",
                status_code=status,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response | None) -> dict[str, Any]:
        if response is None:
            raise RepositoryError("Empty response")
        try:
            result: dict[str, Any] = response.json()
        except ValueError as e:
            raise RepositoryError(f"Invalid JSON in response: {e}") from e
        return result

    def _member(self, response: httpx.Response | None, key: str) -> dict[str, Any]:
        value = self._json(response).get(key)
        if not isinstance(value, dict):
            raise RepositoryError(f"Response has no {key} member")
        return value


def _require(data: dict[str, Any], *path: str) -> Any:
    """Walk nested members, raising RepositoryError if one is missing."""
    value: Any = data
    for key in path:
        if not isinstance(value, dict) or key not in value:
            raise RepositoryError(f"Response has no {'.'.join(path)} member")
        value = value[key]
    return value


def _last_segment(href: str | None) -> str:
    return href.rstrip("/").rsplit("/", 1)[-1] if href else ""


def _version_no(content: dict[str, Any]) -> int:
    """Current version number of a Content representation, 1 if absent."""
    if "currentVersionNo" in content:
        return int(content["currentVersionNo"])
    version = content.get("CurrentVersion", {}).get("Version", {})
    return int(version.get("VersionInfo", {}).get("versionNo", 1))
