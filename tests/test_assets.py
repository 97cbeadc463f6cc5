"""Tests for image asset resolution."""

from __future__ import annotations

import pytest

from gdocimport.assets import AssetResolver, filename_from_disposition, image_remote_id
from gdocimport.errors import AssetFetchError, RepositoryError
from gdocimport.repository import Found, ImageValue
from tests.fakes import FailingRepository, FakeTransport

IMAGE_URL = "https://lh3.googleusercontent.com/abc"


def _resolver(transport: FakeTransport, repository: FailingRepository) -> AssetResolver:
    return AssetResolver(
        transport, repository, content_type="image", parent_location="1/43/51"
    )


def _serve_image(transport: FakeTransport, url: str = IMAGE_URL) -> None:
    transport.add_content(
        url,
        b"\x89PNG-bytes",
        {
            "Content-Type": "image/png",
            "Content-Disposition": 'inline; filename="a.png"',
        },
    )


class TestFilenameFromDisposition:
    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ('inline; filename="chart.png"', "chart.png"),
            ("attachment; filename=photo.jpg", "photo.jpg"),
            ("attachment; filename*=UTF-8''na%C3%AFve%20pic.png", "naïve pic.png"),
            ('attachment; filename="../../etc/passwd"', "passwd"),
            ('attachment; filename="C:\\tmp\\img.gif"', "img.gif"),
        ],
    )
    def test_parses_filename(self, header: str, expected: str) -> None:
        assert filename_from_disposition(header) == expected

    @pytest.mark.parametrize("header", [None, "", "inline", 'inline; filename=""'])
    def test_no_usable_name(self, header: str | None) -> None:
        assert filename_from_disposition(header) is None


class TestAssetResolver:
    @pytest.mark.asyncio
    async def test_creates_and_publishes_image(self) -> None:
        transport = FakeTransport()
        _serve_image(transport)
        repository = FailingRepository()

        content = await _resolver(transport, repository).resolve("kix.1", IMAGE_URL)

        assert content.remote_id == image_remote_id("kix.1") == "gdoc-image-kix.1"
        assert content.content_type == "image"
        image = content.fields["image"]
        assert isinstance(image, ImageValue)
        assert image.file_name == "a.png"
        assert image.data == b"\x89PNG-bytes"
        assert content.fields["name"] == "Google Docs image (kix.1)"
        assert repository.location_of(content.id) == "1/43/51"
        assert repository.drafts() == []

    @pytest.mark.asyncio
    async def test_same_inline_object_resolved_once(self) -> None:
        transport = FakeTransport()
        _serve_image(transport)
        repository = FailingRepository()
        resolver = _resolver(transport, repository)

        first = await resolver.resolve("kix.1", IMAGE_URL)
        second = await resolver.resolve("kix.1", IMAGE_URL)

        assert first == second
        assert transport.fetched_urls == [IMAGE_URL]
        assert len(repository.published()) == 1
        assert resolver.created == [first]

    @pytest.mark.asyncio
    async def test_existing_object_is_reused_without_download(self) -> None:
        transport = FakeTransport()
        _serve_image(transport)
        repository = FailingRepository()
        existing = await _resolver(transport, repository).resolve("kix.1", IMAGE_URL)

        fresh = _resolver(transport, repository)
        content = await fresh.resolve("kix.1", IMAGE_URL)

        assert content == existing
        assert transport.fetched_urls == [IMAGE_URL]
        assert fresh.created == []

    @pytest.mark.asyncio
    async def test_missing_content_disposition(self) -> None:
        transport = FakeTransport()
        transport.add_content(IMAGE_URL, b"bytes", {"Content-Type": "image/png"})
        repository = FailingRepository()

        with pytest.raises(AssetFetchError) as exc_info:
            await _resolver(transport, repository).resolve("kix.1", IMAGE_URL)

        assert "content-disposition" in str(exc_info.value)
        assert repository.published() == []
        assert repository.operations == []

    @pytest.mark.asyncio
    async def test_download_failure(self) -> None:
        repository = FailingRepository()
        with pytest.raises(AssetFetchError) as exc_info:
            await _resolver(FakeTransport(), repository).resolve("kix.1", IMAGE_URL)
        assert exc_info.value.inline_object_id == "kix.1"
        assert repository.published() == []

    @pytest.mark.asyncio
    async def test_no_content_uri(self) -> None:
        with pytest.raises(AssetFetchError):
            await _resolver(FakeTransport(), FailingRepository()).resolve("kix.1", None)

    @pytest.mark.asyncio
    async def test_publish_failure_discards_draft(self) -> None:
        transport = FakeTransport()
        _serve_image(transport)
        repository = FailingRepository()
        repository.fail_on = {"publish"}

        with pytest.raises(RepositoryError):
            await _resolver(transport, repository).resolve("kix.1", IMAGE_URL)

        assert repository.drafts() == []
        assert repository.operations[-1] == ("discard_draft", "gdoc-image-kix.1")
        lookup = await repository.load_by_remote_id("gdoc-image-kix.1")
        assert not isinstance(lookup, Found)

    @pytest.mark.asyncio
    async def test_failed_discard_keeps_publish_error(self) -> None:
        transport = FakeTransport()
        _serve_image(transport)
        repository = FailingRepository()
        repository.fail_on = {"publish", "discard_draft"}

        with pytest.raises(RepositoryError) as exc_info:
            await _resolver(transport, repository).resolve("kix.1", IMAGE_URL)

        assert "publish" in str(exc_info.value)
        assert len(repository.drafts()) == 1
