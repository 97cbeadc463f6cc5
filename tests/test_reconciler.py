"""Tests for create-or-update of the imported document."""

from __future__ import annotations

import pytest

from gdocimport.reconciler import (
    ReconcileAction,
    Reconciler,
    document_remote_id,
)
from gdocimport.repository import Found, RichTextValue
from gdocimport.richtext import Paragraph, RichTextDocument, Text, Title
from gdocimport.source import SourceDocument
from tests.fakes import FailingRepository

SOURCE = SourceDocument(id="abc", title="Launch plan")


def _reconciler(repository: FailingRepository) -> Reconciler:
    return Reconciler(
        repository, content_type="google_docs_document", parent_location="1/2"
    )


def _body(text: str) -> RichTextDocument:
    return RichTextDocument([Title("1", "Launch plan"), Paragraph((Text(text),))])


class TestReconciler:
    def test_remote_id(self) -> None:
        assert document_remote_id("abc") == "gdoc-abc"

    @pytest.mark.asyncio
    async def test_creates_when_absent(self) -> None:
        repository = FailingRepository()

        result = await _reconciler(repository).reconcile(SOURCE, _body("v1"))

        assert result.success
        assert result.action is ReconcileAction.CREATED
        assert result.remote_id == "gdoc-abc"
        assert result.content is not None
        assert result.content.version_no == 1
        assert result.content.content_type == "google_docs_document"
        assert result.content.fields["title"] == "Launch plan"
        expected_body = RichTextValue(_body("v1").to_xml_string())
        assert result.content.fields["body"] == expected_body
        assert repository.location_of(result.content.id) == "1/2"
        assert [op for op, _ in repository.operations] == ["create_draft", "publish"]

    @pytest.mark.asyncio
    async def test_updates_when_present(self) -> None:
        repository = FailingRepository()
        reconciler = _reconciler(repository)
        created = await reconciler.reconcile(SOURCE, _body("v1"))

        result = await reconciler.reconcile(SOURCE, _body("v2"))

        assert result.action is ReconcileAction.UPDATED
        assert result.content is not None
        assert created.content is not None
        assert result.content.id == created.content.id
        assert result.content.version_no == 2
        versions = repository.versions(created.content.id)
        assert [v.fields["body"] for v in versions] == [
            RichTextValue(_body("v1").to_xml_string()),
            RichTextValue(_body("v2").to_xml_string()),
        ]
        assert len(repository.published()) == 1

    @pytest.mark.asyncio
    async def test_update_uses_draft_of_existing(self) -> None:
        repository = FailingRepository()
        reconciler = _reconciler(repository)
        await reconciler.reconcile(SOURCE, _body("v1"))
        repository.operations.clear()

        await reconciler.reconcile(SOURCE, _body("v2"))

        assert [op for op, _ in repository.operations] == [
            "create_draft_from",
            "update_draft",
            "publish",
        ]

    @pytest.mark.asyncio
    async def test_failed_update_leaves_published_version(self) -> None:
        repository = FailingRepository()
        reconciler = _reconciler(repository)
        created = await reconciler.reconcile(SOURCE, _body("v1"))
        assert created.content is not None
        repository.fail_on = {"publish"}

        result = await reconciler.reconcile(SOURCE, _body("v2"))

        assert not result.success
        assert result.action is ReconcileAction.FAILED
        assert result.error is not None
        assert result.error.status_code == 500
        assert repository.drafts() == []
        lookup = await repository.load_by_remote_id("gdoc-abc")
        assert isinstance(lookup, Found)
        assert lookup.content == created.content

    @pytest.mark.asyncio
    async def test_failed_create_leaves_nothing(self) -> None:
        repository = FailingRepository()
        repository.fail_on = {"publish"}

        result = await _reconciler(repository).reconcile(SOURCE, _body("v1"))

        assert result.action is ReconcileAction.FAILED
        assert repository.published() == []
        assert repository.drafts() == []

        # The remote id is free again, so a later run can create the object.
        repository.fail_on = set()
        retry = await _reconciler(repository).reconcile(SOURCE, _body("v1"))
        assert retry.action is ReconcileAction.CREATED

    @pytest.mark.asyncio
    async def test_failed_draft_creation(self) -> None:
        repository = FailingRepository()
        repository.fail_on = {"create_draft"}

        result = await _reconciler(repository).reconcile(SOURCE, _body("v1"))

        assert result.action is ReconcileAction.FAILED
        assert repository.operations == []

    @pytest.mark.asyncio
    async def test_discard_failure_still_reports_original_error(self) -> None:
        repository = FailingRepository()
        reconciler = _reconciler(repository)
        await reconciler.reconcile(SOURCE, _body("v1"))
        repository.fail_on = {"update_draft", "discard_draft"}

        result = await reconciler.reconcile(SOURCE, _body("v2"))

        assert result.action is ReconcileAction.FAILED
        assert result.error is not None
        assert "update_draft" in str(result.error)
