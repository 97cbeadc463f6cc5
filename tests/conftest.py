"""Shared test fixtures for gdocimport."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from gdocimport.importer import Importer
from gdocimport.transport import LocalFileTransport
from tests.fakes import GOLDEN_DIR, FailingRepository, FakeTransport, make_importer


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's GDOC_IMPORT_* variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("GDOC_IMPORT_"):
            monkeypatch.delenv(name)


@pytest.fixture
def golden_dir() -> Path:
    return GOLDEN_DIR


@pytest.fixture
def local_transport() -> LocalFileTransport:
    return LocalFileTransport(GOLDEN_DIR)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def repository() -> FailingRepository:
    """In-memory repository; failures are off until a test sets ``fail_on``."""
    return FailingRepository()


@pytest.fixture
def importer(
    local_transport: LocalFileTransport, repository: FailingRepository
) -> Importer:
    return make_importer(local_transport, repository)
