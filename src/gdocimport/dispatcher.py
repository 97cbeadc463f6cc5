"""Route classified source elements to their builders.

Nodes are appended in source order. Elements that cannot be converted are
recorded as skipped and never abort the document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from gdocimport.builders import build_heading, build_image, build_paragraph, build_table
from gdocimport.errors import (
    AssetFetchError,
    GdocImportError,
    RepositoryError,
    UnsupportedElementError,
)
from gdocimport.richtext import BlockNode, RichTextDocument
from gdocimport.source import (
    HeadingElement,
    ImageElement,
    ParagraphElement,
    TableElement,
    UnknownElement,
)

if TYPE_CHECKING:
    from gdocimport.assets import AssetResolver
    from gdocimport.source import SourceDocument, SourceElement


@dataclass
class BuildOutcome:
    """The assembled document and the elements that were left out."""

    document: RichTextDocument
    skipped: list[GdocImportError] = field(default_factory=list)


class Dispatcher:
    """Builds a RichTextDocument from a SourceDocument."""

    def __init__(self, resolver: AssetResolver) -> None:
        self._resolver = resolver

    async def build(self, source: SourceDocument) -> BuildOutcome:
        outcome = BuildOutcome(document=RichTextDocument())
        for index, element in enumerate(source.elements):
            try:
                node = await self._build_node(index, element, source)
            except (UnsupportedElementError, AssetFetchError, RepositoryError) as e:
                logger.warning("Skipped element #{}: {}", index, e)
                outcome.skipped.append(e)
                continue
            if node is not None:
                outcome.document.append(node)
        return outcome

    async def _build_node(
        self, index: int, element: SourceElement, source: SourceDocument
    ) -> BlockNode | None:
        if isinstance(element, HeadingElement):
            return build_heading(element)
        if isinstance(element, ImageElement):
            return await build_image(element, source.inline_objects, self._resolver)
        if isinstance(element, TableElement):
            return build_table(element)
        if isinstance(element, ParagraphElement):
            return build_paragraph(element)
        if isinstance(element, UnknownElement):
            raise UnsupportedElementError(index, element.kind)
        raise UnsupportedElementError(index, type(element).__name__)
