"""Typed source document model and structural element classifier.

The raw Docs API response is decoded once into ``SourceDocument``. Every body
element is classified into exactly one variant, first match wins:

1. HeadingElement   - paragraph whose named style starts with ``HEADING_``
2. ImageElement     - paragraph whose first run is an inline object
3. TableElement     - element carrying table rows
4. ParagraphElement - any other paragraph
5. UnknownElement   - everything else (section breaks, tables of contents)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias

from pydantic import ValidationError

from gdocimport import api_types as api
from gdocimport.errors import FetchError

HEADING_PREFIX = "HEADING_"


@dataclass(frozen=True)
class Run:
    """A contiguous span within a paragraph."""

    text: str = ""
    link_url: str | None = None
    inline_object_id: str | None = None


@dataclass(frozen=True)
class InlineObject:
    """An embedded image referenced from a run."""

    id: str
    content_uri: str | None = None


@dataclass(frozen=True)
class HeadingElement:
    style: str
    runs: tuple[Run, ...] = ()

    @property
    def level(self) -> str:
        return self.style[len(HEADING_PREFIX) :]


@dataclass(frozen=True)
class ImageElement:
    inline_object_id: str
    runs: tuple[Run, ...] = ()


@dataclass(frozen=True)
class TableCell:
    paragraphs: tuple[tuple[Run, ...], ...] = ()


@dataclass(frozen=True)
class TableElement:
    rows: tuple[tuple[TableCell, ...], ...] = ()


@dataclass(frozen=True)
class ParagraphElement:
    runs: tuple[Run, ...] = ()


@dataclass(frozen=True)
class UnknownElement:
    kind: str


SourceElement: TypeAlias = (
    HeadingElement | ImageElement | TableElement | ParagraphElement | UnknownElement
)


@dataclass(frozen=True)
class SourceDocument:
    """A fetched document, read-only for the duration of a run."""

    id: str
    title: str
    elements: tuple[SourceElement, ...] = ()
    inline_objects: dict[str, InlineObject] = field(default_factory=dict)


def decode_document(raw: dict[str, Any], document_id: str = "") -> SourceDocument:
    """Decode a raw Docs API response into a SourceDocument.

    Documents fetched with tabs content have no top-level body; the first
    tab's body and inline objects are used instead.

    Args:
        raw: Document resource JSON from the Google Docs API
        document_id: Requested id, used when the response carries none

    Returns:
        The typed, classified document

    Raises:
        FetchError: If the response does not match the Document schema or
            no document id is known
    """
    try:
        doc = api.Document.model_validate(raw)
    except ValidationError as e:
        raise FetchError(f"Malformed document response: {e}") from e

    source_id = doc.document_id or document_id
    if not source_id:
        raise FetchError("Document response has no documentId")

    body = doc.body
    inline_objects = doc.inline_objects
    if body is None and doc.tabs:
        tab = doc.tabs[0].document_tab
        if tab is not None:
            body = tab.body
            inline_objects = tab.inline_objects

    content = body.content if body is not None and body.content else []
    return SourceDocument(
        id=source_id,
        title=doc.title or "",
        elements=tuple(classify(element) for element in content),
        inline_objects={
            object_id: _decode_inline_object(object_id, obj)
            for object_id, obj in (inline_objects or {}).items()
        },
    )


def classify(element: api.StructuralElement) -> SourceElement:
    """Classify one structural element into its source variant."""
    paragraph = element.paragraph
    if paragraph is not None:
        style = _named_style(paragraph)
        runs = _decode_runs(paragraph)
        if style.startswith(HEADING_PREFIX):
            return HeadingElement(style=style, runs=runs)
        if runs and runs[0].inline_object_id is not None:
            return ImageElement(inline_object_id=runs[0].inline_object_id, runs=runs)

    if element.table is not None:
        return TableElement(rows=_decode_rows(element.table))

    if paragraph is not None:
        return ParagraphElement(runs=_decode_runs(paragraph))

    if element.section_break is not None:
        return UnknownElement(kind="sectionBreak")
    if element.table_of_contents is not None:
        return UnknownElement(kind="tableOfContents")
    return UnknownElement(kind="unknown")


def _named_style(paragraph: api.Paragraph) -> str:
    style = paragraph.paragraph_style
    if style is None or style.named_style_type is None:
        return ""
    return style.named_style_type


def _decode_runs(paragraph: api.Paragraph) -> tuple[Run, ...]:
    """One run per paragraph element; non-text elements become empty runs."""
    runs: list[Run] = []
    for element in paragraph.elements or []:
        if element.text_run is not None:
            text_style = element.text_run.text_style
            link = text_style.link if text_style is not None else None
            runs.append(
                Run(
                    text=element.text_run.content or "",
                    link_url=link.url if link is not None else None,
                )
            )
        elif element.inline_object_element is not None:
            runs.append(
                Run(inline_object_id=element.inline_object_element.inline_object_id)
            )
        else:
            runs.append(Run())
    return tuple(runs)


def _decode_rows(table: api.Table) -> tuple[tuple[TableCell, ...], ...]:
    rows: list[tuple[TableCell, ...]] = []
    for row in table.table_rows or []:
        cells: list[TableCell] = []
        for cell in row.table_cells or []:
            paragraphs = tuple(
                _decode_runs(item.paragraph)
                for item in cell.content or []
                if item.paragraph is not None
            )
            cells.append(TableCell(paragraphs=paragraphs))
        rows.append(tuple(cells))
    return tuple(rows)


def _decode_inline_object(object_id: str, obj: api.InlineObject) -> InlineObject:
    content_uri = None
    props = obj.inline_object_properties
    if props is not None and props.embedded_object is not None:
        image = props.embedded_object.image_properties
        if image is not None:
            content_uri = image.content_uri
    return InlineObject(id=object_id, content_uri=content_uri)
