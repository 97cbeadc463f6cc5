"""Builders mapping one classified source element to RichText nodes.

Fidelity limits:
- headings keep only the text of their first run
- table cells keep only the first run of their first paragraph
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from gdocimport.errors import AssetFetchError
from gdocimport.richtext import (
    Cell,
    Embed,
    InlineNode,
    Link,
    Paragraph,
    Row,
    Table,
    Text,
    Title,
)

if TYPE_CHECKING:
    from gdocimport.assets import AssetResolver
    from gdocimport.source import (
        HeadingElement,
        ImageElement,
        InlineObject,
        ParagraphElement,
        Run,
        TableCell,
        TableElement,
    )

EMBED_HREF_SCHEME = "ezcontent://"
EMBED_VIEW = "embed"
EMBED_IMAGE_CLASS = "ez-embed-type-image"
EMBED_IMAGE_SIZE = "large"

# Docs writes a soft line break (Shift+Enter) as U+000B.
SOFT_LINE_BREAK = "\x0b"

# Characters outside the XML 1.0 Char production.
_XML_ILLEGAL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def clean_text(text: str) -> str:
    """Trim run text and make it legal XML character data.

    Soft line breaks become spaces; other control characters are dropped.
    """
    text = text.replace(SOFT_LINE_BREAK, " ")
    return _XML_ILLEGAL_RE.sub("", text).strip()


def _first_run_text(runs: tuple[Run, ...]) -> str:
    return clean_text(runs[0].text) if runs else ""


def build_heading(element: HeadingElement) -> Title:
    return Title(level=element.level, text=_first_run_text(element.runs))


def build_paragraph(element: ParagraphElement) -> Paragraph | None:
    """Build a paragraph, or None if every run is empty.

    Linked runs become links whose text is padded with one space on each
    side; other runs become plain text when non-blank.
    """
    children: list[InlineNode] = []
    for run in element.runs:
        text = clean_text(run.text)
        if run.link_url is not None:
            href = _XML_ILLEGAL_RE.sub("", run.link_url)
            children.append(Link(content=f" {text} ", href=href))
        elif text:
            children.append(Text(text))
    if not children:
        return None
    return Paragraph(tuple(children))


def _cell_text(cell: TableCell) -> str:
    if not cell.paragraphs:
        return ""
    return _first_run_text(cell.paragraphs[0])


def build_table(element: TableElement) -> Table:
    rows = []
    for row in element.rows:
        cells = []
        for cell in row:
            text = _cell_text(cell)
            cells.append(Cell(Paragraph((Text(text),) if text else ())))
        rows.append(Row(tuple(cells)))
    return Table(tuple(rows))


async def build_image(
    element: ImageElement,
    inline_objects: dict[str, InlineObject],
    resolver: AssetResolver,
) -> Embed:
    """Build an image embed, storing the image first if needed.

    Raises:
        AssetFetchError: If the image cannot be fetched or is not in the document
        RepositoryError: If storing the image fails
    """
    inline_object = inline_objects.get(element.inline_object_id)
    if inline_object is None:
        raise AssetFetchError(
            element.inline_object_id, "inline object missing from document"
        )
    content = await resolver.resolve(inline_object.id, inline_object.content_uri)
    return Embed(
        href=f"{EMBED_HREF_SCHEME}{content.id}",
        view=EMBED_VIEW,
        css_class=EMBED_IMAGE_CLASS,
        config=(("size", EMBED_IMAGE_SIZE),),
    )
