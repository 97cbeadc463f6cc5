"""Google Docs API types consumed by the importer.

A subset of the Docs API ``Document`` resource: only the members read while
converting a document (body content, paragraph styles, text runs, links,
inline objects and tables). Unlisted members are kept as extras.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Link(BaseModel):
    """A reference to another portion of a document or an external URL resource."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    bookmark_id: str | None = Field(None, alias="bookmarkId")
    heading_id: str | None = Field(None, alias="headingId")
    tab_id: str | None = Field(None, alias="tabId")
    url: str | None = Field(None)


class TextStyle(BaseModel):
    """Represents the styling that can be applied to text."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    link: Link | None = Field(None)


class TextRun(BaseModel):
    """A run of text that all has the same styling."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    content: str | None = Field(None)
    text_style: TextStyle | None = Field(None, alias="textStyle")


class InlineObjectElement(BaseModel):
    """A ParagraphElement that contains an InlineObject."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    inline_object_id: str | None = Field(None, alias="inlineObjectId")
    text_style: TextStyle | None = Field(None, alias="textStyle")


class ParagraphElement(BaseModel):
    """A ParagraphElement describes content within a Paragraph."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    end_index: int | None = Field(None, alias="endIndex")
    inline_object_element: InlineObjectElement | None = Field(
        None, alias="inlineObjectElement"
    )
    start_index: int | None = Field(None, alias="startIndex")
    text_run: TextRun | None = Field(None, alias="textRun")


class ParagraphStyle(BaseModel):
    """Styles that apply to a whole paragraph."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    heading_id: str | None = Field(None, alias="headingId")
    # Plain string: heading suffixes are passed through without validation.
    named_style_type: str | None = Field(None, alias="namedStyleType")


class Paragraph(BaseModel):
    """A StructuralElement representing a paragraph."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    elements: list[ParagraphElement] | None = Field(None)
    paragraph_style: ParagraphStyle | None = Field(None, alias="paragraphStyle")


class TableCell(BaseModel):
    """The contents and style of a cell in a Table."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    content: list[StructuralElement] | None = Field(None)
    end_index: int | None = Field(None, alias="endIndex")
    start_index: int | None = Field(None, alias="startIndex")


class TableRow(BaseModel):
    """The contents and style of a row in a Table."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    end_index: int | None = Field(None, alias="endIndex")
    start_index: int | None = Field(None, alias="startIndex")
    table_cells: list[TableCell] | None = Field(None, alias="tableCells")


class Table(BaseModel):
    """A StructuralElement representing a table."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    columns: int | None = Field(None)
    rows: int | None = Field(None)
    table_rows: list[TableRow] | None = Field(None, alias="tableRows")


class StructuralElement(BaseModel):
    """A StructuralElement describes content that provides structure to the document."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    end_index: int | None = Field(None, alias="endIndex")
    paragraph: Paragraph | None = Field(None)
    section_break: dict[str, Any] | None = Field(None, alias="sectionBreak")
    start_index: int | None = Field(None, alias="startIndex")
    table: Table | None = Field(None)
    table_of_contents: dict[str, Any] | None = Field(None, alias="tableOfContents")


class Body(BaseModel):
    """The document body."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    content: list[StructuralElement] | None = Field(None)


class ImageProperties(BaseModel):
    """The properties of an image."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    content_uri: str | None = Field(None, alias="contentUri")
    source_uri: str | None = Field(None, alias="sourceUri")


class EmbeddedObject(BaseModel):
    """An embedded object in the document."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    description: str | None = Field(None)
    image_properties: ImageProperties | None = Field(None, alias="imageProperties")
    title: str | None = Field(None)


class InlineObjectProperties(BaseModel):
    """Properties of an InlineObject."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    embedded_object: EmbeddedObject | None = Field(None, alias="embeddedObject")


class InlineObject(BaseModel):
    """An object that appears inline with text, such as an image."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    inline_object_properties: InlineObjectProperties | None = Field(
        None, alias="inlineObjectProperties"
    )
    object_id: str | None = Field(None, alias="objectId")


class DocumentTab(BaseModel):
    """A tab with document contents."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    body: Body | None = Field(None)
    inline_objects: dict[str, InlineObject] | None = Field(None, alias="inlineObjects")


class Tab(BaseModel):
    """A tab in a document."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    child_tabs: list[Tab] | None = Field(None, alias="childTabs")
    document_tab: DocumentTab | None = Field(None, alias="documentTab")


class Document(BaseModel):
    """A Google Docs document."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    body: Body | None = Field(None)
    document_id: str | None = Field(None, alias="documentId")
    inline_objects: dict[str, InlineObject] | None = Field(None, alias="inlineObjects")
    revision_id: str | None = Field(None, alias="revisionId")
    tabs: list[Tab] | None = Field(None)
    title: str | None = Field(None)
