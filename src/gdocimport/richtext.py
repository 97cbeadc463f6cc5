"""In-memory RichText document and its DocBook XML serialization.

The tree mirrors the eZ Platform RichText internal format:

    <section xmlns="http://docbook.org/ns/docbook" version="5.0-variant ...">
      <title ezxhtml:level="2">Heading</title>
      <para>Text <link xlink:href="https://...">link</link></para>
      <ezembed xlink:href="ezcontent://57" view="embed" ezxhtml:class="...">
        <ezconfig><ezvalue key="size">large</ezvalue></ezconfig>
      </ezembed>
      <informaltable border="1" width="100%">
        <tbody><tr><td><para>a</para></td></tr></tbody>
      </informaltable>
    </section>

Prefixed names are written literally so that all three namespace
declarations appear on the root even when a prefix is unused.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias
from xml.etree.ElementTree import Element, SubElement, tostring

DOCBOOK_NS = "http://docbook.org/ns/docbook"
XLINK_NS = "http://www.w3.org/1999/xlink"
EZXHTML_NS = "http://ez.no/xmlns/ezpublish/docbook/xhtml"
EZCUSTOM_NS = "http://ez.no/xmlns/ezpublish/docbook/custom"
RICHTEXT_VERSION = "5.0-variant ezpublish-1.0"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


# ---------------------------------------------------------------------------
# Inline nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Text:
    content: str


@dataclass(frozen=True)
class Link:
    content: str
    href: str


InlineNode: TypeAlias = Text | Link


# ---------------------------------------------------------------------------
# Block nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Title:
    level: str
    text: str

    def to_element(self, parent: Element) -> Element:
        elem = SubElement(parent, "title")
        elem.set("ezxhtml:level", self.level)
        elem.text = self.text
        return elem


@dataclass(frozen=True)
class Paragraph:
    children: tuple[InlineNode, ...] = ()

    def to_element(self, parent: Element) -> Element:
        elem = SubElement(parent, "para")
        last: Element | None = None
        for child in self.children:
            if isinstance(child, Link):
                last = SubElement(elem, "link")
                last.set("xlink:href", child.href)
                last.text = child.content
            elif last is None:
                elem.text = (elem.text or "") + child.content
            else:
                last.tail = (last.tail or "") + child.content
        return elem


@dataclass(frozen=True)
class Embed:
    """An embedded content object, rendered through the given view."""

    href: str
    view: str
    css_class: str
    config: tuple[tuple[str, str], ...] = ()

    def to_element(self, parent: Element) -> Element:
        elem = SubElement(parent, "ezembed")
        elem.set("xlink:href", self.href)
        elem.set("view", self.view)
        elem.set("ezxhtml:class", self.css_class)
        if self.config:
            config = SubElement(elem, "ezconfig")
            for key, value in self.config:
                entry = SubElement(config, "ezvalue")
                entry.set("key", key)
                entry.text = value
        return elem


@dataclass(frozen=True)
class Cell:
    paragraph: Paragraph


@dataclass(frozen=True)
class Row:
    cells: tuple[Cell, ...] = ()


@dataclass(frozen=True)
class Table:
    rows: tuple[Row, ...] = ()

    def to_element(self, parent: Element) -> Element:
        elem = SubElement(parent, "informaltable")
        elem.set("border", "1")
        elem.set("width", "100%")
        tbody = SubElement(elem, "tbody")
        for row in self.rows:
            tr = SubElement(tbody, "tr")
            for cell in row.cells:
                td = SubElement(tr, "td")
                cell.paragraph.to_element(td)
        return elem


BlockNode: TypeAlias = Title | Paragraph | Embed | Table


@dataclass
class RichTextDocument:
    """Ordered list of block nodes under a single ``section`` root."""

    children: list[BlockNode] = field(default_factory=list)

    def append(self, node: BlockNode) -> None:
        self.children.append(node)

    def to_element(self) -> Element:
        root = Element("section")
        root.set("xmlns", DOCBOOK_NS)
        root.set("xmlns:xlink", XLINK_NS)
        root.set("xmlns:ezxhtml", EZXHTML_NS)
        root.set("xmlns:ezcustom", EZCUSTOM_NS)
        root.set("version", RICHTEXT_VERSION)
        for child in self.children:
            child.to_element(root)
        return root

    def to_xml_string(self) -> str:
        return XML_DECLARATION + tostring(self.to_element(), encoding="unicode") + "\n"
