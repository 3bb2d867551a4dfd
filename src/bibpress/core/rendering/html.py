"""Linked-list HTML document grouped by publication year."""

from __future__ import annotations

from collections.abc import Sequence
from xml.etree import ElementTree

from bibpress.core.bibliography import BibliographyEntry, project_entry


INDENT = "    "

STYLESHEET = """
li {
    margin-right: 3%;
    margin-left: 2%;
    margin-bottom: 8px;
    font-size: 1.2em;
    font-family: 'Roboto', sans-serif;
}
p {
    padding-left: 16px;
    padding-right: 16px;
    margin-right: 3%;
    padding-top: 8px;
    padding-bottom: 8px;
    background-color: #ebecf4;
    font-size: 1.2em;
    font-family: 'Roboto', sans-serif;
}
""".strip()


def _append_items(ordered_list: ElementTree.Element, entries: Sequence[BibliographyEntry]) -> None:
    previous_year: str | None = None
    for entry in entries:
        author, title, url, year = project_entry(entry)
        if year != previous_year:
            header = ElementTree.SubElement(ordered_list, "p")
            header.text = year
            previous_year = year

        item = ElementTree.SubElement(ordered_list, "li")
        item.text = f" {author} "
        link = ElementTree.SubElement(item, "a", href=url)
        link.text = title
        link.tail = f" {year}"


def build_html_tree(entries: Sequence[BibliographyEntry], *, title: str) -> ElementTree.Element:
    """Build the ``<html>`` element for the already ordered *entries*.

    A ``<p>`` year header precedes the first entry of every run of equal years.
    """
    root = ElementTree.Element("html")
    head = ElementTree.SubElement(root, "head")
    style = ElementTree.SubElement(head, "style")
    style.text = STYLESHEET
    title_element = ElementTree.SubElement(head, "title")
    title_element.text = title

    body = ElementTree.SubElement(root, "body")
    main = ElementTree.SubElement(body, "main")
    ordered_list = ElementTree.SubElement(main, "ol")
    _append_items(ordered_list, entries)
    return root


def render_html(entries: Sequence[BibliographyEntry], *, title: str = "") -> bytes:
    """Serialise the linked-list document as indented UTF-8 XML."""
    root = build_html_tree(entries, title=title)
    ElementTree.indent(root, space=INDENT)
    payload = ElementTree.tostring(
        root,
        encoding="utf-8",
        method="xml",
        xml_declaration=True,
        short_empty_elements=False,
    )
    return payload + b"\n"


__all__ = ["STYLESHEET", "build_html_tree", "render_html"]
