"""Interchangeable ways of editing merged HTML and sitemap markup.

Two strategies sit behind :class:`MarkupStrategy`:

* :class:`TextualStrategy` performs exact substring replacement and so is
  sensitive to whitespace and attribute ordering in the rendered output.
* :class:`StructuralStrategy` parses HTML with BeautifulSoup and sitemaps with
  ``xml.etree.ElementTree`` and edits the resulting trees.

Every operation returns its input unchanged when the marker or element it
targets is missing.
"""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ
import xml.etree.ElementTree as ET
from html import escape

from bs4 import BeautifulSoup

from devlog_pages._constants import NAV_CLOSE_MARKER, URLSET_CLOSE_MARKER

if typ.TYPE_CHECKING:
    from devlog_pages.config import LinkSwap

URL_ENTRY_PATTERN = re.compile(r"<url>[\s\S]*?</url>")
TITLE_PATTERN = re.compile(r"<title>[^<]*</title>")
ENTRY_INDENT = "  "


class MarkupStrategy(typ.Protocol):
    """Operations the sitemap reconciler and content rewriter rely on."""

    name: str

    def inject_nav_link(self, html: str, *, href: str, label: str) -> str:
        """Append a link to the first navigation block unless already present."""
        ...

    def retitle(self, html: str, title: str) -> str:
        """Replace the text of the document title."""
        ...

    def swap_link(self, html: str, swap: LinkSwap) -> str:
        """Replace the first old link described by ``swap`` with the new one."""
        ...

    def extract_sitemap_entries(self, xml: str) -> list[str]:
        """Return every ``<url>`` entry of ``xml`` as a string fragment."""
        ...

    def splice_sitemap_entries(self, xml: str, entries: cabc.Sequence[str]) -> str:
        """Insert ``entries`` just before the closing ``</urlset>``."""
        ...


class TextualStrategy:
    """Rewrite markup with exact substring replacement."""

    name = "textual"

    def inject_nav_link(self, html: str, *, href: str, label: str) -> str:
        close = html.find(NAV_CLOSE_MARKER)
        if close < 0:
            return html
        link = f'<a href="{href}">{label}</a>'
        head = html[:close]
        nav_start = head.rfind("<nav")
        if link in head[max(nav_start, 0) :]:
            return html
        return html.replace(
            NAV_CLOSE_MARKER, f"          {link}\n      {NAV_CLOSE_MARKER}", 1
        )

    def retitle(self, html: str, title: str) -> str:
        replacement = f"<title>{escape(title, quote=False)}</title>"
        return TITLE_PATTERN.sub(lambda _match: replacement, html, count=1)

    def swap_link(self, html: str, swap: LinkSwap) -> str:
        return html.replace(swap.markup(new=False), swap.markup(new=True), 1)

    def extract_sitemap_entries(self, xml: str) -> list[str]:
        return URL_ENTRY_PATTERN.findall(xml)

    def splice_sitemap_entries(self, xml: str, entries: cabc.Sequence[str]) -> str:
        if not entries or URLSET_CLOSE_MARKER not in xml:
            return xml
        block = "\n".join(
            entry if entry[:1].isspace() else f"{ENTRY_INDENT}{entry}"
            for entry in entries
        )
        return xml.replace(URLSET_CLOSE_MARKER, f"{block}\n{URLSET_CLOSE_MARKER}", 1)


class StructuralStrategy:
    """Rewrite markup by editing parsed document trees."""

    name = "structural"

    def inject_nav_link(self, html: str, *, href: str, label: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        nav = soup.find("nav")
        if nav is None or nav.find("a", href=href) is not None:
            return html
        link = soup.new_tag("a", href=href)
        link.string = label
        nav.append(link)
        return str(soup)

    def retitle(self, html: str, title: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        if soup.title is None or soup.title.get_text() == title:
            return html
        soup.title.string = title
        return str(soup)

    def swap_link(self, html: str, swap: LinkSwap) -> str:
        soup = BeautifulSoup(html, "html.parser")
        for anchor in soup.find_all("a", href=swap.old_href):
            if anchor.get_text(strip=True) == swap.old_label.strip():
                anchor["href"] = swap.new_href
                anchor.string = swap.new_label
                return str(soup)
        return html

    def extract_sitemap_entries(self, xml: str) -> list[str]:
        root = _parse_xml(xml)
        if root is None:
            return []
        namespace = _namespace(root.tag)
        entries: list[str] = []
        for child in root:
            if _local_name(child.tag) != "url":
                continue
            _move_namespace(child, namespace, None)
            entries.append(ET.tostring(child, encoding="unicode").strip())
        return entries

    def splice_sitemap_entries(self, xml: str, entries: cabc.Sequence[str]) -> str:
        root = _parse_xml(xml)
        if root is None or not entries or _local_name(root.tag) != "urlset":
            return xml
        namespace = _namespace(root.tag)
        for entry in entries:
            element = _parse_xml(entry.strip())
            if element is None:
                continue
            _move_namespace(element, None, namespace)
            root.append(element)
        ET.indent(root, space=ENTRY_INDENT)
        body = ET.tostring(root, encoding="unicode", default_namespace=namespace)
        if xml.lstrip().startswith("<?xml"):
            body = f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'
        return f"{body}\n"


def make_strategy(name: str) -> MarkupStrategy:
    """Return the strategy registered under ``name``."""
    match name:
        case "textual":
            return TextualStrategy()
        case "structural":
            return StructuralStrategy()
        case _:
            msg = f"Unknown rewrite strategy {name!r}."
            raise ValueError(msg)


def _parse_xml(text: str) -> ET.Element | None:
    """Parse ``text`` as XML, returning None when it is not well formed."""
    try:
        return ET.fromstring(text)
    except ET.ParseError:
        return None


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _namespace(tag: str) -> str | None:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def _move_namespace(
    element: ET.Element, source: str | None, target: str | None
) -> None:
    """Retag nodes under ``element`` from ``source`` into ``target``.

    ``None`` stands for the empty namespace. Nodes in any other namespace,
    such as sitemap image extensions, keep their tags.
    """
    if source == target:
        return
    for node in element.iter():
        if _namespace(node.tag) == source:
            local = _local_name(node.tag)
            node.tag = f"{{{target}}}{local}" if target else local


__all__ = [
    "MarkupStrategy",
    "StructuralStrategy",
    "TextualStrategy",
    "make_strategy",
]
