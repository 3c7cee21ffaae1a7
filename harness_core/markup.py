"""Tolerant markup index built on the stdlib HTML parser.

`html.parser` never raises on unbalanced or truncated input, which is what the
structural checks need: a missing tag is a fail verdict, never an error.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Dict, List, Optional, Tuple

# Elements an HTML5 parser synthesizes even when the source omits them.
IMPLIED_TAGS: Tuple[str, ...] = ("html", "head", "body")

_VOID = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
}


@dataclass
class Element:
    tag: str
    attrs: Dict[str, Optional[str]]
    text_chunks: List[str] = field(default_factory=list)

    @property
    def id(self) -> Optional[str]:
        return self.attrs.get("id")

    @property
    def classes(self) -> List[str]:
        return [c for c in str(self.attrs.get("class") or "").split() if c]

    @property
    def text(self) -> str:
        return "".join(self.text_chunks).strip()

    def has_attr(self, name: str) -> bool:
        return name.lower() in self.attrs


class _P(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.elements: List[Element] = []
        self._open: List[Element] = []

    def handle_starttag(self, tag, attrs):
        el = Element(tag=tag.lower(), attrs={k.lower(): v for k, v in attrs})
        self.elements.append(el)
        if el.tag not in _VOID:
            self._open.append(el)

    def handle_startendtag(self, tag, attrs):
        self.elements.append(Element(tag=tag.lower(), attrs={k.lower(): v for k, v in attrs}))

    def handle_endtag(self, tag):
        tag = tag.lower()
        for idx in range(len(self._open) - 1, -1, -1):
            if self._open[idx].tag == tag:
                del self._open[idx:]
                return

    def handle_data(self, data):
        if self._open:
            self._open[-1].text_chunks.append(data)


class MarkupIndex:
    """Parsed view of a markup buffer: elements by tag and by id."""

    def __init__(self, markup: str) -> None:
        parser = _P()
        parser.feed(markup or "")
        parser.close()
        self.elements: List[Element] = parser.elements

    def by_tag(self, tag: str) -> List[Element]:
        tag = tag.lower()
        return [el for el in self.elements if el.tag == tag]

    def has_tag(self, tag: str) -> bool:
        return tag.lower() in IMPLIED_TAGS or bool(self.by_tag(tag))

    def by_id(self, element_id: str) -> Optional[Element]:
        for el in self.elements:
            if el.id == element_id:
                return el
        return None

    def body(self) -> Optional[Element]:
        found = self.by_tag("body")
        return found[0] if found else None
