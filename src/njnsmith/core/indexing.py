"""Search-text extraction from NJN documents."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
import logging
import re
from typing import Any

from bs4 import BeautifulSoup

from .decode import decode_document
from .exceptions import PayloadError
from .nodes import is_list, parse_type_name


logger = logging.getLogger(__name__)

_TEMPLATE_MARKERS = re.compile(r"\{\{.*?\}\}|\{%.*?%\}|\{#.*?#\}", re.DOTALL)
_SHORTCODE_MARKERS = re.compile(r"\[\[?/?[a-zA-Z][^\]]*\]\]?")
_WHITESPACE = re.compile(r"\s+")


@dataclass(slots=True)
class IndexedDocument:
    """Text collected from a document for full-text search."""

    headings: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    footnotes: list[str] = field(default_factory=list)
    contents: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "headings": list(self.headings),
            "links": list(self.links),
            "footnotes": list(self.footnotes),
            "contents": self.contents,
        }


def _append(contents: str, text: str) -> str:
    if not text:
        return contents
    if not contents:
        return text
    return f"{contents} {text}"


def strip_markup(text: str) -> str:
    """Remove template markers, shortcodes and HTML tags from ``text``."""
    text = _TEMPLATE_MARKERS.sub("", text)
    text = _SHORTCODE_MARKERS.sub("", text)
    text = BeautifulSoup(text, "html.parser").get_text(" ")
    return _WHITESPACE.sub(" ", text).strip()


class _Indexer:
    def __init__(self) -> None:
        self.document = IndexedDocument()

    def value(self, value: Any) -> str:
        if is_list(value):
            return self.walk(value)
        if isinstance(value, str):
            return value
        if isinstance(value, Mapping):
            return self.parse(value)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise PayloadError(f"unsupported structure: {type(value).__name__}")

    def walk(self, items: Sequence[Any]) -> str:
        contents = ""
        for item in items:
            if isinstance(item, str):
                contents = _append(contents, item)
            elif isinstance(item, Mapping):
                contents = _append(contents, self.parse(item))
            elif is_list(item):
                contents = _append(contents, self.walk(item))
            else:
                raise PayloadError(f"invalid data structure: {type(item).__name__}")
        return contents

    def _content_list(self, content: Mapping[str, Any], key: str) -> str:
        if key not in content:
            return ""
        value = content[key]
        if not is_list(value):
            raise PayloadError(f"invalid {key} structure: {type(value).__name__}")
        return self.walk(value)

    def parse(self, data: Mapping[str, Any]) -> str:
        type_name = parse_type_name(data)
        if type_name is None:
            return ""

        if type_name == "footnote":
            if "text" not in data:
                raise PayloadError("footnote text not found")
            text = self.value(data["text"])
            if "note" in data:
                note = self.value(data["note"])
                self.document.footnotes.append(f"{text}: {note}")
            return text

        if type_name == "a":
            if "text" not in data:
                raise PayloadError("anchor text not found")
            text = self.value(data["text"])
            self.document.links.append(text)
            return text

        link_text = data.get("link-text")
        if isinstance(link_text, str):
            self.document.links.append(link_text)

        contents = ""
        content = data.get("content")
        if isinstance(content, Mapping):
            header = self._content_list(content, "header")
            if header:
                self.document.headings.append(strip_markup(header))
            for key in ("section", "footer", "blocks", "aside"):
                contents = _append(contents, self._content_list(content, key))
        elif content is not None:
            raise PayloadError(f"invalid content structure: {type(content).__name__}")
        elif "text" in data:
            contents = _append(contents, self.value(data["text"]))
        return contents


def index_document(document: str | bytes | Any) -> IndexedDocument:
    """Collect headings, links, footnotes and plain contents of a document."""
    if isinstance(document, (str, bytes, bytearray)):
        document = decode_document(document)
    indexer = _Indexer()
    contents = indexer.value(document)
    indexer.document.contents = strip_markup(contents)
    logger.debug(
        "indexed njn document: %d headings, %d links, %d footnotes",
        len(indexer.document.headings),
        len(indexer.document.links),
        len(indexer.document.footnotes),
    )
    return indexer.document


__all__ = ["IndexedDocument", "index_document", "strip_markup"]
