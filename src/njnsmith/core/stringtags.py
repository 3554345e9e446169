"""String-tag parsing for markup embedded in plain NJN text values."""

from __future__ import annotations

from collections.abc import Iterable
from html import escape
import logging
from typing import Any, Protocol, runtime_checkable

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, NavigableString, Tag


logger = logging.getLogger(__name__)

DEFAULT_STRING_TAGS: tuple[str, ...] = (
    "b",
    "del",
    "em",
    "i",
    "ins",
    "kbd",
    "mark",
    "q",
    "s",
    "small",
    "strong",
    "sub",
    "sup",
    "u",
    "var",
    "code",
)


@runtime_checkable
class ShortcodeTranslator(Protocol):
    """Collaborator expanding shortcodes found in raw text fragments."""

    def translate(self, text: str) -> str: ...


class PassthroughShortcodes:
    """Translator returning text unchanged."""

    def translate(self, text: str) -> str:
        return text


def _append_text(items: list[Any], text: str) -> None:
    if items and isinstance(items[-1], str):
        items[-1] = items[-1] + text
    else:
        items.append(text)


def _start_tag(tag: Tag) -> str:
    parts = [tag.name]
    for key, value in tag.attrs.items():
        if isinstance(value, list):
            value = " ".join(value)
        parts.append(f'{key}="{escape(str(value), quote=True)}"')
    return "<" + " ".join(parts) + ">"


def _serialise(items: Iterable[Any]) -> str:
    text = ""
    for item in items:
        if isinstance(item, str):
            text += item
        elif isinstance(item, dict):
            name = item.get("type", "span")
            text += f"<{name}>{_serialise(item.get('text', []))}</{name}>"
    return text


def prepare_string_tags(
    text: str,
    string_tags: Iterable[str] = DEFAULT_STRING_TAGS,
    shortcodes: ShortcodeTranslator | None = None,
) -> list[Any]:
    """Split ``text`` into plain strings and inline field nodes.

    Elements named in ``string_tags`` become ``{"type": name, "text": [...]}``
    nodes, any other element is kept as literal markup. Text fragments pass
    through the shortcode translator before they are stored.
    """
    allowed = frozenset(string_tags)
    translator = shortcodes or PassthroughShortcodes()
    soup = BeautifulSoup(text, "html.parser")

    def walk(node: Tag) -> list[Any]:
        items: list[Any] = []
        for child in node.children:
            if isinstance(child, (Comment, Declaration, Doctype)):
                continue
            if isinstance(child, NavigableString):
                _append_text(items, translator.translate(escape(str(child), quote=False)))
            elif isinstance(child, Tag):
                if child.name in allowed:
                    items.append({"type": child.name, "text": walk(child)})
                elif child.can_be_empty_element and not child.contents:
                    _append_text(items, _start_tag(child))
                else:
                    inner = _serialise(walk(child))
                    _append_text(items, f"{_start_tag(child)}{inner}</{child.name}>")
        return items

    prepared = walk(soup)
    logger.debug("prepared %d string tag fragments", len(prepared))
    return prepared


__all__ = [
    "DEFAULT_STRING_TAGS",
    "PassthroughShortcodes",
    "ShortcodeTranslator",
    "prepare_string_tags",
]
