"""Node model helpers for the untyped NJN document tree.

NJN documents are plain JSON values: scalars, ordered lists, and objects keyed
by strings. The renderer keeps that shape for the payload handed to handlers
but resolves every object's type name once, through :func:`parse_type_name`,
and exposes a typed :class:`BlockNode` view where block-level attributes are
needed (dispatching, table of contents, indexing).
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
import re
from typing import Any, TypeAlias

from slugify import slugify


Scalar: TypeAlias = str | int | float | bool | None
Node: TypeAlias = Scalar | Sequence["Node"] | Mapping[str, "Node"]
NodeMap: TypeAlias = Mapping[str, Any]
NodeList: TypeAlias = Sequence[Any]

TRUE_STRINGS = frozenset({"true", "yes", "on", "1", "t", "y"})

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_SEPARATORS = re.compile(r"[\s_\-.]+")


def to_kebab(name: str) -> str:
    """Normalise ``linkList``, ``Link_List`` or ``link list`` to ``link-list``."""
    text = _ACRONYM_BOUNDARY.sub(r"\1-\2", name.strip())
    text = _CAMEL_BOUNDARY.sub(r"\1-\2", text)
    text = _SEPARATORS.sub("-", text)
    return text.strip("-").lower()


def to_snake(name: str) -> str:
    """Return the snake_case key used for template data."""
    return to_kebab(name).replace("-", "_")


def is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def parse_type_name(data: Any) -> str | None:
    """Return the kebab-cased ``type`` (or ``Type``) of an object node."""
    if not isinstance(data, Mapping):
        return None
    for key in ("type", "Type"):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return to_kebab(value)
    return None


def is_true(value: Any) -> bool:
    """Interpret loosely typed truthy values found in NJN payloads."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value > 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        try:
            return int(text) > 0
        except ValueError:
            return False
    return False


def normalise_tag(value: str) -> str:
    """Return the anchor-safe form of a block tag."""
    return slugify(value) or value


def default_tag(type_name: str, ordinal: int) -> str:
    return f"{type_name}-{ordinal}"


def header_title(content: Any) -> str:
    """Join the plain-text parts of a ``content.header`` payload."""
    if not isinstance(content, Mapping):
        return ""
    header = content.get("header")
    if isinstance(header, str):
        return header.strip()
    parts: list[str] = []
    if is_list(header):
        for item in header:
            if isinstance(item, str):
                parts.append(item)
    return " ".join(parts).strip()


NESTED_BLOCK_KEYS: Mapping[str, tuple[str, ...]] = {
    "carousel": ("section",),
    "pair": ("section",),
    "sidebar": ("blocks", "aside"),
}
"""Content keys holding nested blocks, per block type."""


def nested_block_lists(type_name: str | None, data: Any) -> list[list[Any]]:
    """Return the lists of nested blocks carried by a block node."""
    if type_name not in NESTED_BLOCK_KEYS or not isinstance(data, Mapping):
        return []
    content = data.get("content")
    if not isinstance(content, Mapping):
        return []
    lists: list[list[Any]] = []
    for key in NESTED_BLOCK_KEYS[type_name]:
        value = content.get(key)
        if is_list(value):
            lists.append(list(value))
    return lists


def iter_blocks(document: Any, *, prune: Callable[[Any], bool] | None = None) -> Iterator[Any]:
    """Yield every value found at a block position, in document order.

    Top-level lists are flattened and every other value there is a block,
    malformed ones included. Container blocks yield the object nodes of
    their nested block lists after themselves, unless ``prune`` returns true
    for the container.
    """
    if is_list(document):
        for item in document:
            yield from iter_blocks(item, prune=prune)
        return
    yield document
    if prune is not None and prune(document):
        return
    for nested in nested_block_lists(parse_type_name(document), document):
        for item in nested:
            if isinstance(item, Mapping):
                yield from iter_blocks(item, prune=prune)


def contains_header(document: Any) -> bool:
    return any(parse_type_name(node) == "header" for node in iter_blocks(document))


@dataclass(frozen=True, slots=True)
class BlockNode:
    """Typed view over an object node carrying a block ``type``."""

    type_name: str
    raw: NodeMap = field(repr=False)
    content: NodeMap | None = field(default=None, repr=False)
    tag: str | None = None
    title: str = ""

    @classmethod
    def from_node(cls, data: Any) -> BlockNode | None:
        """Build a view for ``data`` or return ``None`` when it is not typed."""
        type_name = parse_type_name(data)
        if type_name is None:
            return None
        content = data.get("content")
        tag_value = data.get("tag")
        tag: str | None = None
        if isinstance(tag_value, (str, int, float)) and not isinstance(tag_value, bool):
            tag = normalise_tag(str(tag_value)) or None
        return cls(
            type_name=type_name,
            raw=data,
            content=content if isinstance(content, Mapping) else None,
            tag=tag,
            title=header_title(content),
        )


__all__ = [
    "BlockNode",
    "Node",
    "NodeList",
    "NodeMap",
    "NESTED_BLOCK_KEYS",
    "Scalar",
    "contains_header",
    "default_tag",
    "header_title",
    "is_list",
    "is_true",
    "iter_blocks",
    "nested_block_lists",
    "normalise_tag",
    "parse_type_name",
    "to_kebab",
    "to_snake",
]
