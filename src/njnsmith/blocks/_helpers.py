"""Shared utilities for block handlers."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import TYPE_CHECKING, Any

from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import is_list, is_true


if TYPE_CHECKING:  # pragma: no cover - typing only
    from njnsmith.core.renderer import NjnRenderer


def closed_choice(
    node: Mapping[str, Any],
    key: str,
    choices: Collection[str],
    *,
    label: str,
    default: str | None = None,
) -> str | None:
    """Return ``node[key]`` lower-cased, rejecting values outside ``choices``."""
    value = node.get(key)
    if not isinstance(value, str):
        return default
    value = value.strip().lower()
    if value not in choices:
        raise PayloadError(f"invalid {label}: {value}")
    return value


def flag(node: Mapping[str, Any], key: str) -> str:
    """Return ``"true"`` or ``"false"`` for a loosely typed boolean attribute."""
    return "true" if is_true(node.get(key)) else "false"


def open_block(
    renderer: NjnRenderer, type_name: str, node: Mapping[str, Any], *, content_required: bool = True
) -> tuple[Mapping[str, Any], dict[str, Any]]:
    """Return the block content and its generic decorations."""
    try:
        content = renderer.prepare_generic_block_content(node)
    except PayloadError:
        if content_required or node.get("content") is not None:
            raise
        content = {}
    block = renderer.prepare_generic_block(type_name, node)
    return content, block


def add_heading(renderer: NjnRenderer, block: dict[str, Any], content: Mapping[str, Any]) -> None:
    heading = renderer.prepare_block_header(content)
    if heading is not None:
        block["heading"] = heading


def add_sections(renderer: NjnRenderer, block: dict[str, Any], content: Mapping[str, Any]) -> None:
    sections = content.get("section")
    if is_list(sections):
        block["section"] = renderer.render_container_fields(sections)


def close_block(
    renderer: NjnRenderer,
    block: dict[str, Any],
    content: Mapping[str, Any],
    *,
    footnotes: bool = True,
) -> dict[str, Any]:
    """Collect the block footnotes, then its footer."""
    if footnotes:
        block["footnotes"] = renderer.prepare_footnotes(block["block_index"])
    footer = renderer.prepare_block_footer(content)
    if footer is not None:
        block["footer"] = footer
    return block


__all__ = ["add_heading", "add_sections", "close_block", "closed_choice", "flag", "open_block"]
