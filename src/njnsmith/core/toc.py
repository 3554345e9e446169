"""Table of contents assembly.

The builder runs in two passes over the whole document:

1. :func:`walk_headings` flattens the block tree into :class:`TocItem`
   entries, replaying the heading rules live rendering applies so the outline
   and the rendered headings agree on levels and anchors.
2. :func:`nest_headings` groups the flat entries with a single parent
   pointer. Entries deeper than the tracked level become children of the
   previous entry, shallower or equal ones start a new top-level entry.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
import logging
from typing import Any

from markupsafe import Markup

from .headings import promote_level, resolve_heading
from .nodes import BlockNode, contains_header, default_tag, iter_blocks, parse_type_name


logger = logging.getLogger(__name__)

TRANSPARENT_TYPES = frozenset({"carousel", "pair"})


@dataclass(slots=True)
class TocItem:
    """Entry of a table of contents."""

    tag: str
    title: Markup
    level: int = 0
    children: list[TocItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tag": self.tag,
            "title": str(self.title),
            "level": self.level,
            "children": [child.to_dict() for child in self.children],
        }


def walk_headings(
    count: int,
    level: int,
    node: Any,
    *,
    exclude_tag: str | None = None,
    failed: Collection[int] = frozenset(),
    document_has_header: bool | None = None,
) -> tuple[int, int, list[TocItem]]:
    """Flatten ``node`` into heading entries.

    Args:
        count: Number of header blocks already seen.
        level: Running heading level.
        node: Document (or sub-tree) to walk.
        exclude_tag: Tag of the block left out of the entries (the table of
            contents block itself).
        failed: Ids of the block nodes live rendering replaces by an error
            block. Such a node counts as an untitled content block and its
            nested blocks are not walked, as the renderer rolls them back.
        document_has_header: Whether the page holds a header block. Computed
            from ``node`` when omitted.

    Returns:
        The updated ``(count, level)`` accumulators and the flat entry list.
    """
    if document_has_header is None:
        document_has_header = contains_header(node)

    def is_failed(block: Any) -> bool:
        return id(block) in failed

    items: list[TocItem] = []
    ordinal = 0
    for block in iter_blocks(node, prune=is_failed if failed else None):
        ordinal += 1
        type_name = parse_type_name(block)
        is_header = type_name == "header" and not is_failed(block)
        level = promote_level(
            level, count, is_header=is_header, document_has_header=document_has_header
        )
        if type_name is None or is_failed(block):
            continue

        view = BlockNode.from_node(block)
        assert view is not None
        tag = view.tag or default_tag(type_name, ordinal)
        emit = exclude_tag is None or tag != exclude_tag

        if is_header:
            outcome = resolve_heading(block, current_level=level, heading_count=count)
            logger.debug(
                "header found: count=%d, level=%d, tag=%s, title=%s",
                count,
                outcome.level,
                tag,
                view.title,
            )
            if emit and outcome.level > 1:
                items.append(TocItem(tag=tag, title=Markup(view.title), level=outcome.level))
            level = outcome.next_level
            count += 1
        elif type_name in TRANSPARENT_TYPES:
            continue
        elif emit and view.title:
            items.append(TocItem(tag=tag, title=Markup(view.title), level=level))

    return count, level, items


def nest_headings(items: Sequence[TocItem]) -> list[TocItem]:
    """Group flat entries under their preceding, shallower entry.

    Only one parent is tracked: the previous entry. Its level becomes the
    tracked level whichever branch the entry took, so an entry two levels
    below a top-level item still attaches to the entry just before it.
    """
    nested: list[TocItem] = []
    tracked = 1
    last: TocItem | None = None
    for item in items:
        if item.level <= tracked or last is None:
            nested.append(item)
        else:
            last.children.append(item)
        tracked = item.level
        last = item
    return nested


def build_table_of_contents(
    document: Any,
    *,
    exclude_tag: str | None = None,
    self_item: TocItem | None = None,
    failed: Collection[int] = frozenset(),
) -> list[TocItem]:
    """Return the nested outline of ``document``.

    ``self_item`` is prepended ahead of every other top-level entry and the
    entry tagged ``exclude_tag`` (the table of contents block itself) is left
    out. ``failed`` holds the ids of nodes rendered as error blocks, see
    :meth:`NjnRenderer.failed_nodes`.
    """
    _, _, flat = walk_headings(0, 0, document, exclude_tag=exclude_tag, failed=failed)
    items = nest_headings(flat)
    if self_item is not None:
        items.insert(0, self_item)
    return items


__all__ = ["TocItem", "build_table_of_contents", "nest_headings", "walk_headings"]
