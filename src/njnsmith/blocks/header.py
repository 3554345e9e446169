"""Header block driving the page heading levels."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup

from njnsmith.core.exceptions import PayloadError
from njnsmith.core.headings import resolve_heading
from njnsmith.core.nodes import is_list, parse_type_name
from njnsmith.core.registry import BlockHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer, PreparedBlock

from ._helpers import add_heading, close_block


class HeaderBlock(BlockHandler):
    """Render a page header.

    The header consumes the ``heading-reset`` and ``heading-level``
    directives, counts itself as a page heading and, unless a reset was
    requested, pushes the blocks that follow one level deeper.
    """

    name = "header"
    njn_class = NjnClass.INLINE

    def prepare(
        self, renderer: NjnRenderer, type_name: str, node: Mapping[str, Any]
    ) -> PreparedBlock:
        self.check_type(type_name)
        content = renderer.prepare_generic_block_content(node)

        ctx = renderer.context
        outcome = resolve_heading(
            node, current_level=ctx.heading_level, heading_count=ctx.heading_count
        )
        ctx.heading_count += 1
        ctx.heading_level = outcome.level

        block = renderer.prepare_generic_block(self.name, node)
        ctx.heading_level = outcome.next_level

        add_heading(renderer, block, content)
        block["nav"] = self._prepare_nav(renderer, content)
        close_block(renderer, block, content, footnotes=False)
        return PreparedBlock(self.name, block)

    def _prepare_nav(self, renderer: NjnRenderer, content: Mapping[str, Any]) -> list[Markup]:
        items = content.get("nav")
        if not is_list(items):
            return []
        nav: list[Markup] = []
        for item in items:
            if not isinstance(item, Mapping):
                continue
            item_type = parse_type_name(item)
            if item_type is None:
                raise PayloadError("heading nav item missing type")
            if item_type != "a":
                raise PayloadError(f"unsupported heading nav item type: {item_type}")
            nav.append(renderer.render_inline_field(item))
        return nav


__all__ = ["HeaderBlock"]
