"""Sidebar block: main blocks with an aside column."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from markupsafe import Markup

from njnsmith.core.nodes import is_list
from njnsmith.core.registry import BlockHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer, PreparedBlock

from ._helpers import add_heading, close_block, open_block


class SidebarBlock(BlockHandler):
    """Render a sidebar.

    Aside blocks are prepared one nesting level deeper with the
    ``within_aside`` flag raised, which templates use to tone down styling.
    """

    name = "sidebar"
    njn_class = NjnClass.CONTAINER

    def prepare(
        self, renderer: NjnRenderer, type_name: str, node: Mapping[str, Any]
    ) -> PreparedBlock:
        self.check_type(type_name)
        content, block = open_block(renderer, self.name, node)

        for key in ("side", "stack", "sticky"):
            block[key] = node.get(key)

        add_heading(renderer, block, content)

        if is_list(content.get("blocks")):
            prepared, redirect = self._prepare_list(renderer, content["blocks"])
            if redirect:
                return PreparedBlock(self.name, block, redirect=redirect)
            block["blocks"] = prepared

        if is_list(content.get("aside")):
            with renderer.context.nested(aside=True):
                prepared, redirect = self._prepare_list(renderer, content["aside"])
            if redirect:
                return PreparedBlock(self.name, block, redirect=redirect)
            block["aside"] = prepared

        close_block(renderer, block, content, footnotes=False)
        return PreparedBlock(self.name, block)

    @staticmethod
    def _prepare_list(
        renderer: NjnRenderer, items: Sequence[Any]
    ) -> tuple[list[PreparedBlock], str]:
        prepared: list[PreparedBlock] = []
        for item in items:
            if not isinstance(item, Mapping):
                continue
            result = renderer.prepare_nested_block(item)
            if result.redirect:
                return prepared, result.redirect
            prepared.append(result)
        return prepared, ""

    def render(self, renderer: NjnRenderer, data: Mapping[str, Any]) -> Markup:
        rendered = dict(data)
        for key in ("blocks", "aside"):
            if key in data:
                rendered[key] = [renderer.render_prepared_block(item) for item in data[key]]
        return super().render(renderer, rendered)


__all__ = ["SidebarBlock"]
