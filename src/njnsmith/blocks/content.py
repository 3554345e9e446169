"""General purpose block: heading, container sections, footnotes and footer."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from njnsmith.core.registry import BlockHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer, PreparedBlock

from ._helpers import add_heading, add_sections, close_block, open_block


class ContentBlock(BlockHandler):
    name = "content"
    njn_class = NjnClass.INLINE

    def prepare(
        self, renderer: NjnRenderer, type_name: str, node: Mapping[str, Any]
    ) -> PreparedBlock:
        self.check_type(type_name)
        content, block = open_block(renderer, self.name, node)
        add_heading(renderer, block, content)
        add_sections(renderer, block, content)
        close_block(renderer, block, content)
        return PreparedBlock(self.name, block)


__all__ = ["ContentBlock"]
