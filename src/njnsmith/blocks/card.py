"""Card block: a picture background with heading, sections and footer."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import parse_type_name
from njnsmith.core.registry import BlockHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer, PreparedBlock

from ._helpers import add_heading, add_sections, close_block, open_block


class CardBlock(BlockHandler):
    name = "card"
    njn_class = NjnClass.INLINE

    def prepare(
        self, renderer: NjnRenderer, type_name: str, node: Mapping[str, Any]
    ) -> PreparedBlock:
        self.check_type(type_name)
        content, block = open_block(renderer, self.name, node)

        for key in ("image", "no-image", "layout", "profile-img-src"):
            if key in node:
                block[key.replace("-", "_")] = node[key]

        background = content.get("background")
        if not isinstance(background, Mapping):
            raise PayloadError(f"card block background type: {type(background).__name__}")
        background_type = parse_type_name(background)
        if background_type is None:
            raise PayloadError("card block missing background type")
        if background_type != "picture":
            raise PayloadError(f"card block background is not a picture field: {background_type}")
        block["background"] = renderer.render_container_field(background)

        add_heading(renderer, block, content)
        add_sections(renderer, block, content)
        close_block(renderer, block, content)
        return PreparedBlock(self.name, block)


__all__ = ["CardBlock"]
