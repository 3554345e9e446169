"""Image block wrapping a picture field with framing options."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from njnsmith.core.exceptions import PayloadError
from njnsmith.core.registry import BlockHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer, PreparedBlock

from ._helpers import add_heading, close_block, closed_choice, open_block


IMAGE_CONSTRAINTS = ("width", "height")
IMAGE_FITTINGS = ("cover", "fill", "contain", "none", "scale-down")
IMAGE_POSITIONS = (
    "center",
    "top",
    "top-left",
    "left",
    "bottom-left",
    "bottom",
    "bottom-right",
    "right",
    "top-right",
)
IMAGE_SIZES = ("sliver", "thin", "banner", "normal", "tall", "huge", "actual")


class ImageBlock(BlockHandler):
    name = "image"
    njn_class = NjnClass.INLINE

    def prepare(
        self, renderer: NjnRenderer, type_name: str, node: Mapping[str, Any]
    ) -> PreparedBlock:
        self.check_type(type_name)
        content, block = open_block(renderer, self.name, node)

        constraint = closed_choice(
            node, "constraint", IMAGE_CONSTRAINTS, label="image block constraint"
        )
        if constraint is not None:
            block["constraint"] = constraint
        block["fitting"] = closed_choice(
            node, "fitting", IMAGE_FITTINGS, label="image block fitting", default="cover"
        )
        block["position"] = closed_choice(
            node, "position", IMAGE_POSITIONS, label="image block position", default="center"
        )
        block["size"] = closed_choice(
            node, "size", IMAGE_SIZES, label="image block size", default="normal"
        )

        add_heading(renderer, block, content)

        picture = content.get("picture")
        if not isinstance(picture, Mapping):
            raise PayloadError("image block missing picture")
        block["picture"] = renderer.render_container_field(picture)

        close_block(renderer, block, content, footnotes=False)
        return PreparedBlock(self.name, block)


__all__ = [
    "IMAGE_CONSTRAINTS",
    "IMAGE_FITTINGS",
    "IMAGE_POSITIONS",
    "IMAGE_SIZES",
    "ImageBlock",
]
