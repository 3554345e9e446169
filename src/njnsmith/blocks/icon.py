"""Icon block: a single glyph with optional link and caption."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup

from njnsmith.core.attributes import finalize_field_attributes, parse_field_attributes
from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import is_list
from njnsmith.core.registry import BlockHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer, PreparedBlock

from ._helpers import add_heading, close_block, closed_choice, open_block


ICON_ALIGNMENTS = ("left", "center", "right")


class IconBlock(BlockHandler):
    name = "icon"
    njn_class = NjnClass.INLINE

    def prepare(
        self, renderer: NjnRenderer, type_name: str, node: Mapping[str, Any]
    ) -> PreparedBlock:
        self.check_type(type_name)
        content, block = open_block(renderer, self.name, node)
        add_heading(renderer, block, content)

        icon_map = content.get("icon")
        if isinstance(icon_map, Mapping):
            block["icon"] = self._prepare_icon(icon_map)

        close_block(renderer, block, content, footnotes=False)
        return PreparedBlock(self.name, block)

    def _prepare_icon(self, icon_map: Mapping[str, Any]) -> dict[str, Any]:
        icon: dict[str, Any] = {
            "align": closed_choice(
                icon_map,
                "align",
                ICON_ALIGNMENTS,
                label="icon block icon alignment",
                default="center",
            )
        }
        for key in ("href", "target", "caption"):
            if isinstance(icon_map.get(key), str):
                icon[key] = Markup(icon_map[key]) if key == "caption" else icon_map[key]

        attrs, _, _ = parse_field_attributes(icon_map)
        icon["attributes"] = finalize_field_attributes(attrs)

        if "class" not in icon_map:
            raise PayloadError("icon block missing icon class")
        classes = icon_map["class"]
        if isinstance(classes, str):
            icon["class"] = classes
        elif is_list(classes):
            for item in classes:
                if not isinstance(item, str):
                    raise PayloadError(
                        f"invalid icon block icon class type: {type(item).__name__}"
                    )
            icon["class"] = " ".join(classes)
        else:
            raise PayloadError(f"invalid icon block icon class type: {type(classes).__name__}")

        name = icon_map.get("name")
        if not isinstance(name, str):
            raise PayloadError("icon block missing icon name")
        icon["name"] = name
        return icon


__all__ = ["ICON_ALIGNMENTS", "IconBlock"]
