"""Pair block placing two blocks side by side."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup

from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import is_list, parse_type_name
from njnsmith.core.registry import BlockHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer, PreparedBlock

from ._helpers import add_heading, close_block, closed_choice, open_block


PAIR_ORDERS = ("normal", "reverse")


class PairBlock(BlockHandler):
    name = "pair"
    njn_class = NjnClass.CONTAINER

    def prepare(
        self, renderer: NjnRenderer, type_name: str, node: Mapping[str, Any]
    ) -> PreparedBlock:
        self.check_type(type_name)
        content, block = open_block(renderer, self.name, node)

        order = closed_choice(node, "pair-order", PAIR_ORDERS, label="pair block order")
        if order is not None:
            block["pair_order"] = order

        add_heading(renderer, block, content)

        sections = content.get("section")
        if is_list(sections):
            if len(sections) != 2:
                raise PayloadError(f"pair block requires two items, {len(sections)} present")
            combined: list[PreparedBlock] = []
            with renderer.context.nested():
                for idx, section in enumerate(sections):
                    if not isinstance(section, Mapping):
                        raise PayloadError(
                            f"unsupported pair section structure: {type(section).__name__}"
                        )
                    position = "first" if idx == 0 else "second"
                    section_type = parse_type_name(section) or ""
                    prepared = renderer.prepare_nested_block(
                        section, classes=(position, section_type)
                    )
                    if prepared.redirect:
                        return PreparedBlock(self.name, block, redirect=prepared.redirect)
                    combined.append(prepared)
            if order == "reverse":
                combined.reverse()
            block["section"] = combined

        close_block(renderer, block, content)
        return PreparedBlock(self.name, block)

    def render(self, renderer: NjnRenderer, data: Mapping[str, Any]) -> Markup:
        rendered = dict(data)
        if "section" in data:
            rendered["section"] = [renderer.render_prepared_block(item) for item in data["section"]]
        return super().render(renderer, rendered)


__all__ = ["PAIR_ORDERS", "PairBlock"]
