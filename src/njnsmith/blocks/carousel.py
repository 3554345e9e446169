"""Carousel block cycling through card blocks."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup

from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import is_list, parse_type_name
from njnsmith.core.registry import BlockHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer, PreparedBlock

from ._helpers import add_heading, close_block, closed_choice, open_block


CARD_GAPS = ("standard",)
NAV_CTRL_TYPES = ("data", "icon")
NAV_CTRL_STYLES = ("chevron", "arrow", "caret", "chevron-circle", "arrow-circle")
MAX_BOOKENDS = 2


def _parse_bookends(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise PayloadError("unsupported bookends structure: bool")
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    raise PayloadError(f"unsupported bookends structure: {type(value).__name__}")


class CarouselBlock(BlockHandler):
    """Render a carousel.

    Cards are prepared one nesting level deeper and each records the index of
    its neighbours, wrapping around at both ends.
    """

    name = "carousel"
    njn_class = NjnClass.CONTAINER

    def prepare(
        self, renderer: NjnRenderer, type_name: str, node: Mapping[str, Any]
    ) -> PreparedBlock:
        self.check_type(type_name)
        content, block = open_block(renderer, self.name, node)

        for key, choices in (
            ("card-gap", CARD_GAPS),
            ("nav-ctrl-type", NAV_CTRL_TYPES),
            ("nav-ctrl-style", NAV_CTRL_STYLES),
        ):
            value = closed_choice(node, key, choices, label=key)
            if value is not None:
                block[key.replace("-", "_")] = value

        add_heading(renderer, block, content)

        cards: list[PreparedBlock] = []
        sections = content.get("section")
        if is_list(sections):
            with renderer.context.nested():
                for section in sections:
                    if not isinstance(section, Mapping):
                        continue
                    section_type = parse_type_name(section)
                    if section_type != "card":
                        raise PayloadError(f"carousel item is not a card: {section_type}")
                    card = renderer.prepare_nested_block(section)
                    if card.redirect:
                        return PreparedBlock(self.name, block, redirect=card.redirect)
                    card.data["card_index"] = len(cards)
                    cards.append(card)

        if not cards:
            raise PayloadError("at least one card is required")

        bookends = _parse_bookends(node.get("bookends"))
        if bookends > MAX_BOOKENDS:
            raise PayloadError(
                f"too many bookends specified ({bookends}), 0-{MAX_BOOKENDS} allowed"
            )
        block["bookends"] = bookends

        count = len(cards)
        for idx, card in enumerate(cards):
            previous_index = (idx - 1) % count
            next_index = (idx + 1) % count
            card.data["previous_card_index"] = previous_index
            card.data["next_card_index"] = next_index
            card.data["previous_card_tag"] = cards[previous_index].data.get("tag")
            card.data["next_card_tag"] = cards[next_index].data.get("tag")

        block["cards"] = cards
        block["last_card"] = count - 1
        close_block(renderer, block, content)
        return PreparedBlock(self.name, block)

    def render(self, renderer: NjnRenderer, data: Mapping[str, Any]) -> Markup:
        rendered = dict(data)
        rendered["cards"] = [renderer.render_prepared_block(card) for card in data["cards"]]
        return super().render(renderer, rendered)


__all__ = ["CarouselBlock"]
