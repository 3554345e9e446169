"""Anchor field."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup

from njnsmith.core.attributes import finalize_field_data
from njnsmith.core.registry import FieldHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer

from ._helpers import field_attributes, is_decorated


class AnchorField(FieldHandler):
    """Render ``{"type": "a", "href": ..., "text": [...]}``.

    Anchor text accepts any inline field except another anchor.
    """

    names = ("a",)
    njn_class = NjnClass.INLINE

    def allows_child(self, child_name: str, child_class: NjnClass) -> bool:
        if child_name == "a":
            return False
        return super().allows_child(child_name, child_class)

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        href = field.get("href")
        data: dict[str, Any] = {"type": "a", "href": href if isinstance(href, str) else "#"}

        text = Markup("")
        if "text" in field:
            text = renderer.render_inline_field_text(field, parent=self)
        data["text"] = text if text else Markup(data["href"])

        decorated = is_decorated(field)
        data["decorated"] = decorated
        data["attributes"] = field_attributes(field, "decorated" if decorated else "")
        return finalize_field_data(
            data, field, skip=("type", "href", "text", "decorated", "attributes")
        )


__all__ = ["AnchorField"]
