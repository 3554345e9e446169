"""Ordered and unordered list fields."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from njnsmith.core.attributes import finalize_field_data
from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import is_list
from njnsmith.core.registry import FieldHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer


LIST_TAGS = ("ol", "ul")


class ListField(FieldHandler):
    """Render ``{"type": "ul", "list": [...]}``, one inline item per entry."""

    names = LIST_TAGS
    njn_class = NjnClass.CONTAINER
    template = "field/list"

    def __init__(self, names: Iterable[str] | None = None) -> None:
        names = tuple(names or LIST_TAGS)
        for name in names:
            if name not in LIST_TAGS:
                raise PayloadError(f'list field does not support tags named: "{name}"')
        super().__init__(names=names)

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        items = field.get("list")
        if not is_list(items):
            kind = "ordered" if type_name == "ol" else "unordered"
            raise PayloadError(f"{kind} list missing list")
        data: dict[str, Any] = {
            "type": type_name,
            "items": renderer.render_inline_fields(items),
        }
        return finalize_field_data(data, field, skip=("type", "list"))


__all__ = ["LIST_TAGS", "ListField"]
