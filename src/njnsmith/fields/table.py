"""Table field with ``th`` headings and ``tr``/``td`` body rows."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from markupsafe import Markup

from njnsmith.core.attributes import (
    finalize_field_attributes,
    finalize_field_data,
    parse_field_attributes,
)
from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import is_list, parse_type_name, to_snake
from njnsmith.core.registry import FieldHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer


def _attributes(item: Mapping[str, Any]) -> list[Markup]:
    attrs, _, _ = parse_field_attributes(item)
    return finalize_field_attributes(attrs)


class TableField(FieldHandler):
    names = ("table",)
    njn_class = NjnClass.CONTAINER

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        data: dict[str, Any] = {"type": "table"}
        head = field.get("head")
        if is_list(head):
            data["head"] = self._prepare_head(renderer, head)
        body = field.get("body")
        if is_list(body):
            data["body"] = self._prepare_body(renderer, body)
        return finalize_field_data(data, field, skip=("type", "head", "body", "foot"))

    @staticmethod
    def _prepare_head(renderer: NjnRenderer, items: Sequence[Any]) -> list[dict[str, Any]]:
        headings: list[dict[str, Any]] = []
        for idx, item in enumerate(items):
            if not isinstance(item, Mapping):
                continue
            kind = parse_type_name(item)
            if kind is None:
                continue
            if kind != "th":
                raise PayloadError(f"unsupported table heading type: {kind} [index={idx}]")
            heading: dict[str, Any] = {"type": "th", "attributes": _attributes(item)}
            for key, value in item.items():
                if key in ("type", "attributes"):
                    continue
                values = list(value) if is_list(value) else [value]
                heading[to_snake(key)] = renderer.render_inline_field_list(values)
            headings.append(heading)
        return headings

    @staticmethod
    def _prepare_body(renderer: NjnRenderer, items: Sequence[Any]) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        for idx, item in enumerate(items):
            if not isinstance(item, Mapping):
                continue
            kind = parse_type_name(item)
            if kind is None:
                continue
            if kind != "tr":
                raise PayloadError(f"unsupported table row type: {kind} [index={idx}]")

            cells: list[dict[str, Any]] = []
            cell_items = item.get("data")
            if is_list(cell_items):
                for cell in cell_items:
                    if not isinstance(cell, Mapping):
                        raise PayloadError(
                            f"body row data is not a map: {type(cell).__name__}"
                        )
                    cell_type = parse_type_name(cell)
                    if cell_type is None:
                        raise PayloadError("body row data missing type")
                    if cell_type != "td":
                        continue
                    cells.append(
                        {
                            "type": "td",
                            "attributes": _attributes(cell),
                            "data": renderer.render_container_field_text(cell),
                        }
                    )
            rows.append({"type": "tr", "attributes": _attributes(item), "data": cells})
        return rows


__all__ = ["TableField"]
