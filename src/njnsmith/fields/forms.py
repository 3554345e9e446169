"""Form controls: fieldsets, inputs and selects with their options."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from markupsafe import Markup

from njnsmith.core.attributes import finalize_field_data
from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import is_list, is_true, parse_type_name
from njnsmith.core.registry import FieldHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer

from ._helpers import field_attributes


def _render_options(
    renderer: NjnRenderer, items: Any, allowed: Sequence[str], owner: str
) -> list[Markup]:
    if not is_list(items):
        raise PayloadError(f"{owner} missing options")
    rendered: list[Markup] = []
    for item in items:
        if not isinstance(item, Mapping):
            raise PayloadError(f"unsupported {owner} option: {type(item).__name__}")
        kind = parse_type_name(item)
        if kind not in allowed:
            raise PayloadError(f"unsupported {owner} option type: {kind}")
        rendered.append(renderer.render_inline_field(item))
    return rendered


class InputField(FieldHandler):
    """Void ``<input>`` element; ``input-type`` defaults to ``text``."""

    names = ("input",)

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        input_type = field.get("input-type")
        data: dict[str, Any] = {
            "type": "input",
            "input_type": input_type if isinstance(input_type, str) else "text",
            "attributes": field_attributes(field),
        }
        return finalize_field_data(data, field, skip=("type", "input-type", "attributes"))


class OptionField(FieldHandler):
    names = ("option",)

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        text = Markup("")
        if "text" in field:
            text = renderer.render_inline_field_text(field, parent=self)
        value = field.get("value")
        data: dict[str, Any] = {
            "type": "option",
            "text": text,
            "value": Markup(str(value)) if value is not None else text,
            "selected": is_true(field.get("selected")),
            "disabled": is_true(field.get("disabled")),
        }
        return finalize_field_data(
            data, field, skip=("type", "text", "value", "selected", "disabled")
        )

    def allows_child(self, child_name: str, child_class: NjnClass) -> bool:
        return False


class OptionGroupField(FieldHandler):
    names = ("optgroup",)

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        label = field.get("label")
        if not isinstance(label, str):
            raise PayloadError("optgroup missing label")
        data: dict[str, Any] = {
            "type": "optgroup",
            "label": Markup(label),
            "options": _render_options(renderer, field.get("options"), ("option",), "optgroup"),
        }
        return finalize_field_data(data, field, skip=("type", "label", "options"))


class SelectField(FieldHandler):
    """``<select>`` listing ``option`` and ``optgroup`` fields."""

    names = ("select",)

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": "select",
            "options": _render_options(
                renderer, field.get("options"), ("option", "optgroup"), "select"
            ),
            "multiple": is_true(field.get("multiple")),
        }
        return finalize_field_data(data, field, skip=("type", "options", "multiple"))


class FieldsetField(FieldHandler):
    """Group form controls under an optional ``legend``."""

    names = ("fieldset",)
    njn_class = NjnClass.CONTAINER

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": "fieldset",
            "text": renderer.render_container_field_text(field),
        }
        if "legend" in field:
            data["legend"] = renderer.render_inline_field_text({"text": field["legend"]})
        return finalize_field_data(data, field, skip=("type", "legend", "text"))


__all__ = [
    "FieldsetField",
    "InputField",
    "OptionField",
    "OptionGroupField",
    "SelectField",
]
