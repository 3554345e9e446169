"""Structural container fields: generic sections, details and paragraphs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup

from njnsmith.core.attributes import finalize_field_data
from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import is_true
from njnsmith.core.registry import FieldHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer


CONTAINER_TAGS = ("article", "aside", "blockquote", "div", "section")


class ContainerField(FieldHandler):
    """Wrap container text in a sectioning element such as ``div``."""

    names = CONTAINER_TAGS
    njn_class = NjnClass.CONTAINER
    template = "field/container"

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": type_name,
            "text": renderer.render_container_field_text(field),
        }
        return finalize_field_data(data, field, skip=("type", "text"))


class DetailsField(FieldHandler):
    """Collapsible ``<details>`` with an inline ``summary``."""

    names = ("details",)
    njn_class = NjnClass.CONTAINER

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        if "summary" not in field:
            raise PayloadError("details field missing summary")
        summary = renderer.render_inline_field_text({"text": field["summary"]})
        data: dict[str, Any] = {
            "type": "details",
            "summary": summary,
            "open": is_true(field.get("open")),
            "text": renderer.render_container_field_text(field),
        }
        return finalize_field_data(data, field, skip=("type", "summary", "open", "text"))


class ParagraphField(FieldHandler):
    """Paragraph of inline content; container fields inside it are dropped."""

    names = ("p",)
    njn_class = NjnClass.CONTAINER

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        text = Markup("")
        if "text" in field:
            text = renderer.render_inline_field_text(field, parent=self)
        data: dict[str, Any] = {"type": "p", "text": text}
        return finalize_field_data(data, field, skip=("type", "text"))


__all__ = ["CONTAINER_TAGS", "ContainerField", "DetailsField", "ParagraphField"]
