"""Inline text fields: generic tags, literals, icon glyphs and footnotes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
from typing import Any

from markupsafe import Markup

from njnsmith.core.attributes import finalize_field_data
from njnsmith.core.config import DEFAULT_INLINE_TAGS
from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import is_list
from njnsmith.core.registry import FieldHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer

from ._helpers import field_attributes


logger = logging.getLogger(__name__)

LITERAL_TAGS = ("br", "hr")


class InlineTagField(FieldHandler):
    """Plain HTML phrasing elements such as ``b``, ``em`` or ``code``.

    Every name shares the ``field/inline`` template unless a theme provides a
    dedicated ``field/<name>`` one.
    """

    names = DEFAULT_INLINE_TAGS
    template = "field/inline"

    def __init__(self, names: Iterable[str] | None = None) -> None:
        super().__init__(names=names, njn_class=NjnClass.INLINE)

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": type_name,
            "text": renderer.render_inline_field_text(field, parent=self),
        }
        return finalize_field_data(data, field, skip=("type", "text"))


class LiteralField(FieldHandler):
    """Void elements (``br``, ``hr``) that never carry text."""

    names = LITERAL_TAGS
    template = "field/literal"

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        data: dict[str, Any] = {"type": type_name}
        return finalize_field_data(data, field, skip=("type", "text"))


class IconGlyphField(FieldHandler):
    """Font icon glyph: ``{"type": "fa", "class": "fa-solid fa-star"}``."""

    names = ("fa",)

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        value = field.get("class")
        if isinstance(value, str):
            classes = value.split()
        elif is_list(value):
            classes = [name for name in value if isinstance(name, str)]
        else:
            raise PayloadError("fa field missing class")
        if not classes:
            raise PayloadError("fa field missing class")

        data: dict[str, Any] = {
            "type": "fa",
            "attributes": field_attributes(field, *classes),
        }
        title = field.get("title")
        if isinstance(title, str):
            data["title"] = Markup(title)
        return finalize_field_data(data, field, skip=("type", "class", "title", "attributes"))


class FootnoteField(FieldHandler):
    """Footnote reference collected for the block currently being prepared.

    ``text`` is rendered in place, ``note`` is stored in the footnote registry
    and listed by the owning block once its body is complete.
    """

    names = ("footnote",)

    def allows_child(self, child_name: str, child_class: NjnClass) -> bool:
        if child_name == "footnote":
            return False
        return super().allows_child(child_name, child_class)

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        if "note" not in field:
            raise PayloadError("footnote missing note")
        text = renderer.render_inline_field_text(field, parent=self)
        note_field = {"text": field["note"]}
        note = renderer.render_inline_field_text(note_field, parent=self)

        context = renderer.context
        block_index = context.block_index
        index = context.add_footnote({"text": text, "note": note})
        logger.debug("added footnote %d to block %d", index, block_index)

        data: dict[str, Any] = {
            "type": "footnote",
            "text": text,
            "note": note,
            "block_index": block_index,
            "index": index,
            "number": index + 1,
        }
        return finalize_field_data(data, field, skip=("type", "text", "note"))


__all__ = [
    "LITERAL_TAGS",
    "FootnoteField",
    "IconGlyphField",
    "InlineTagField",
    "LiteralField",
]
