"""Preformatted fields: code listings and ``pre`` blocks."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup

from njnsmith.core.attributes import finalize_field_data
from njnsmith.core.nodes import is_list
from njnsmith.core.registry import FieldHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer

from ._helpers import field_attributes, is_decorated
from .highlight import PygmentsHtmlHighlighter


class CodeField(FieldHandler):
    """Render a ``code`` list of source lines.

    Decorated listings keep one entry per line so the template can number
    them; plain listings are joined with newlines. A ``language`` key turns on
    Pygments highlighting.
    """

    names = ("code",)
    njn_class = NjnClass.CONTAINER

    def __init__(self, highlighter: PygmentsHtmlHighlighter | None = None) -> None:
        super().__init__()
        self.highlighter = highlighter or PygmentsHtmlHighlighter()

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        decorated = is_decorated(field)
        data: dict[str, Any] = {"type": "code", "decorated": decorated}
        language = field.get("language")
        if not isinstance(language, str) or not language.strip():
            language = None

        lines = field.get("code")
        if is_list(lines):
            if decorated:
                entries = [str(line) for line in lines]
                if language:
                    data["lines"] = self.highlighter.render_lines(entries, language)
                else:
                    data["lines"] = entries
            else:
                text = "\n".join(line for line in lines if isinstance(line, str))
                data["text"] = self.highlighter.render(text, language) if language else text

        classes = ["decorated" if decorated else "", f"language-{language}" if language else ""]
        data["attributes"] = field_attributes(field, *classes)
        return finalize_field_data(
            data, field, skip=("type", "decorated", "code", "language", "attributes")
        )


class PreField(FieldHandler):
    names = ("pre",)
    njn_class = NjnClass.CONTAINER

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        text = field.get("text")
        if isinstance(text, str):
            # preformatted text keeps its whitespace, string tags are not parsed
            rendered = Markup(text)
        else:
            rendered = renderer.render_container_field_text(field)
        data: dict[str, Any] = {"type": "pre", "text": rendered}
        return finalize_field_data(data, field, skip=("type", "text"))


__all__ = ["CodeField", "PreField"]
