"""Media fields: responsive pictures, plain images and figures."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup

from njnsmith.core.attributes import finalize_field_data
from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import is_list, parse_type_name
from njnsmith.core.registry import FieldHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer


def _image_data(image: Mapping[str, Any], label: str) -> dict[str, Any]:
    if "src" not in image:
        raise PayloadError(f"{label} missing src")
    data: dict[str, Any] = {"type": "img", "src": Markup(str(image["src"]))}
    return finalize_field_data(data, image, skip=("type", "src"))


class PictureField(FieldHandler):
    """Render ``<picture>`` with optional ``<source>`` entries.

    ``default`` is the fallback ``<img>`` and must carry a ``src``; every
    entry of ``sources`` needs both ``srcset`` and ``media``.
    """

    names = ("picture",)

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        default = field.get("default")
        if not isinstance(default, Mapping):
            raise PayloadError("picture field missing default image")
        data: dict[str, Any] = {
            "type": "picture",
            "default": _image_data(default, "picture field default img"),
        }

        sources: list[dict[str, Any]] = []
        value = field.get("sources")
        if is_list(value):
            for source in value:
                if not isinstance(source, Mapping):
                    continue
                if "srcset" not in source:
                    raise PayloadError("picture field source missing srcset")
                if "media" not in source:
                    raise PayloadError("picture field source missing media")
                sources.append(
                    {
                        "type": "source",
                        "srcset": Markup(str(source["srcset"])),
                        "media": Markup(str(source["media"])),
                    }
                )
        data["sources"] = sources
        return finalize_field_data(data, field, skip=("type", "sources", "default"))


class ImageField(FieldHandler):
    names = ("img",)

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        return _image_data(field, "img field")


class FigureField(FieldHandler):
    """Render a ``picture`` or ``img`` field with an optional caption."""

    names = ("figure",)
    allowed_children = frozenset({"img", "picture"})

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        media = field.get("picture", field.get("img"))
        if not isinstance(media, Mapping):
            raise PayloadError("figure field missing picture or img")
        media_type = parse_type_name(media) or ("picture" if "picture" in field else "img")
        if not self.allows_child(media_type, NjnClass.INLINE):
            raise PayloadError(f"unsupported figure media: {media_type}")

        data: dict[str, Any] = {
            "type": "figure",
            "media": renderer.render_inline_field({**media, "type": media_type}),
        }
        if "caption" in field:
            data["caption"] = renderer.render_inline_field_text({"text": field["caption"]})
        return finalize_field_data(data, field, skip=("type", "picture", "img", "caption"))


__all__ = ["FigureField", "ImageField", "PictureField"]
