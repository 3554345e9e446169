"""Helpers turning raw field payloads into template data."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from html import escape
from typing import Any

from markupsafe import Markup

from .exceptions import PayloadError
from .nodes import is_list, to_snake


def parse_field_attributes(
    field: Mapping[str, Any],
) -> tuple[dict[str, str | None], list[str], dict[str, str]]:
    """Return the ``attributes`` of a field split into attrs, classes and styles."""
    attributes: dict[str, str | None] = {}
    classes: list[str] = []
    styles: dict[str, str] = {}

    if "attributes" not in field:
        return attributes, classes, styles

    attrs = field["attributes"]
    if not isinstance(attrs, Mapping):
        raise PayloadError(f"unsupported attributes type: {type(attrs).__name__}")

    if "class" in attrs:
        value = attrs["class"]
        if isinstance(value, str):
            classes = [name for name in value.split(" ") if name]
            attributes["class"] = value
        elif is_list(value):
            classes = [name for name in value if isinstance(name, str)]
            attributes["class"] = " ".join(classes)
        else:
            raise PayloadError(f"unsupported class type: {type(value).__name__}")

    if "style" in attrs:
        value = attrs["style"]
        if isinstance(value, str):
            attributes["style"] = value
        elif isinstance(value, Mapping):
            for key, item in value.items():
                if isinstance(item, str):
                    styles[key] = item
            attributes["style"] = ";".join(f"{key}:{item}" for key, item in styles.items())
        else:
            raise PayloadError(f"unsupported style type: {type(value).__name__}")

    for key, value in attrs.items():
        if key in ("class", "style"):
            continue
        if value is None:
            attributes[key] = None
        elif isinstance(value, bool):
            attributes[key] = "true" if value else "false"
        else:
            attributes[key] = str(value)

    return attributes, classes, styles


def finalize_field_attributes(attributes: Mapping[str, str | None]) -> list[Markup]:
    """Render attribute pairs as escaped ``name="value"`` markup fragments."""
    rendered: list[Markup] = []
    for key, value in attributes.items():
        if value is None:
            rendered.append(Markup(escape(key)))
        else:
            rendered.append(Markup(f'{escape(key)}="{escape(value, quote=True)}"'))
    return rendered


def finalize_field_data(
    data: dict[str, Any], field: Mapping[str, Any], skip: Iterable[str] = ()
) -> dict[str, Any]:
    """Copy remaining field keys into ``data`` under snake_case names.

    Strings are trusted as markup, numbers and booleans become strings, and
    the ``attributes`` mapping is rendered into ready-to-join fragments.
    """
    skipped = set(skip)
    for key, value in field.items():
        if key in skipped:
            continue
        if key == "attributes":
            attrs, _, _ = parse_field_attributes(field)
            data["attributes"] = finalize_field_attributes(attrs)
            continue
        name = to_snake(key)
        if name in data:
            continue
        if isinstance(value, str):
            data[name] = Markup(value)
        elif isinstance(value, bool):
            data[name] = "true" if value else "false"
        elif isinstance(value, (int, float)):
            data[name] = str(value)
        else:
            data[name] = value
    return data


def merge_class_names(data: dict[str, Any], *names: str) -> dict[str, Any]:
    """Add ``names`` to the ``class`` entry of prepared block data."""
    existing = str(data.get("class") or "").split()
    for name in names:
        for part in name.split():
            if part not in existing:
                existing.append(part)
    if existing:
        data["class"] = " ".join(existing)
    return data


__all__ = [
    "finalize_field_attributes",
    "finalize_field_data",
    "merge_class_names",
    "parse_field_attributes",
]
