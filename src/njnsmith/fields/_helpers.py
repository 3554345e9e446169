"""Shared utilities for field handlers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup

from njnsmith.core.attributes import finalize_field_attributes, parse_field_attributes
from njnsmith.core.nodes import is_true


def field_attributes(field: Mapping[str, Any], *extra_classes: str) -> list[Markup]:
    """Return rendered ``attributes`` of ``field`` with ``extra_classes`` merged in."""
    attrs, classes, _ = parse_field_attributes(field)
    for name in extra_classes:
        if name and name not in classes:
            classes.append(name)
    if classes:
        attrs["class"] = " ".join(classes)
    return finalize_field_attributes(attrs)


def is_decorated(field: Mapping[str, Any]) -> bool:
    return is_true(field.get("decorated"))


__all__ = ["field_attributes", "is_decorated"]
