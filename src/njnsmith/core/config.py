"""Configuration models used by the NJN renderer.

ThemeConfig

`name` (`str`)
: Identifier of the theme, reported in diagnostics when a template is
  resolved from it.

`extends` (`str | None`)
: Parent theme consulted when this theme lacks a template. Use a path
  relative to the theme directory, or `default` for the built-in theme.

RendererConfig

`theme` (`Path | None`)
: Directory holding the active theme. Leave unset to render with the
  built-in default theme.

`string_tags` (`list[str]`)
: Element names recognised inside plain text values and turned into inline
  fields (`<b>`, `<em>`, ...). Any other element is kept as literal markup.

`inline_tags` (`list[str]`)
: Element names handled by the generic inline tag field.

`template_suffix` (`str`)
: File suffix appended to template names when reading them from a theme.

`error_details` (`bool`)
: Embed the offending JSON inside error blocks. Disable it on public sites to
  keep raw payloads out of rendered pages.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigurationError
from .stringtags import DEFAULT_STRING_TAGS


DEFAULT_INLINE_TAGS: tuple[str, ...] = (
    "abbr",
    "b",
    "cite",
    "del",
    "dfn",
    "em",
    "i",
    "ins",
    "kbd",
    "mark",
    "meter",
    "progress",
    "q",
    "s",
    "small",
    "strong",
    "sub",
    "sup",
    "u",
    "var",
    "span",
    "button",
    "code",
)


class ThemeConfig(BaseModel):
    """Metadata read from a theme's ``theme.yaml``."""

    model_config = ConfigDict(extra="forbid")

    name: str
    extends: str | None = None


class RendererConfig(BaseModel):
    """Options shared by every render performed by an engine."""

    model_config = ConfigDict(extra="forbid")

    theme: Path | None = None
    string_tags: list[str] = Field(default_factory=lambda: list(DEFAULT_STRING_TAGS))
    inline_tags: list[str] = Field(default_factory=lambda: list(DEFAULT_INLINE_TAGS))
    template_suffix: str = ".html"
    error_details: bool = True

    @field_validator("string_tags", "inline_tags")
    @classmethod
    def _normalise_tags(cls, value: list[str]) -> list[str]:
        tags: list[str] = []
        for item in value:
            tag = item.strip().lower()
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    @field_validator("template_suffix")
    @classmethod
    def _normalise_suffix(cls, value: str) -> str:
        value = value.strip()
        if value and not value.startswith("."):
            value = f".{value}"
        return value


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    try:
        payload = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Configuration file not found: {path}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Failed to read configuration '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(payload)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in '{path}': {exc}") from exc

    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise ConfigurationError(f"Configuration '{path}' must contain a mapping.")
    return dict(parsed)


def load_config(path: Path | str) -> RendererConfig:
    """Load a renderer configuration from a YAML file."""
    config_path = Path(path)
    payload = _read_yaml_mapping(config_path)
    theme = payload.get("theme")
    if isinstance(theme, str) and theme and not Path(theme).is_absolute():
        payload["theme"] = (config_path.parent / theme).resolve()
    try:
        return RendererConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in '{config_path}': {exc}") from exc


def load_theme_config(path: Path) -> ThemeConfig:
    """Read ``theme.yaml`` from a theme directory, defaulting the name."""
    manifest = path / "theme.yaml"
    if not manifest.exists():
        return ThemeConfig(name=path.name)
    payload = _read_yaml_mapping(manifest)
    payload.setdefault("name", path.name)
    try:
        return ThemeConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid theme manifest '{manifest}': {exc}") from exc


__all__ = [
    "DEFAULT_INLINE_TAGS",
    "RendererConfig",
    "ThemeConfig",
    "load_config",
    "load_theme_config",
]
