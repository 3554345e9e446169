from __future__ import annotations

from pathlib import Path

import pytest

from njnsmith.core.config import DEFAULT_INLINE_TAGS, RendererConfig, load_config
from njnsmith.core.exceptions import ConfigurationError
from njnsmith.core.stringtags import DEFAULT_STRING_TAGS


def test_defaults() -> None:
    config = RendererConfig()

    assert config.theme is None
    assert config.template_suffix == ".html"
    assert config.error_details is True
    assert tuple(config.string_tags) == DEFAULT_STRING_TAGS
    assert tuple(config.inline_tags) == DEFAULT_INLINE_TAGS


def test_validators_normalise_values() -> None:
    config = RendererConfig(string_tags=[" B", "b", "EM", ""], template_suffix="j2")

    assert config.string_tags == ["b", "em"]
    assert config.template_suffix == ".j2"


def test_load_config_resolves_theme_relative_to_file(tmp_path: Path) -> None:
    path = tmp_path / "site" / "njn.yml"
    path.parent.mkdir()
    path.write_text("theme: themes/site\nerror_details: false\n", encoding="utf-8")

    config = load_config(path)

    assert config.theme == (tmp_path / "site" / "themes" / "site").resolve()
    assert config.error_details is False


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == RendererConfig()


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Configuration file not found"):
        load_config(tmp_path / "missing.yml")


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ("unknown: 1\n", "Invalid configuration in"),
        ("- a\n- b\n", "must contain a mapping"),
        ("theme: [unclosed\n", "Invalid YAML"),
    ],
)
def test_invalid_config_files(tmp_path: Path, payload: str, message: str) -> None:
    path = tmp_path / "bad.yml"
    path.write_text(payload, encoding="utf-8")

    with pytest.raises(ConfigurationError, match=message):
        load_config(path)
