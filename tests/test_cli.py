from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from njnsmith.ui.cli import app


DOCUMENT = [
    {"type": "header", "content": {"header": ["Site"]}},
    {"type": "content", "content": {"header": ["Intro"], "section": ["Hello"]}},
    {"type": "content", "content": {"header": ["Usage"]}},
]


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _write_document(tmp_path: Path, payload: Any, name: str = "page.json") -> Path:
    path = tmp_path / name
    text = payload if isinstance(payload, str) else json.dumps(payload)
    path.write_text(text, encoding="utf-8")
    return path


def test_help_lists_commands(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("render", "toc", "types", "index"):
        assert command in result.stdout


def test_version_flag(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.stdout.startswith("njnsmith ")


def test_render_to_stdout(runner: CliRunner, tmp_path: Path) -> None:
    document = _write_document(tmp_path, DOCUMENT)

    result = runner.invoke(app, ["render", str(document)])

    assert result.exit_code == 0, result.output
    assert '<h1 class="njn-heading">Site</h1>' in result.stdout
    assert '<h2 class="njn-heading">Intro</h2>' in result.stdout


def test_render_to_file(runner: CliRunner, tmp_path: Path) -> None:
    document = _write_document(tmp_path, DOCUMENT)
    output = tmp_path / "out" / "page.html"

    result = runner.invoke(app, ["render", str(document), "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert 'id="content-2"' in output.read_text(encoding="utf-8")


def test_render_decode_error_page(runner: CliRunner, tmp_path: Path) -> None:
    document = _write_document(tmp_path, '[{"type": }]')

    result = runner.invoke(app, ["render", str(document)])

    assert result.exit_code == 0
    assert 'id="json-error"' in result.stdout


def test_render_strict_fails_on_error_blocks(runner: CliRunner, tmp_path: Path) -> None:
    document = _write_document(tmp_path, [{"type": "bogus"}])

    lenient = runner.invoke(app, ["render", str(document)])
    strict = runner.invoke(app, ["render", "--strict", str(document)])

    assert lenient.exit_code == 0
    assert "njn-error" in lenient.stdout
    assert strict.exit_code == 1


def test_render_with_theme_and_config(runner: CliRunner, tmp_path: Path) -> None:
    theme = tmp_path / "theme"
    (theme / "njn" / "block").mkdir(parents=True)
    (theme / "theme.yaml").write_text("extends: default\n", encoding="utf-8")
    (theme / "njn" / "block" / "header.html").write_text(
        "<header>{{ heading }}!</header>", encoding="utf-8"
    )
    config = tmp_path / "njn.yml"
    config.write_text("theme: theme\n", encoding="utf-8")
    document = _write_document(tmp_path, DOCUMENT)

    result = runner.invoke(app, ["render", "--config", str(config), str(document)])

    assert result.exit_code == 0, result.output
    assert "<header>Site!</header>" in result.stdout


def test_invalid_config_exits(runner: CliRunner, tmp_path: Path) -> None:
    config = tmp_path / "njn.yml"
    config.write_text("unknown: 1\n", encoding="utf-8")
    document = _write_document(tmp_path, DOCUMENT)

    result = runner.invoke(app, ["render", "--config", str(config), str(document)])

    assert result.exit_code == 1


def test_toc_json(runner: CliRunner, tmp_path: Path) -> None:
    document = _write_document(tmp_path, DOCUMENT)

    result = runner.invoke(app, ["toc", "--json", str(document)])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [entry["tag"] for entry in payload] == ["content-2", "content-3"]


def test_toc_tree(runner: CliRunner, tmp_path: Path) -> None:
    document = _write_document(tmp_path, DOCUMENT)

    result = runner.invoke(app, ["toc", str(document)])

    assert result.exit_code == 0, result.output
    assert "Intro" in result.stdout
    assert "#content-3" in result.stdout


def test_toc_rejects_invalid_json(runner: CliRunner, tmp_path: Path) -> None:
    document = _write_document(tmp_path, "[")

    result = runner.invoke(app, ["toc", str(document)])

    assert result.exit_code == 1


def test_types_json(runner: CliRunner) -> None:
    result = runner.invoke(app, ["types", "--json"])

    assert result.exit_code == 0, result.output
    entries = json.loads(result.stdout)
    names = {(entry["kind"], entry["name"]) for entry in entries}
    assert ("block", "carousel") in names
    assert ("field", "table") in names


def test_index_command(runner: CliRunner, tmp_path: Path) -> None:
    document = _write_document(tmp_path, DOCUMENT)
    output = tmp_path / "index.json"

    result = runner.invoke(app, ["index", str(document), "-o", str(output)])

    assert result.exit_code == 0, result.output
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["headings"] == ["Site", "Intro", "Usage"]
    assert payload["contents"] == "Hello"
