"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from njnsmith.core.config import RendererConfig, load_config
from njnsmith.core.decode import decode_document
from njnsmith.core.engine import NjnEngine
from njnsmith.core.exceptions import ConfigurationError, DocumentDecodeError, NjnError

from .diagnostics import CliEmitter
from .state import CLIState, emit_error


def build_engine(
    state: CLIState,
    *,
    config_path: Path | None = None,
    theme: Path | None = None,
) -> NjnEngine:
    """Create an engine from CLI options, exiting on configuration errors."""
    try:
        config = load_config(config_path) if config_path is not None else RendererConfig()
        if theme is not None:
            config = config.model_copy(update={"theme": theme})
        return NjnEngine(config=config, emitter=CliEmitter(state))
    except ConfigurationError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


def read_document(path: Path) -> Any:
    """Decode the NJN document stored at ``path``, exiting on decode errors."""
    try:
        return decode_document(path.read_bytes())
    except DocumentDecodeError as exc:
        emit_error(f"{path}: {exc}", exception=exc)
        raise typer.Exit(code=1) from exc


def write_output(text: str, output: Path | None) -> None:
    """Write ``text`` to ``output`` or echo it to stdout."""
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")


def fail(exc: NjnError) -> typer.Exit:
    emit_error(str(exc), exception=exc)
    return typer.Exit(code=1)


__all__ = ["build_engine", "fail", "read_document", "write_output"]
