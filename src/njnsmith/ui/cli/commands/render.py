"""Implementation of the ``njnsmith render`` command."""

from __future__ import annotations

from typing import Annotated

import typer

from njnsmith.core.exceptions import NjnError

from .._options import (
    DIAGNOSTICS_PANEL,
    ConfigOption,
    DebugOption,
    DocumentArgument,
    OutputPathOption,
    ThemeOption,
    VerboseOption,
)
from ..state import emit_warning, set_cli_state
from ..utils import build_engine, fail, write_output


def render(
    document: DocumentArgument,
    output: OutputPathOption = None,
    theme: ThemeOption = None,
    config: ConfigOption = None,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Exit with status 1 when any block was replaced by an error block.",
            rich_help_panel=DIAGNOSTICS_PANEL,
        ),
    ] = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Render an NJN document to HTML."""
    state = set_cli_state(verbosity=verbose, debug=debug)
    engine = build_engine(state, config_path=config, theme=theme)

    try:
        result = engine.process(document.read_bytes())
    except NjnError as exc:
        raise fail(exc) from exc

    if result.redirect:
        emit_warning(f"document requested a redirect to {result.redirect}")
        raise typer.Exit(code=3)

    write_output(str(result.markup), output)

    if strict and result.error_count:
        emit_warning(f"{result.error_count} block(s) replaced by error blocks")
        raise typer.Exit(code=1)


__all__ = ["render"]
