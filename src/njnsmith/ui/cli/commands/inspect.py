"""Inspection commands: ``toc``, ``types`` and ``index``."""

from __future__ import annotations

from collections.abc import Iterable
import json

from njnsmith.core.exceptions import NjnError
from njnsmith.core.indexing import index_document
from njnsmith.core.toc import TocItem

from .._options import (
    ConfigOption,
    DebugOption,
    DocumentArgument,
    JsonOption,
    OutputPathOption,
    ThemeOption,
    VerboseOption,
)
from ..state import set_cli_state
from ..utils import build_engine, fail, read_document, write_output


def _add_branches(tree: object, items: Iterable[TocItem]) -> None:
    for item in items:
        branch = tree.add(f"[bold]{item.title.striptags()}[/bold] [dim]#{item.tag}[/dim]")
        _add_branches(branch, item.children)


def toc(
    document: DocumentArgument,
    as_json: JsonOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Print the table of contents of an NJN document."""
    state = set_cli_state(verbosity=verbose, debug=debug)
    engine = build_engine(state)
    tree_data = read_document(document)
    try:
        items = engine.table_of_contents(tree_data)
    except NjnError as exc:
        raise fail(exc) from exc

    if as_json:
        write_output(json.dumps([item.to_dict() for item in items], indent=2), None)
        return

    from rich.tree import Tree

    tree = Tree(f"[cyan]{document.name}[/cyan]")
    _add_branches(tree, items)
    state.console.print(tree)


def types(
    theme: ThemeOption = None,
    config: ConfigOption = None,
    as_json: JsonOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """List the registered block and field types."""
    state = set_cli_state(verbosity=verbose, debug=debug)
    engine = build_engine(state, config_path=config, theme=theme)
    entries = engine.registry.describe()

    if as_json:
        write_output(json.dumps(entries, indent=2), None)
        return

    from rich import box
    from rich.table import Table

    table = Table(
        title="Registered NJN Types",
        box=box.SQUARE,
        show_edge=True,
        header_style="bold cyan",
    )
    table.add_column("Kind", style="magenta")
    table.add_column("Class", style="green")
    table.add_column("Name")
    table.add_column("Handler", style="dim")
    for entry in entries:
        table.add_row(
            str(entry["kind"]), str(entry["class"]), str(entry["name"]), str(entry["handler"])
        )
    state.console.print(table)


def index(
    document: DocumentArgument,
    output: OutputPathOption = None,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Extract the searchable text of an NJN document as JSON."""
    set_cli_state(verbosity=verbose, debug=debug)
    tree_data = read_document(document)
    try:
        indexed = index_document(tree_data)
    except NjnError as exc:
        raise fail(exc) from exc
    write_output(json.dumps(indexed.to_dict(), indent=2, ensure_ascii=False), output)


__all__ = ["index", "toc", "types"]
