"""Per-invocation CLI state: verbosity, consoles and recorded diagnostics."""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING, Any

from njnsmith.core.exceptions import exception_hint, exception_messages


if TYPE_CHECKING:
    from rich.console import Console


@dataclass(slots=True)
class CLIState:
    """Settings and engine events of one ``njnsmith`` command."""

    verbosity: int = 0
    show_tracebacks: bool = False
    events: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    _consoles: dict[str, Console] = field(default_factory=dict, repr=False)

    def _console(self, stream_name: str) -> Console:
        from rich.console import Console

        # follow stream swaps made by test runners
        stream = getattr(sys, stream_name)
        console = self._consoles.get(stream_name)
        if console is None or console.file is not stream:
            console = Console(file=stream, highlight=stream_name == "stdout")
            self._consoles[stream_name] = console
        return console

    @property
    def console(self) -> Console:
        return self._console("stdout")

    @property
    def err_console(self) -> Console:
        return self._console("stderr")

    def record_event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))

    def events_named(self, name: str) -> list[dict[str, Any]]:
        """Return the payloads recorded for ``name``, oldest first."""
        return [payload for event, payload in self.events if event == name]


_STATE: ContextVar[CLIState | None] = ContextVar("njnsmith_cli_state", default=None)


def get_cli_state() -> CLIState:
    """Return the state of the running command, creating a default one."""
    state = _STATE.get()
    if state is None:
        state = CLIState()
        _STATE.set(state)
    return state


def set_cli_state(*, verbosity: int = 0, debug: bool = False) -> CLIState:
    """Start a fresh state for a command so events never leak between runs."""
    state = CLIState(verbosity=max(0, verbosity), show_tracebacks=debug)
    _STATE.set(state)
    return state


def debug_enabled() -> bool:
    state = _STATE.get()
    return state is not None and state.show_tracebacks


def _exception_details(message: str, exception: BaseException, verbosity: int) -> list[str]:
    lines = [f"type: {type(exception).__name__}"]
    if verbosity >= 2:
        causes = exception_messages(exception)[1:]
        if causes:
            lines.append("caused by:")
            lines.extend(f"  {cause}" for cause in causes)
        return lines
    hint = exception_hint(exception)
    if hint and hint not in message:
        lines.append(f"cause: {hint}")
    return lines


def _print(level: str, message: str, exception: BaseException | None) -> None:
    from rich.text import Text

    state = get_cli_state()
    style = "red" if level == "error" else "yellow"
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        text.append("\n")
        text.append("\n".join(_exception_details(message, exception, state.verbosity)), style)
    state.err_console.print(text)


def emit_info(message: str) -> None:
    """Log an informational line to stderr."""
    get_cli_state().err_console.log(message)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    _print("warning", message, exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    _print("error", message, exception)


__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_info",
    "emit_warning",
    "get_cli_state",
    "set_cli_state",
]
