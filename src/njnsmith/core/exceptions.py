"""Custom exception hierarchy for the NJN rendering pipeline."""

from __future__ import annotations

from collections.abc import Iterable
from html import escape


class NjnError(RuntimeError):
    """Base exception for NJN rendering failures."""


class DocumentDecodeError(NjnError):
    """Raised when the top-level document is not valid JSON.

    The error keeps enough positional detail to render a diagnostic page that
    highlights the offending region of the source text.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str,
        offset: int,
        lineno: int = 0,
        colno: int = 0,
        kind: str = "json syntax error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.offset = max(0, min(offset, len(source)))
        self.lineno = lineno
        self.colno = colno
        self.kind = kind

    def summary_html(self) -> str:
        """Return a short link pointing at the highlighted marker."""
        return (
            f'<a style="color:red;" href="#json-error">'
            f"[{self.offset}] {escape(self.message)}</a>"
        )

    def diagnostic_html(self) -> str:
        """Return the escaped source with a marker inserted at the error offset."""
        before = escape(self.source[: self.offset])
        after = escape(self.source[self.offset :])
        marker = (
            '<span style="color:red;font-weight:bold;" id="json-error">'
            f"&lt;-- {escape(self.message)}</span>"
        )
        return before + marker + after


class UnsupportedTypeError(NjnError):
    """Raised when a block or field type name has no registered handler."""

    def __init__(self, type_name: str | None, *, kind: str = "block") -> None:
        self.type_name = type_name
        self.kind = kind
        if type_name:
            message = f"unsupported {kind} type: {type_name}"
        else:
            message = f"missing {kind} type"
        super().__init__(message)


class PayloadError(NjnError):
    """Raised when a recognised block or field carries an invalid payload."""


class TemplateNotFoundError(NjnError):
    """Raised when no theme in the fallback chain provides a template."""

    def __init__(self, name: str, searched: Iterable[str] = ()) -> None:
        self.name = name
        self.searched = tuple(searched)
        locations = ", ".join(self.searched) or "<none>"
        super().__init__(f"njn template not found: {name} (searched: {locations})")


class TemplateRenderError(NjnError):
    """Raised when a template fails while rendering prepared data."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"error rendering njn template {name}: {reason}")


class ConfigurationError(NjnError):
    """Raised when renderer or theme configuration cannot be loaded."""


class RegistrationError(NjnError):
    """Raised when a handler registration is invalid at wiring time."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigurationError",
    "DocumentDecodeError",
    "NjnError",
    "PayloadError",
    "RegistrationError",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "UnsupportedTypeError",
    "exception_hint",
    "exception_messages",
]
