"""Pygments integration for code fields."""

from __future__ import annotations

from functools import lru_cache

from markupsafe import Markup
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound


@lru_cache(maxsize=64)
def _lexer(language: str) -> Lexer:
    try:
        return get_lexer_by_name(language or "text")
    except ClassNotFound:
        return TextLexer()


class PygmentsHtmlHighlighter:
    """Convert source code to HTML token spans using Pygments."""

    def __init__(self, *, style: str = "default", classprefix: str = "") -> None:
        self.style = style
        self.classprefix = classprefix

    def _formatter(self) -> HtmlFormatter:
        return HtmlFormatter(nowrap=True, style=self.style, classprefix=self.classprefix)

    def render(self, code: str, language: str) -> Markup:
        """Return highlighted markup for a whole listing, without a wrapper."""
        html = highlight(code, _lexer(language), self._formatter())
        return Markup(html.rstrip("\n"))

    def render_lines(self, lines: list[str], language: str) -> list[Markup]:
        """Highlight each line on its own so every entry stays balanced HTML."""
        formatter = self._formatter()
        lexer = _lexer(language)
        return [Markup(highlight(line, lexer, formatter).rstrip("\n")) for line in lines]


__all__ = ["PygmentsHtmlHighlighter"]
