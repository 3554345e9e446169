"""CLI command implementations exposed via ``njnsmith.ui.cli``."""

from __future__ import annotations

from .inspect import index, toc, types
from .render import render


__all__ = ["index", "render", "toc", "types"]
