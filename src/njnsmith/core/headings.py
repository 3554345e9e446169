"""Heading-level directive evaluation.

Header blocks may carry two directives:

``heading-reset``
    ``1`` forces a level one heading, ``0`` resets to one for the first
    heading of the page and two afterwards, other positive values set the
    level literally and negative values are subtracted from the running level.

``heading-level``
    A relative adjustment of the running level: ``+``/``inc``/``increment``,
    ``-``/``dec``/``decrement`` or a signed integer.

The reset directive wins when both are present. Outcomes at or below level one
collapse to one before the first heading and to two afterwards, so a page
never carries more than one level one heading unless a reset asks for it.

Live rendering and the table of contents builder both call
:func:`resolve_heading`, which keeps the two heading sequences identical.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import Any


logger = logging.getLogger(__name__)

INCREMENT_WORDS = frozenset({"+", "inc", "increment"})
DECREMENT_WORDS = frozenset({"-", "dec", "decrement"})


@dataclass(frozen=True, slots=True)
class HeadingDirectives:
    """Parsed ``heading-reset`` and ``heading-level`` values (None when unset)."""

    reset: int | None = None
    adjust: int | None = None

    @property
    def has_reset(self) -> bool:
        return self.reset is not None


@dataclass(frozen=True, slots=True)
class HeadingOutcome:
    """Level assigned to a header block and the running level that follows it."""

    level: int
    next_level: int
    explicit_reset: bool


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return round(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_directives(node: Mapping[str, Any]) -> HeadingDirectives:
    """Extract heading directives from a header block node."""
    reset: int | None = None
    adjust: int | None = None

    if "heading-reset" in node:
        raw = node["heading-reset"]
        reset = _coerce_int(raw)
        if reset is None:
            logger.error("error parsing heading-reset integer: %r", raw)

    if "heading-level" in node:
        raw = node["heading-level"]
        if isinstance(raw, str) and raw.strip().lower() in INCREMENT_WORDS:
            adjust = 1
        elif isinstance(raw, str) and raw.strip().lower() in DECREMENT_WORDS:
            adjust = -1
        else:
            adjust = _coerce_int(raw)
            if adjust is None:
                logger.error("error parsing heading-level value: %r", raw)

    return HeadingDirectives(reset=reset, adjust=adjust)


def _floor(level: int, heading_count: int) -> int:
    if level <= 1:
        return 1 if heading_count == 0 else 2
    return level


def evaluate_directives(
    directives: HeadingDirectives, *, current_level: int, heading_count: int
) -> int:
    """Return the level a header block renders at."""
    if directives.reset is not None:
        reset = directives.reset
        if reset == 1:
            return 1
        if reset == 0:
            return 1 if heading_count == 0 else 2
        if reset > 0:
            return reset
        return _floor(current_level + reset, heading_count)

    if directives.adjust is not None:
        return _floor(current_level + directives.adjust, heading_count)

    return _floor(0, heading_count)


def resolve_heading(
    node: Mapping[str, Any], *, current_level: int, heading_count: int
) -> HeadingOutcome:
    """Evaluate the directives of ``node`` against the running heading state."""
    directives = parse_directives(node)
    level = evaluate_directives(
        directives, current_level=current_level, heading_count=heading_count
    )
    next_level = level if directives.has_reset else level + 1
    return HeadingOutcome(
        level=level, next_level=next_level, explicit_reset=directives.has_reset
    )


def promote_level(
    level: int, heading_count: int, *, is_header: bool, document_has_header: bool
) -> int:
    """Raise the running level for blocks seen before the first header.

    When the page holds a header somewhere, earlier blocks render at level two
    so that header stays the only level one heading. A page without headers
    steps from zero to one for its first block and from one to two afterwards.
    """
    if heading_count != 0 or is_header:
        return level
    if document_has_header:
        return max(level, 2)
    if level in (0, 1):
        return level + 1
    return level


__all__ = [
    "HeadingDirectives",
    "HeadingOutcome",
    "evaluate_directives",
    "parse_directives",
    "promote_level",
    "resolve_heading",
]
