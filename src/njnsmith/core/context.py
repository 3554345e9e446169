"""Per-render mutable state threaded through the NJN tree walk."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class FootnoteRegistry:
    """Footnote payloads grouped by the index of the block that owns them."""

    entries: dict[int, list[dict[str, Any]]] = field(default_factory=dict)

    def add(self, block_index: int, payload: Mapping[str, Any]) -> int:
        """Append ``payload`` and return its zero-based position within the block."""
        bucket = self.entries.setdefault(block_index, [])
        bucket.append(dict(payload))
        return len(bucket) - 1

    def peek(self, block_index: int) -> list[dict[str, Any]]:
        return list(self.entries.get(block_index, []))

    def drain(self, block_index: int) -> list[dict[str, Any]]:
        """Remove and return the ordered footnotes collected for ``block_index``."""
        return self.entries.pop(block_index, [])

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self.entries.values())


@dataclass(frozen=True, slots=True)
class CounterSnapshot:
    """Copy of the counters taken before a block is prepared."""

    block_count: int
    heading_level: int
    heading_count: int
    depth: int
    within_aside: bool
    current_block: int | None
    footnotes: dict[int, list[dict[str, Any]]]


@dataclass(slots=True)
class RenderContext:
    """State shared by every handler during a single render.

    One instance is created for each call to :meth:`NjnEngine.render` and
    discarded afterwards; it must never be shared between concurrent renders.
    """

    document_root: Any = None
    block_count: int = 0
    heading_level: int = 0
    heading_count: int = 0
    depth: int = 0
    within_aside: bool = False
    document_has_header: bool = False
    current_block: int | None = None
    footnotes: FootnoteRegistry = field(default_factory=FootnoteRegistry)
    template_cache: dict[str, Any] = field(default_factory=dict)
    events: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    # ids of the nodes replaced by an error block, never rolled back
    failures: set[int] = field(default_factory=set)
    # classes the parent block adds to the next prepared block
    pending_classes: tuple[str, ...] = ()
    outline_only: bool = False

    def next_block_index(self) -> int:
        """Increment the block counter and make the new block current."""
        self.block_count += 1
        self.current_block = self.block_count
        return self.block_count

    @property
    def block_index(self) -> int:
        """Index of the block whose preparation is active."""
        if self.current_block is not None:
            return self.current_block
        return self.block_count

    def add_footnote(self, payload: Mapping[str, Any]) -> int:
        return self.footnotes.add(self.block_index, payload)

    def drain_footnotes(self, block_index: int | None = None) -> list[dict[str, Any]]:
        index = self.block_index if block_index is None else block_index
        return self.footnotes.drain(index)

    @contextmanager
    def nested(self, *, aside: bool = False) -> Iterator[int]:
        """Increase the nesting depth for the duration of the block."""
        previous_aside = self.within_aside
        self.depth += 1
        if aside:
            self.within_aside = True
        try:
            yield self.depth
        finally:
            self.depth -= 1
            self.within_aside = previous_aside

    @contextmanager
    def block_scope(self) -> Iterator[None]:
        """Restore the current block pointer once a nested block is prepared."""
        previous = self.current_block
        try:
            yield
        finally:
            self.current_block = previous

    def snapshot(self) -> CounterSnapshot:
        return CounterSnapshot(
            block_count=self.block_count,
            heading_level=self.heading_level,
            heading_count=self.heading_count,
            depth=self.depth,
            within_aside=self.within_aside,
            current_block=self.current_block,
            footnotes={key: list(value) for key, value in self.footnotes.entries.items()},
        )

    def restore(self, snapshot: CounterSnapshot) -> None:
        self.block_count = snapshot.block_count
        self.heading_level = snapshot.heading_level
        self.heading_count = snapshot.heading_count
        self.depth = snapshot.depth
        self.within_aside = snapshot.within_aside
        self.current_block = snapshot.current_block
        self.footnotes.entries = {
            key: list(value) for key, value in snapshot.footnotes.items()
        }

    def take_pending_classes(self) -> tuple[str, ...]:
        classes, self.pending_classes = self.pending_classes, ()
        return classes

    def record_event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


__all__ = ["CounterSnapshot", "FootnoteRegistry", "RenderContext"]
