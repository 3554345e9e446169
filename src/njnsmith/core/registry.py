"""Type registry mapping NJN block and field names to their handlers.

The registry is assembled once at wiring time through :class:`RegistryBuilder`
and frozen into a :class:`TypeRegistry`. Lookups performed while rendering are
read-only, so a single registry can serve any number of concurrent renders.

Architecture

`Handler layer`
: :class:`BlockHandler` and :class:`FieldHandler` declare the names they answer
  to and their :class:`NjnClass` (inline or container).

`Wiring layer`
: :class:`RegistryBuilder` validates registrations and files each handler in
  the class namespaces it belongs to (``ANY`` expands to both).

`Lookup layer`
: :class:`TypeRegistry` answers ``find`` queries after kebab-case
  normalisation; ``ANY`` queries try the container namespace first, then the
  inline namespace.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from markupsafe import Markup

from .exceptions import PayloadError, RegistrationError
from .nodes import to_kebab


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .renderer import NjnRenderer, PreparedBlock


logger = logging.getLogger(__name__)


class NjnClass(Enum):
    """Where a block or field may appear within a document."""

    INLINE = "inline"
    """Running text: headers, footers, and the text of other inline fields."""

    CONTAINER = "container"
    """Structural sections: block bodies and nested container fields."""

    ANY = "any"
    """Registration or lookup spanning both namespaces."""


class BlockHandler:
    """Two-phase prepare/render contract implemented by every block kind."""

    name: ClassVar[str] = ""
    njn_class: ClassVar[NjnClass] = NjnClass.INLINE

    def block_type_name(self) -> str:
        return self.name

    def classify(self) -> NjnClass:
        return self.njn_class

    def check_type(self, type_name: str) -> None:
        """Reject dispatch of a type name this handler does not implement."""
        if type_name != self.name:
            msg = f"{type(self).__name__} does not implement {type_name} block type"
            raise PayloadError(msg)

    def prepare(
        self, renderer: NjnRenderer, type_name: str, node: Mapping[str, Any]
    ) -> PreparedBlock:
        """Turn the raw block node into template data."""
        raise NotImplementedError

    def render(self, renderer: NjnRenderer, data: Mapping[str, Any]) -> Markup:
        """Render previously prepared data with the ``block/<type>`` template."""
        return renderer.render_template(f"block/{self.name}", data)


class FieldHandler:
    """Single-phase contract producing template data for one field kind."""

    names: ClassVar[tuple[str, ...]] = ()
    njn_class: ClassVar[NjnClass] = NjnClass.INLINE
    template: ClassVar[str | None] = None
    allowed_children: ClassVar[frozenset[str] | None] = None
    allowed_classes: ClassVar[frozenset[NjnClass]] = frozenset({NjnClass.INLINE})

    def __init__(self, names: Iterable[str] | None = None, njn_class: NjnClass | None = None):
        self._names = tuple(to_kebab(name) for name in (names or self.names))
        self._class = njn_class or self.njn_class

    def field_type_names(self) -> tuple[str, ...]:
        return self._names

    def classify(self) -> NjnClass:
        return self._class

    def check_type(self, type_name: str) -> None:
        if type_name not in self._names:
            msg = f'{type(self).__name__} does not support tags named "{type_name}"'
            raise PayloadError(msg)

    def allows_child(self, child_name: str, child_class: NjnClass) -> bool:
        """Return whether ``child_name`` may appear inside this field's text."""
        if child_class not in self.allowed_classes:
            return False
        if self.allowed_children is None:
            return True
        return child_name in self.allowed_children

    def template_names(self, type_name: str) -> tuple[str, ...]:
        """Return candidate template names, most specific first."""
        names = [f"field/{type_name}"]
        if self.template and self.template not in names:
            names.append(self.template)
        return tuple(names)

    def prepare_data(
        self, renderer: NjnRenderer, type_name: str, field: Mapping[str, Any]
    ) -> dict[str, Any]:
        raise NotImplementedError


def _expand(njn_class: NjnClass) -> tuple[NjnClass, ...]:
    if njn_class is NjnClass.ANY:
        return (NjnClass.INLINE, NjnClass.CONTAINER)
    return (njn_class,)


class TypeRegistry:
    """Immutable lookup table built by :class:`RegistryBuilder`."""

    def __init__(
        self,
        blocks: Mapping[NjnClass, Mapping[str, BlockHandler]],
        fields: Mapping[NjnClass, Mapping[str, FieldHandler]],
        string_tags: Iterable[str],
    ) -> None:
        self._blocks = MappingProxyType(
            {key: MappingProxyType(dict(value)) for key, value in blocks.items()}
        )
        self._fields = MappingProxyType(
            {key: MappingProxyType(dict(value)) for key, value in fields.items()}
        )
        self._string_tags = tuple(string_tags)

    @staticmethod
    def _find(
        table: Mapping[NjnClass, Mapping[str, Any]], njn_class: NjnClass, name: str
    ) -> Any:
        key = to_kebab(name)
        if njn_class is NjnClass.ANY:
            found = table.get(NjnClass.CONTAINER, {}).get(key)
            if found is None:
                found = table.get(NjnClass.INLINE, {}).get(key)
            return found
        return table.get(njn_class, {}).get(key)

    def find_block(self, njn_class: NjnClass, name: str) -> BlockHandler | None:
        return self._find(self._blocks, njn_class, name)

    def find_field(self, njn_class: NjnClass, name: str) -> FieldHandler | None:
        return self._find(self._fields, njn_class, name)

    def find(self, njn_class: NjnClass, name: str) -> BlockHandler | FieldHandler | None:
        """Find a block first, then a field, registered under ``name``."""
        return self.find_block(njn_class, name) or self.find_field(njn_class, name)

    def is_block(self, name: str) -> bool:
        return self.find_block(NjnClass.ANY, name) is not None

    def block_names(self, njn_class: NjnClass = NjnClass.ANY) -> list[str]:
        names: set[str] = set()
        for cls in _expand(njn_class):
            names.update(self._blocks.get(cls, {}))
        return sorted(names)

    def field_names(self, njn_class: NjnClass = NjnClass.ANY) -> list[str]:
        names: set[str] = set()
        for cls in _expand(njn_class):
            names.update(self._fields.get(cls, {}))
        return sorted(names)

    @property
    def string_tags(self) -> tuple[str, ...]:
        return self._string_tags

    def describe(self) -> list[dict[str, object]]:
        """Return a serialisable snapshot of the registered handlers."""
        entries: list[dict[str, object]] = []
        for kind, table in (("block", self._blocks), ("field", self._fields)):
            for njn_class in (NjnClass.INLINE, NjnClass.CONTAINER):
                for name, handler in sorted(table.get(njn_class, {}).items()):
                    entries.append(
                        {
                            "kind": kind,
                            "class": njn_class.value,
                            "name": name,
                            "handler": type(handler).__name__,
                        }
                    )
        return entries


class RegistryBuilder:
    """Mutable collector used while wiring the registry."""

    def __init__(self) -> None:
        self._blocks: dict[NjnClass, dict[str, BlockHandler]] = {}
        self._fields: dict[NjnClass, dict[str, FieldHandler]] = {}
        self._string_tags: list[str] = []

    def add_block(self, handler: BlockHandler) -> RegistryBuilder:
        name = to_kebab(handler.block_type_name())
        if not name:
            msg = f"{type(handler).__name__} does not declare a block type name"
            raise RegistrationError(msg)
        for njn_class in _expand(handler.classify()):
            bucket = self._blocks.setdefault(njn_class, {})
            bucket[name] = handler
            logger.debug("added %s block: %s", njn_class.value, name)
        return self

    def add_field(self, handler: FieldHandler) -> RegistryBuilder:
        names = handler.field_type_names()
        if not names:
            msg = f"{type(handler).__name__} does not declare any field names"
            raise RegistrationError(msg)
        for njn_class in _expand(handler.classify()):
            bucket = self._fields.setdefault(njn_class, {})
            for name in names:
                bucket[name] = handler
                logger.debug("added %s field: %s", njn_class.value, name)
        return self

    def add_string_tags(self, *names: str) -> RegistryBuilder:
        for name in names:
            tag = name.strip().lower()
            if tag and tag not in self._string_tags:
                self._string_tags.append(tag)
                logger.debug("added %s string tag", tag)
        return self

    def build(self) -> TypeRegistry:
        return TypeRegistry(self._blocks, self._fields, self._string_tags)


__all__ = [
    "BlockHandler",
    "FieldHandler",
    "NjnClass",
    "RegistryBuilder",
    "TypeRegistry",
]
