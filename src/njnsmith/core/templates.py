"""Theme loading and the shared NJN template store.

Templates are looked up by convention names (``block-list``,
``block/<type>``, ``field/<type>``) under the ``njn/`` directory of a theme.
When the active theme lacks a name, the parents listed through ``extends``
in ``theme.yaml`` are consulted in order.

The :class:`TemplateStore` is shared by every render of an engine. Its
source and compiled-template caches sit behind a :class:`ReadWriteLock` so
concurrent renders read freely while the first load of a name briefly takes
the lock exclusively.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
import logging
from pathlib import Path
import threading
from typing import Any

from jinja2 import Environment, FunctionLoader, Template
from markupsafe import Markup

from .config import load_theme_config
from .exceptions import ConfigurationError, TemplateNotFoundError


logger = logging.getLogger(__name__)

DEFAULT_THEME_DIR = Path(__file__).resolve().parent.parent / "themes" / "default"
TEMPLATE_ROOT = "njn"


class ReadWriteLock:
    """Many concurrent readers or a single writer."""

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._condition:
            while self._writing:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._condition:
            while self._writing or self._readers:
                self._condition.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._condition:
                self._writing = False
                self._condition.notify_all()


@dataclass(frozen=True, slots=True)
class Theme:
    """A directory of NJN templates with an optional parent theme."""

    name: str
    root: Path
    parent: Theme | None = None

    def chain(self) -> list[Theme]:
        """Return this theme followed by its ancestors."""
        themes: list[Theme] = []
        current: Theme | None = self
        while current is not None:
            themes.append(current)
            current = current.parent
        return themes

    def template_path(self, name: str, suffix: str) -> Path:
        return self.root / TEMPLATE_ROOT / f"{name}{suffix}"


@dataclass(frozen=True, slots=True)
class TemplateSource:
    """Raw template text together with the theme that provided it."""

    name: str
    source: str
    theme: str
    path: Path | None = None


def load_theme(path: Path | str | None = None, *, _seen: frozenset[Path] = frozenset()) -> Theme:
    """Load the theme stored at ``path`` (the built-in theme when omitted)."""
    root = Path(path).resolve() if path is not None else DEFAULT_THEME_DIR
    if not root.is_dir():
        raise ConfigurationError(f"Theme directory does not exist: {root}")
    if root in _seen:
        raise ConfigurationError(f"Theme inheritance cycle detected at {root}")

    config = load_theme_config(root)
    parent: Theme | None = None
    if config.extends:
        if config.extends == "default":
            parent_root = DEFAULT_THEME_DIR
        else:
            parent_root = (root / config.extends).resolve()
        if parent_root != root:
            parent = load_theme(parent_root, _seen=_seen | {root})

    logger.debug("loaded njn theme %s from %s", config.name, root)
    return Theme(name=config.name, root=root, parent=parent)


def _build_environment(loader: FunctionLoader) -> Environment:
    environment = Environment(
        loader=loader,
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    environment.filters.setdefault("attrs", _join_attributes)
    return environment


def _join_attributes(values: Any) -> Markup:
    if not values:
        return Markup("")
    return Markup(" ") + Markup(" ").join(values)


class TemplateStore:
    """Shared, lock-guarded cache of template sources and compiled templates."""

    def __init__(self, theme: Theme | None = None, *, suffix: str = ".html") -> None:
        self.theme = theme or load_theme()
        self.suffix = suffix
        self._lock = ReadWriteLock()
        self._sources: dict[str, TemplateSource] = {}
        self._compiled: dict[str, Template] = {}
        self.env = _build_environment(FunctionLoader(self._load_for_jinja))

    def _load_for_jinja(self, name: str) -> tuple[str, str | None, Any] | None:
        try:
            found = self.get_source(name)
        except TemplateNotFoundError:
            return None
        filename = found.path.as_posix() if found.path is not None else None
        return found.source, filename, lambda: True

    def _read_source(self, name: str) -> TemplateSource:
        searched: list[str] = []
        for theme in self.theme.chain():
            path = theme.template_path(name, self.suffix)
            searched.append(theme.name)
            logger.debug("looking for njn template: %s - %s", name, path)
            if path.is_file():
                return TemplateSource(
                    name=name,
                    source=path.read_text(encoding="utf-8"),
                    theme=theme.name,
                    path=path,
                )
        raise TemplateNotFoundError(name, searched)

    def get_source(self, name: str) -> TemplateSource:
        """Return the raw source of ``name`` resolved through the theme chain."""
        with self._lock.read():
            cached = self._sources.get(name)
        if cached is not None:
            return cached

        found = self._read_source(name)
        with self._lock.write():
            cached = self._sources.setdefault(name, found)
        logger.debug("caching new njn template: %s (%s)", name, cached.theme)
        return cached

    def has_template(self, name: str) -> bool:
        try:
            self.get_source(name)
        except TemplateNotFoundError:
            return False
        return True

    def get_template(self, name: str) -> Template:
        """Return the compiled template for ``name``."""
        with self._lock.read():
            template = self._compiled.get(name)
        if template is not None:
            return template

        self.get_source(name)
        template = self.env.get_template(name)
        with self._lock.write():
            template = self._compiled.setdefault(name, template)
        return template

    def override_template(self, name: str, source: str | Path) -> None:
        """Replace ``name`` with an external payload for every later render."""
        if isinstance(source, Path):
            text = source.read_text(encoding="utf-8")
            path: Path | None = source
        else:
            text = source
            path = None
        template = self.env.from_string(text)
        template.name = name
        with self._lock.write():
            self._sources[name] = TemplateSource(
                name=name, source=text, theme=self.theme.name, path=path
            )
            self._compiled[name] = template

    def render(self, name: str, data: Mapping[str, Any]) -> Markup:
        return Markup(self.get_template(name).render(**data))


__all__ = [
    "DEFAULT_THEME_DIR",
    "ReadWriteLock",
    "TemplateSource",
    "TemplateStore",
    "Theme",
    "load_theme",
]
