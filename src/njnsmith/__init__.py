"""Primary public API for njnsmith."""

from __future__ import annotations

from njnsmith.core.config import RendererConfig, ThemeConfig, load_config
from njnsmith.core.context import FootnoteRegistry, RenderContext
from njnsmith.core.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from njnsmith.core.engine import NjnEngine
from njnsmith.core.exceptions import (
    ConfigurationError,
    DocumentDecodeError,
    NjnError,
    PayloadError,
    RegistrationError,
    TemplateNotFoundError,
    TemplateRenderError,
    UnsupportedTypeError,
)
from njnsmith.core.indexing import IndexedDocument, index_document
from njnsmith.core.registry import (
    BlockHandler,
    FieldHandler,
    NjnClass,
    RegistryBuilder,
    TypeRegistry,
)
from njnsmith.core.renderer import NjnRenderer, PreparedBlock, RenderResult
from njnsmith.core.templates import TemplateStore, Theme, load_theme
from njnsmith.core.toc import TocItem, build_table_of_contents
from njnsmith.version import get_version
from njnsmith.wiring import build_default_registry


__version__ = get_version()

__all__ = [
    "BlockHandler",
    "ConfigurationError",
    "DiagnosticEmitter",
    "DocumentDecodeError",
    "FieldHandler",
    "FootnoteRegistry",
    "IndexedDocument",
    "LoggingEmitter",
    "NjnClass",
    "NjnEngine",
    "NjnError",
    "NjnRenderer",
    "NullEmitter",
    "PayloadError",
    "PreparedBlock",
    "RegistrationError",
    "RegistryBuilder",
    "RenderContext",
    "RenderResult",
    "RendererConfig",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "TemplateStore",
    "Theme",
    "ThemeConfig",
    "TocItem",
    "TypeRegistry",
    "UnsupportedTypeError",
    "__version__",
    "build_default_registry",
    "build_table_of_contents",
    "index_document",
    "load_config",
    "load_theme",
]
