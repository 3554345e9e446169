"""Long-lived entry point rendering NJN documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from markupsafe import Markup

from .config import RendererConfig
from .decode import decode_document
from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import DocumentDecodeError
from .registry import TypeRegistry
from .renderer import NjnRenderer, RenderResult
from .stringtags import PassthroughShortcodes, ShortcodeTranslator
from .templates import TemplateStore, load_theme
from .toc import TocItem, build_table_of_contents


class NjnEngine:
    """Renders documents against a registry and a shared template store.

    The engine holds no per-document state: every call to :meth:`render`
    creates a fresh :class:`NjnRenderer`, so one engine may serve concurrent
    renders from several threads.
    """

    def __init__(
        self,
        registry: TypeRegistry | None = None,
        *,
        config: RendererConfig | None = None,
        templates: TemplateStore | None = None,
        shortcodes: ShortcodeTranslator | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = config or RendererConfig()
        if registry is None:
            from njnsmith.wiring import build_default_registry

            registry = build_default_registry(self.config)
        self.registry = registry
        self.templates = templates or TemplateStore(
            load_theme(self.config.theme), suffix=self.config.template_suffix
        )
        self.shortcodes = shortcodes or PassthroughShortcodes()
        self.emitter = emitter or NullEmitter()

    @classmethod
    def from_theme(cls, theme: Path | str, **kwargs: Any) -> NjnEngine:
        config = kwargs.pop("config", None) or RendererConfig()
        config = config.model_copy(update={"theme": Path(theme)})
        return cls(config=config, **kwargs)

    def renderer(self) -> NjnRenderer:
        """Return a fresh tree walker bound to this engine."""
        return NjnRenderer(
            self.registry,
            self.templates,
            config=self.config,
            shortcodes=self.shortcodes,
            emitter=self.emitter,
        )

    def render(self, document: str | bytes | Any) -> RenderResult:
        """Render a document given as JSON text or as an already decoded tree.

        Raises:
            DocumentDecodeError: when JSON text cannot be decoded.
        """
        if isinstance(document, (str, bytes, bytearray)):
            document = decode_document(document)
        return self.renderer().render(document)

    def process(self, content: str | bytes) -> RenderResult:
        """Render JSON text, turning decode failures into a diagnostic page."""
        try:
            return self.render(content)
        except DocumentDecodeError as exc:
            self.emitter.error(f"{exc.kind}: {exc}", exc)
            return RenderResult(markup=self.decode_error_page(exc))

    def decode_error_page(self, error: DocumentDecodeError) -> Markup:
        """Render the diagnostic page highlighting a JSON decoding failure."""
        return self.templates.render(
            "decode-error",
            {
                "title": error.kind,
                "summary": Markup(error.summary_html()),
                "source": Markup(error.diagnostic_html()),
                "offset": error.offset,
                "lineno": error.lineno,
                "colno": error.colno,
            },
        )

    def table_of_contents(self, document: str | bytes | Any) -> list[TocItem]:
        """Return the document outline a ``toc`` block would display."""
        if isinstance(document, (str, bytes, bytearray)):
            document = decode_document(document)
        return build_table_of_contents(
            document, failed=self.renderer().failed_nodes(document)
        )


__all__ = ["NjnEngine"]
