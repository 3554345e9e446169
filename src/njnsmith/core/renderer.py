"""Tree walker dispatching NJN blocks and fields to their handlers.

An :class:`NjnRenderer` is created for every document render. It owns the
:class:`RenderContext` and walks the document depth first:

``prepare_page_data``
    flattens the top-level block lists and prepares every block. Blocks that
    fail are replaced by an error block and their counter changes are rolled
    back, so one malformed block never stops the rest of the page.

``render_prepared_block``
    hands prepared data back to the block handler, which renders its
    ``block/<type>`` template.

Field helpers (``render_inline_*`` and ``render_container_*``) are called by
handlers while they prepare, rendering nested fields immediately through the
``field/<type>`` templates.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from html import escape
import json
import logging
from typing import Any

from jinja2 import TemplateError
from markupsafe import Markup

from .attributes import merge_class_names
from .config import RendererConfig
from .context import RenderContext
from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import (
    NjnError,
    PayloadError,
    TemplateNotFoundError,
    TemplateRenderError,
    UnsupportedTypeError,
)
from .headings import promote_level
from .nodes import (
    contains_header,
    default_tag,
    is_list,
    is_true,
    normalise_tag,
    parse_type_name,
)
from .registry import BlockHandler, FieldHandler, NjnClass, TypeRegistry
from .stringtags import PassthroughShortcodes, ShortcodeTranslator, prepare_string_tags
from .templates import TemplateSource, TemplateStore


logger = logging.getLogger(__name__)

LINK_TARGETS = frozenset({"_self", "_blank", "_parent", "_top"})
MAX_HEADING_LEVEL = 6


@dataclass(frozen=True, slots=True)
class PreparedBlock:
    """Successful block preparation."""

    type_name: str
    data: dict[str, Any]
    redirect: str = ""


@dataclass(frozen=True, slots=True)
class BlockFailure:
    """Block preparation that must be replaced by an error block."""

    type_name: str | None
    summary: str
    node: Any = field(repr=False)
    error: NjnError | None = field(default=None, repr=False)


BlockResult = PreparedBlock | BlockFailure


@dataclass(frozen=True, slots=True)
class RenderResult:
    """Markup of a rendered document, or the redirect it asked for."""

    markup: Markup
    redirect: str = ""
    events: tuple[tuple[str, dict[str, Any]], ...] = ()

    @property
    def error_count(self) -> int:
        return sum(1 for name, _ in self.events if name == "block_error")


class NjnRenderer:
    """Single-use tree walker holding the state of one render."""

    def __init__(
        self,
        registry: TypeRegistry,
        templates: TemplateStore,
        *,
        config: RendererConfig | None = None,
        shortcodes: ShortcodeTranslator | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.registry = registry
        self.templates = templates
        self.config = config or RendererConfig()
        self.shortcodes = shortcodes or PassthroughShortcodes()
        self.emitter = emitter or NullEmitter()
        self.context = RenderContext()
        self._failed_nodes: frozenset[int] | None = None

    # -- page --------------------------------------------------------------

    def render(self, document: Any) -> RenderResult:
        """Prepare and render ``document`` into a single markup string."""
        self.context.document_root = document
        self.context.document_has_header = contains_header(document)

        blocks, redirect = self.prepare_page_data(document)
        events = tuple(self.context.events)
        if redirect:
            logger.debug("njn page requested redirect: %s", redirect)
            return RenderResult(markup=Markup(""), redirect=redirect, events=events)

        rendered = [self.render_prepared_block(block) for block in blocks]
        markup = self.render_template("block-list", {"blocks": rendered})
        return RenderResult(markup=markup, events=tuple(self.context.events))

    def prepare_page_data(self, data: Any) -> tuple[list[PreparedBlock], str]:
        """Prepare every block of ``data``, stopping at the first redirect."""
        blocks: list[PreparedBlock] = []
        if is_list(data):
            for item in data:
                prepared, redirect = self.prepare_page_data(item)
                blocks.extend(prepared)
                if redirect:
                    return blocks, redirect
            return blocks, ""

        result = self.prepare_block(data)
        if isinstance(result, BlockFailure):
            blocks.append(self.prepare_error_block(result))
            return blocks, ""
        blocks.append(result)
        return blocks, result.redirect

    def failed_nodes(self, document: Any = None) -> frozenset[int]:
        """Return the ids of the block nodes of ``document`` that fail to prepare.

        A separate walker prepares the page without rendering it, so the
        outline can account for blocks replaced by error blocks. The result
        for the document being rendered is computed once per render.
        """
        own_document = document is None or document is self.context.document_root
        if own_document and self._failed_nodes is not None:
            return self._failed_nodes
        if document is None:
            document = self.context.document_root

        scout = NjnRenderer(
            self.registry, self.templates, config=self.config, shortcodes=self.shortcodes
        )
        scout.context.outline_only = True
        scout.context.document_root = document
        scout.context.document_has_header = contains_header(document)
        scout.prepare_page_data(document)
        failures = frozenset(scout.context.failures)
        if own_document:
            self._failed_nodes = failures
        return failures

    # -- blocks ------------------------------------------------------------

    def prepare_block(self, node: Any) -> BlockResult:
        """Dispatch ``node`` to its block handler.

        Any :class:`NjnError` raised while preparing is returned as a
        :class:`BlockFailure` after the counters are restored to their
        values before the block.
        """
        snapshot = self.context.snapshot()
        type_name = parse_type_name(node)
        try:
            handler = self._find_block(node, type_name)
            with self.context.block_scope():
                prepared = handler.prepare(self, type_name or "", node)
        except NjnError as exc:
            self.context.restore(snapshot)
            self.context.pending_classes = ()
            self.context.failures.add(id(node))
            return BlockFailure(type_name=type_name, summary=str(exc), node=node, error=exc)
        logger.debug("prepared block type: %s", type_name)
        return prepared

    def _find_block(self, node: Any, type_name: str | None) -> BlockHandler:
        if not isinstance(node, Mapping):
            raise PayloadError(f"unsupported njn data type: {type(node).__name__}")
        if type_name is None:
            raise UnsupportedTypeError(None)
        handler = self.registry.find_block(NjnClass.ANY, type_name)
        if handler is None:
            raise UnsupportedTypeError(type_name)
        return handler

    def prepare_nested_block(self, node: Any, *, classes: Sequence[str] = ()) -> PreparedBlock:
        """Prepare a block nested in another block, substituting failures.

        ``classes`` are added to the nested block's ``class`` attribute.
        """
        self.context.pending_classes = tuple(classes)
        try:
            result = self.prepare_block(node)
        finally:
            self.context.pending_classes = ()
        if isinstance(result, BlockFailure):
            return self.prepare_error_block(result)
        return result

    def render_prepared_block(self, block: PreparedBlock, *, substitute: bool = True) -> Markup:
        """Render prepared data with the handler that produced it.

        A failing render is replaced by an error block once; when the error
        block cannot be rendered either, the error propagates.
        """
        handler = self.registry.find_block(NjnClass.ANY, block.type_name)
        try:
            if handler is None:
                raise UnsupportedTypeError(block.type_name)
            html = handler.render(self, block.data)
        except NjnError as exc:
            if not substitute:
                raise
            failure = BlockFailure(
                type_name=block.type_name, summary=str(exc), node=block.data, error=exc
            )
            return self.render_prepared_block(self.prepare_error_block(failure), substitute=False)
        logger.debug(
            "rendered prepared block type: %s (depth=%d)", block.type_name, self.context.depth
        )
        return html

    def prepare_error_block(self, failure: BlockFailure) -> PreparedBlock:
        """Prepare the content block standing in for a failed block."""
        if self.context.outline_only:
            logger.debug(
                "outline pass: %s block fails: %s", failure.type_name, failure.summary
            )
        else:
            logger.error(
                "error processing njn %s block: %s",
                failure.type_name or "<unknown>",
                failure.summary,
                exc_info=failure.error if self.emitter.debug_enabled else None,
            )
            payload = {"type": failure.type_name or "", "summary": failure.summary}
            self.emitter.event("block_error", payload)
            self.context.record_event("block_error", payload)

        node = self.error_block_node(failure.summary, failure.node)
        result = self.prepare_block(node)
        if isinstance(result, BlockFailure):
            # the error block itself cannot be prepared (no content handler)
            raise failure.error or PayloadError(failure.summary)
        return result

    def error_block_node(self, summary: str, original: Any) -> dict[str, Any]:
        """Return the content block describing a failure."""
        details: dict[str, Any] = {"type": "details", "summary": escape(summary)}
        if self.config.error_details:
            dumped = json.dumps(original, indent=2, default=str, ensure_ascii=False)
            details["text"] = [{"type": "pre", "text": escape(dumped)}]
        return {
            "type": "content",
            "class": "njn-error",
            "content": {"section": [details]},
        }

    def render_error_block(self, summary: str, original: Any = None) -> Markup:
        """Prepare and render an error block in one step."""
        failure = BlockFailure(type_name=parse_type_name(original), summary=summary, node=original)
        return self.render_prepared_block(self.prepare_error_block(failure), substitute=False)

    def prepare_generic_block_content(self, node: Mapping[str, Any]) -> Mapping[str, Any]:
        """Return the ``content`` mapping of a block node."""
        content = node.get("content")
        if content is None:
            raise PayloadError("content not found")
        if not isinstance(content, Mapping):
            raise PayloadError(f"unsupported block content: {type(content).__name__}")
        return content

    def prepare_generic_block(self, type_name: str, node: Mapping[str, Any]) -> dict[str, Any]:
        """Apply the decorations shared by every block kind.

        Increments the block counter, makes the block current for footnote
        collection and raises the heading level for blocks seen before the
        first header.
        """
        ctx = self.context
        index = ctx.next_block_index()

        tag = node.get("tag")
        if isinstance(tag, (str, int, float)) and not isinstance(tag, bool) and str(tag):
            tag = normalise_tag(str(tag))
        else:
            tag = default_tag(type_name, index)

        data: dict[str, Any] = {
            "type": type_name,
            "depth": ctx.depth,
            "within_aside": ctx.within_aside,
            "block_index": index,
            "tag": tag,
            "profile": node.get("profile", "outer--inner"),
            "padding": node.get("padding", "both"),
            "margins": node.get("margins", "both"),
            "jump_top": "true" if is_true(node.get("jump-top")) else "false",
            "jump_link": "true" if is_true(node.get("jump-link")) else "false",
        }
        if isinstance(node.get("theme"), str):
            data["theme"] = node["theme"]
        if isinstance(node.get("class"), str):
            merge_class_names(data, node["class"])
        extra_classes = ctx.take_pending_classes()
        if extra_classes:
            merge_class_names(data, *extra_classes)

        link_href = node.get("link-href")
        if isinstance(link_href, str):
            data["link_href"] = link_href
            link_text = node.get("link-text")
            data["link_text"] = Markup(link_text if isinstance(link_text, str) else link_href)
            link_target = node.get("link-target")
            if isinstance(link_target, str):
                if link_target in LINK_TARGETS:
                    data["link_target"] = link_target
                else:
                    self.emitter.warning(f'invalid block link target: "{link_target}"')

        ctx.heading_level = promote_level(
            ctx.heading_level,
            ctx.heading_count,
            is_header=type_name == "header",
            document_has_header=ctx.document_has_header,
        )
        data["heading_level"] = min(max(ctx.heading_level, 1), MAX_HEADING_LEVEL)
        data["heading_count"] = ctx.heading_count
        return data

    def prepare_block_header(self, content: Mapping[str, Any]) -> Markup | None:
        """Render ``content.header`` as inline fields."""
        if "header" not in content:
            return None
        header = content["header"]
        if is_list(header):
            return Markup("").join(self.render_inline_fields(header))
        return self.render_inline_field_list([header])

    def prepare_block_footer(self, content: Mapping[str, Any]) -> Markup | None:
        """Render ``content.footer`` as container fields."""
        footer = content.get("footer")
        if not is_list(footer):
            return None
        return Markup("").join(self.render_container_fields(footer))

    def prepare_footnotes(self, block_index: int | None = None) -> list[dict[str, Any]]:
        """Drain the footnotes collected for the current (or given) block."""
        return self.context.drain_footnotes(block_index)

    # -- text --------------------------------------------------------------

    def prepare_string_tags(self, text: str) -> list[Any]:
        return prepare_string_tags(text, self.registry.string_tags, self.shortcodes)

    def render_text(self, text: str) -> Markup:
        """Render a plain text value, turning string tags into inline fields."""
        if "<" not in text:
            return Markup(self.shortcodes.translate(text))
        parts: list[Markup] = []
        for item in self.prepare_string_tags(text):
            if isinstance(item, str):
                parts.append(Markup(item))
                continue
            name = item["type"]
            if self.registry.find_field(NjnClass.INLINE, name) is None:
                inner = self.render_inline_field_list(item.get("text", []))
                parts.append(Markup(f"<{name}>") + inner + Markup(f"</{name}>"))
            else:
                parts.append(self.render_inline_field(item))
        return Markup("").join(parts)

    # -- inline fields -----------------------------------------------------

    def render_inline_fields(self, fields: Sequence[Any]) -> list[Markup]:
        rendered: list[Markup] = []
        for item in fields:
            if isinstance(item, Mapping):
                rendered.append(self.render_inline_field(item))
            elif isinstance(item, str):
                rendered.append(self.render_text(item))
            elif is_list(item):
                rendered.append(self.render_inline_field_list(item))
            elif isinstance(item, (int, float)) and not isinstance(item, bool):
                rendered.append(Markup(str(item)))
            else:
                raise PayloadError(
                    f"unsupported inline field structure: {type(item).__name__}"
                )
        return rendered

    def render_inline_field(self, field: Mapping[str, Any]) -> Markup:
        type_name = parse_type_name(field)
        if type_name is None:
            raise PayloadError("inline field missing type")
        handler = self.registry.find_field(NjnClass.INLINE, type_name)
        if handler is None:
            raise UnsupportedTypeError(type_name, kind="field")
        return self._render_field(handler, type_name, field)

    def render_inline_field_text(
        self, field: Mapping[str, Any], parent: FieldHandler | None = None
    ) -> Markup:
        """Render the ``text`` of an inline field, policing nested fields."""
        if "text" not in field:
            raise PayloadError(f"missing field text: {parse_type_name(field)}")
        text = field["text"]
        items = list(text) if is_list(text) else [text]
        return self.render_inline_field_list(items, parent=parent)

    def render_inline_field_list(
        self, items: Sequence[Any], parent: FieldHandler | None = None
    ) -> Markup:
        html = Markup("")
        for idx, item in enumerate(items):
            if isinstance(item, str):
                if idx > 0 and isinstance(items[idx - 1], str):
                    html += " "
                html += self.render_text(item)
            elif isinstance(item, Mapping):
                if parent is not None and not self._allowed_in(parent, item):
                    continue
                html += self.render_inline_field(item)
            elif is_list(item):
                html += self.render_inline_field_list(item, parent=parent)
            elif isinstance(item, (int, float)) and not isinstance(item, bool):
                html += str(item)
            else:
                raise PayloadError(f"unsupported text value type: {type(item).__name__}")
        return html

    def _allowed_in(self, parent: FieldHandler, child: Mapping[str, Any]) -> bool:
        name = parse_type_name(child)
        if name is None:
            raise PayloadError("inline field missing type")
        if self.registry.find_field(NjnClass.INLINE, name) is not None:
            child_class = NjnClass.INLINE
        elif self.registry.find_field(NjnClass.CONTAINER, name) is not None:
            child_class = NjnClass.CONTAINER
        else:
            raise UnsupportedTypeError(name, kind="field")

        if parent.allows_child(name, child_class):
            return True

        parent_name = parent.field_type_names()[0]
        reason = f"{child_class.value} field {name} is not allowed within {parent_name}"
        logger.debug("nesting denied: %s", reason)
        payload = {"parent": parent_name, "child": name, "reason": reason}
        self.emitter.event("nesting_denied", payload)
        self.context.record_event("nesting_denied", payload)
        return False

    # -- container fields --------------------------------------------------

    def render_container_fields(self, fields: Sequence[Any]) -> list[Markup]:
        rendered: list[Markup] = []
        for item in fields:
            if isinstance(item, Mapping):
                rendered.append(self.render_container_field(item))
            elif isinstance(item, str):
                rendered.append(self.render_text(item))
            else:
                raise PayloadError(
                    f"unsupported container field structure: {type(item).__name__}"
                )
        return rendered

    def render_container_field(self, field: Mapping[str, Any]) -> Markup:
        type_name = parse_type_name(field)
        if type_name is None:
            raise PayloadError("container field missing type")
        handler = self.registry.find_field(NjnClass.CONTAINER, type_name)
        if handler is None:
            return self.render_inline_field(field)
        return self._render_field(handler, type_name, field)

    def render_container_field_text(self, field: Mapping[str, Any]) -> Markup:
        text = field.get("text")
        if text is None:
            return Markup("")
        if is_list(text):
            return self.render_container_field_list(text)
        if isinstance(text, Mapping):
            return self.render_container_field_list([text])
        return self.render_text(str(text))

    def render_container_field_list(self, items: Sequence[Any]) -> Markup:
        html = Markup("")
        with self.context.nested():
            for idx, item in enumerate(items):
                if isinstance(item, str):
                    if idx > 0:
                        html += " "
                    html += self.render_text(item)
                elif isinstance(item, Mapping):
                    html += self.render_container_field(item)
                elif is_list(item):
                    html += self.render_container_field_list(item)
                else:
                    raise PayloadError(f"unsupported text value type: {type(item).__name__}")
        return html

    def _render_field(
        self, handler: FieldHandler, type_name: str, field: Mapping[str, Any]
    ) -> Markup:
        handler.check_type(type_name)
        data = handler.prepare_data(self, type_name, field)
        data.setdefault("type", type_name)
        names = handler.template_names(type_name)
        return self.render_template(names[0], data, *names[1:])

    # -- templates ---------------------------------------------------------

    def _lookup_template(self, name: str) -> TemplateSource | None:
        cache = self.context.template_cache
        if name in cache:
            logger.debug("found cached njn template: %s", name)
            return cache[name]
        try:
            found: TemplateSource | None = self.templates.get_source(name)
        except TemplateNotFoundError:
            found = None
        cache[name] = found
        if found is not None and found.theme != self.templates.theme.name:
            payload = {"name": name, "theme": found.theme}
            self.emitter.event("template_fallback", payload)
            self.context.record_event("template_fallback", payload)
        return found

    def render_template(self, name: str, data: Mapping[str, Any], *fallbacks: str) -> Markup:
        """Render the first template found among ``name`` and ``fallbacks``."""
        for candidate in (name, *fallbacks):
            if self._lookup_template(candidate) is None:
                continue
            try:
                return self.templates.render(candidate, data)
            except TemplateError as exc:
                raise TemplateRenderError(candidate, str(exc)) from exc
        searched = [theme.name for theme in self.templates.theme.chain()]
        raise TemplateNotFoundError(name, searched)


__all__ = [
    "BlockFailure",
    "BlockResult",
    "NjnRenderer",
    "PreparedBlock",
    "RenderResult",
]
