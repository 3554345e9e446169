"""Default registration list for the NJN block and field handlers."""

from __future__ import annotations

import logging

from njnsmith.blocks import (
    CardBlock,
    CarouselBlock,
    ContentBlock,
    HeaderBlock,
    IconBlock,
    ImageBlock,
    LinkListBlock,
    NoticeBlock,
    PairBlock,
    SidebarBlock,
    TocBlock,
)
from njnsmith.core.config import RendererConfig
from njnsmith.core.registry import FieldHandler, NjnClass, RegistryBuilder, TypeRegistry
from njnsmith.fields import (
    AnchorField,
    CodeField,
    ContainerField,
    DetailsField,
    FieldsetField,
    FigureField,
    FootnoteField,
    IconGlyphField,
    ImageField,
    InlineTagField,
    InputField,
    ListField,
    LiteralField,
    OptionField,
    OptionGroupField,
    ParagraphField,
    PictureField,
    PreField,
    SelectField,
    TableField,
)


logger = logging.getLogger(__name__)


def default_inline_fields(config: RendererConfig) -> list[FieldHandler]:
    return [
        AnchorField(),
        IconGlyphField(),
        FigureField(),
        ImageField(),
        InlineTagField(config.inline_tags),
        InputField(),
        LiteralField(),
        OptionGroupField(),
        OptionField(),
        PictureField(),
        SelectField(),
        FootnoteField(),
    ]


def default_container_fields() -> list[FieldHandler]:
    return [
        DetailsField(),
        ParagraphField(),
        TableField(),
        PreField(),
        LiteralField(names=("hr",), njn_class=NjnClass.CONTAINER),
        CodeField(),
        ContainerField(),
        ListField(),
        FieldsetField(),
    ]


def build_default_registry(config: RendererConfig | None = None) -> TypeRegistry:
    """Register every built-in block, field and string tag."""
    config = config or RendererConfig()
    builder = RegistryBuilder()
    for handler in (*default_inline_fields(config), *default_container_fields()):
        builder.add_field(handler)
    for block in (
        HeaderBlock(),
        NoticeBlock(),
        LinkListBlock(),
        TocBlock(),
        ImageBlock(),
        IconBlock(),
        CardBlock(),
        ContentBlock(),
        CarouselBlock(),
        PairBlock(),
        SidebarBlock(),
    ):
        builder.add_block(block)
    builder.add_string_tags(*config.string_tags)
    registry = builder.build()
    logger.debug(
        "built njn registry: %d blocks, %d fields",
        len(registry.block_names()),
        len(registry.field_names()),
    )
    return registry


__all__ = ["build_default_registry", "default_container_fields", "default_inline_fields"]
