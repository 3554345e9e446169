"""Field handlers shipped with njnsmith."""

from __future__ import annotations

from .code import CodeField, PreField
from .forms import FieldsetField, InputField, OptionField, OptionGroupField, SelectField
from .inline import FootnoteField, IconGlyphField, InlineTagField, LiteralField
from .links import AnchorField
from .lists import ListField
from .media import FigureField, ImageField, PictureField
from .structure import ContainerField, DetailsField, ParagraphField
from .table import TableField


__all__ = [
    "AnchorField",
    "CodeField",
    "ContainerField",
    "DetailsField",
    "FieldsetField",
    "FigureField",
    "FootnoteField",
    "IconGlyphField",
    "ImageField",
    "InlineTagField",
    "InputField",
    "ListField",
    "LiteralField",
    "OptionField",
    "OptionGroupField",
    "ParagraphField",
    "PictureField",
    "PreField",
    "SelectField",
    "TableField",
]
