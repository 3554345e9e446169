"""Block handlers shipped with njnsmith."""

from __future__ import annotations

from .card import CardBlock
from .carousel import CarouselBlock
from .content import ContentBlock
from .header import HeaderBlock
from .icon import IconBlock
from .image import ImageBlock
from .link_list import LinkListBlock
from .notice import NoticeBlock
from .pair import PairBlock
from .sidebar import SidebarBlock
from .toc import TocBlock


__all__ = [
    "CardBlock",
    "CarouselBlock",
    "ContentBlock",
    "HeaderBlock",
    "IconBlock",
    "ImageBlock",
    "LinkListBlock",
    "NoticeBlock",
    "PairBlock",
    "SidebarBlock",
    "TocBlock",
]
