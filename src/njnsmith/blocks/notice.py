"""Notice block: a dismissible, collapsible message."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup

from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import is_list
from njnsmith.core.registry import BlockHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer, PreparedBlock

from ._helpers import close_block, closed_choice, flag, open_block


NOTICE_TYPES = ("info", "warn", "error")


class NoticeBlock(BlockHandler):
    """Render a notice.

    A notice needs either a ``content.summary`` list of strings or a
    ``content.section`` list; when only sections are given, they become the
    summary.
    """

    name = "notice"
    njn_class = NjnClass.INLINE

    def prepare(
        self, renderer: NjnRenderer, type_name: str, node: Mapping[str, Any]
    ) -> PreparedBlock:
        self.check_type(type_name)
        content, block = open_block(renderer, self.name, node)

        block["dismiss"] = flag(node, "dismiss")
        block["open"] = flag(node, "open")
        block["notice_type"] = closed_choice(
            node, "notice-type", NOTICE_TYPES, label="notice type", default="info"
        )

        sections: list[Markup] = []
        if is_list(content.get("section")):
            try:
                sections = renderer.render_container_fields(content["section"])
            except PayloadError as exc:
                raise PayloadError(f"error preparing notice content section: {exc}") from exc
            block["section"] = sections

        summary = content.get("summary")
        if is_list(summary):
            block["summary"] = Markup(" ".join(item for item in summary if isinstance(item, str)))
        elif sections:
            block["summary"] = Markup("").join(sections)
            del block["section"]
        else:
            raise PayloadError("notice block missing summary and section")

        close_block(renderer, block, content, footnotes=False)
        return PreparedBlock(self.name, block)


__all__ = ["NOTICE_TYPES", "NoticeBlock"]
