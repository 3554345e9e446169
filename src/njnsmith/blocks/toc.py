"""Table of contents block built from every heading of the page."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from njnsmith.core.nodes import is_true
from njnsmith.core.registry import BlockHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer, PreparedBlock
from njnsmith.core.toc import TocItem, build_table_of_contents

from ._helpers import close_block, closed_choice, open_block


TOC_COUNTERS = ("nested", "single")


class TocBlock(BlockHandler):
    name = "toc"
    njn_class = NjnClass.INLINE

    def prepare(
        self, renderer: NjnRenderer, type_name: str, node: Mapping[str, Any]
    ) -> PreparedBlock:
        self.check_type(type_name)
        content, block = open_block(renderer, self.name, node, content_required=False)

        block["page_title"] = "true" if is_true(node.get("page-title")) else "false"
        with_self = is_true(node.get("with-self"))
        block["with_self"] = "true" if with_self else "false"
        block["counter"] = closed_choice(
            node, "counter", TOC_COUNTERS, label="toc counter value", default="single"
        )

        self_item: TocItem | None = None
        heading = renderer.prepare_block_header(content)
        if heading is not None:
            block["heading"] = heading
            block["toc_heading"] = heading
            if with_self:
                self_item = TocItem(tag=block["tag"], title=heading)

        if renderer.context.outline_only:
            block["items"] = []
        else:
            block["items"] = build_table_of_contents(
                renderer.context.document_root,
                exclude_tag=block["tag"],
                self_item=self_item,
                failed=renderer.failed_nodes(),
            )
        close_block(renderer, block, content, footnotes=False)
        return PreparedBlock(self.name, block)


__all__ = ["TOC_COUNTERS", "TocBlock"]
