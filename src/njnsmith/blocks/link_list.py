"""Link-list block: decorated anchors rendered as an unordered list."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from njnsmith.core.exceptions import PayloadError
from njnsmith.core.nodes import is_list, parse_type_name
from njnsmith.core.registry import BlockHandler, NjnClass
from njnsmith.core.renderer import NjnRenderer, PreparedBlock

from ._helpers import add_heading, close_block, open_block


def _decorate(anchor: Mapping[str, Any]) -> dict[str, Any]:
    decorated = dict(anchor)
    decorated["decorated"] = "true"
    attrs = dict(decorated.get("attributes") or {})
    classes = attrs.get("class", "")
    if is_list(classes):
        classes = " ".join(str(name) for name in classes)
    names = [name for name in str(classes).split() if name]
    if "decorated" not in names:
        names.append("decorated")
    attrs["class"] = " ".join(names)
    decorated["attributes"] = attrs
    return decorated


class LinkListBlock(BlockHandler):
    name = "link-list"
    njn_class = NjnClass.INLINE

    def prepare(
        self, renderer: NjnRenderer, type_name: str, node: Mapping[str, Any]
    ) -> PreparedBlock:
        self.check_type(type_name)
        content, block = open_block(renderer, self.name, node)
        add_heading(renderer, block, content)

        sections = content.get("section")
        if is_list(sections):
            anchors: list[dict[str, Any]] = []
            for item in sections:
                if not isinstance(item, Mapping):
                    continue
                if parse_type_name(item) != "a":
                    raise PayloadError(
                        f"link-list block has more than just anchor tags: {parse_type_name(item)}"
                    )
                anchors.append(_decorate(item))
            block["section"] = renderer.render_container_fields(
                [{"type": "ul", "list": anchors}]
            )

        close_block(renderer, block, content, footnotes=False)
        return PreparedBlock(self.name, block)


__all__ = ["LinkListBlock"]
