from __future__ import annotations

import pytest

from njnsmith.core.nodes import (
    BlockNode,
    contains_header,
    header_title,
    is_list,
    is_true,
    iter_blocks,
    parse_type_name,
    to_kebab,
    to_snake,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("linkList", "link-list"),
        ("Link_List", "link-list"),
        ("link list", "link-list"),
        ("HTMLBlock", "html-block"),
        ("toc", "toc"),
    ],
)
def test_to_kebab(name: str, expected: str) -> None:
    assert to_kebab(name) == expected


def test_to_snake() -> None:
    assert to_snake("jump-top") == "jump_top"
    assert to_snake("linkHref") == "link_href"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, True),
        (False, False),
        ("yes", True),
        ("On", True),
        ("2", True),
        ("0", False),
        ("nope", False),
        (1, True),
        (0.0, False),
        (None, False),
    ],
)
def test_is_true(value: object, expected: bool) -> None:
    assert is_true(value) is expected


def test_parse_type_name_accepts_capitalised_key() -> None:
    assert parse_type_name({"Type": "LinkList"}) == "link-list"
    assert parse_type_name({"type": "  "}) is None
    assert parse_type_name(["content"]) is None


def test_is_list_excludes_strings() -> None:
    assert is_list([1])
    assert is_list((1,))
    assert not is_list("abc")
    assert not is_list({"a": 1})


def test_header_title_joins_strings() -> None:
    assert header_title({"header": ["Hello", {"type": "b"}, "world"]}) == "Hello world"
    assert header_title({"header": " Solo "}) == "Solo"
    assert header_title(None) == ""


def test_block_node_view() -> None:
    view = BlockNode.from_node({"type": "content", "tag": 42, "content": {"header": ["T"]}})

    assert view is not None
    assert view.type_name == "content"
    assert view.tag == "42"
    assert view.title == "T"
    assert BlockNode.from_node({"tag": "x"}) is None


def test_iter_blocks_visits_nested_positions_only() -> None:
    inner = {"type": "content", "content": {"section": [{"type": "p"}]}}
    document = [
        [{"type": "header"}],
        {"type": "sidebar", "content": {"blocks": [inner], "aside": ["skip me"]}},
    ]

    visited = [parse_type_name(node) for node in iter_blocks(document)]

    assert visited == ["header", "sidebar", "content"]
    assert contains_header(document)
    assert not contains_header([inner])


def test_iter_blocks_prune_skips_nested_blocks() -> None:
    inner = {"type": "content"}
    sidebar = {"type": "sidebar", "content": {"blocks": [inner]}}
    document = [sidebar, {"type": "header"}]

    visited = list(iter_blocks(document, prune=lambda node: node is sidebar))

    assert visited == [sidebar, document[1]]
