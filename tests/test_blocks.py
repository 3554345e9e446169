from __future__ import annotations

from typing import Any

import pytest

from njnsmith import NjnEngine
from njnsmith.core.renderer import RenderResult


def _content(title: str, **extra: Any) -> dict[str, Any]:
    return {"type": "content", "content": {"header": [title]}, **extra}


def _card(tag: str, src: str = "bg.jpg") -> dict[str, Any]:
    return {
        "type": "card",
        "tag": tag,
        "content": {
            "header": [f"Card {tag}"],
            "background": {"type": "picture", "default": {"src": src}},
        },
    }


@pytest.fixture(scope="module")
def engine() -> NjnEngine:
    return NjnEngine()


def _render(engine: NjnEngine, *blocks: Any) -> tuple[str, RenderResult]:
    result = engine.render(list(blocks))
    return str(result.markup), result


def _assert_error(engine: NjnEngine, block: dict[str, Any], message: str) -> None:
    html, result = _render(engine, block)
    assert result.error_count == 1, html
    assert message in html


def test_block_without_content_is_rejected(engine: NjnEngine) -> None:
    _assert_error(engine, {"type": "content"}, "content not found")


def test_header_nav_accepts_anchors(engine: NjnEngine) -> None:
    header = {
        "type": "header",
        "content": {
            "header": ["Site"],
            "nav": [{"type": "a", "href": "/", "text": ["Home"]}],
        },
    }

    html, _ = _render(engine, header)

    assert '<nav class="njn-header-nav">' in html
    assert '<a href="/">Home</a>' in html


def test_header_nav_rejects_other_fields(engine: NjnEngine) -> None:
    header = {"type": "header", "content": {"nav": [{"type": "p", "text": ["x"]}]}}
    _assert_error(engine, header, "unsupported heading nav item type: p")


def test_notice_renders_summary_and_dismiss(engine: NjnEngine) -> None:
    notice = {
        "type": "notice",
        "notice-type": "WARN",
        "dismiss": True,
        "content": {"summary": ["Heads", "up"]},
    }

    html, _ = _render(engine, notice)

    assert 'data-notice-type="warn"' in html
    assert "<summary>Heads up</summary>" in html
    assert 'class="njn-notice-dismiss"' in html


def test_notice_uses_sections_as_summary(engine: NjnEngine) -> None:
    notice = {"type": "notice", "content": {"section": [{"type": "p", "text": ["Body"]}]}}

    html, _ = _render(engine, notice)

    assert 'data-notice-type="info"' in html
    assert "<summary><p>Body</p></summary>" in html


@pytest.mark.parametrize(
    ("block", "message"),
    [
        (
            {"type": "notice", "notice-type": "bogus", "content": {"summary": ["x"]}},
            "invalid notice type: bogus",
        ),
        ({"type": "notice", "content": {}}, "notice block missing summary and section"),
        (
            {"type": "image", "size": "giant", "content": {"picture": {"type": "picture"}}},
            "invalid image block size: giant",
        ),
        ({"type": "image", "content": {}}, "image block missing picture"),
        (
            {"type": "toc", "counter": "double"},
            "invalid toc counter value: double",
        ),
        (
            {"type": "pair", "pair-order": "sideways", "content": {}},
            "invalid pair block order: sideways",
        ),
        (
            {"type": "carousel", "nav-ctrl-style": "dots", "content": {}},
            "invalid nav-ctrl-style: dots",
        ),
    ],
)
def test_closed_value_sets_are_enforced(
    engine: NjnEngine, block: dict[str, Any], message: str
) -> None:
    _assert_error(engine, block, message)


def test_link_list_decorates_anchors(engine: NjnEngine) -> None:
    block = {
        "type": "link-list",
        "content": {
            "header": ["Links"],
            "section": [{"type": "a", "href": "/a", "text": ["A"]}],
        },
    }

    html, _ = _render(engine, block)

    assert '<li><a href="/a" class="decorated">A</a></li>' in html


def test_link_list_rejects_non_anchor_items(engine: NjnEngine) -> None:
    block = {"type": "link-list", "content": {"section": [{"type": "p", "text": ["x"]}]}}
    _assert_error(engine, block, "link-list block has more than just anchor tags: p")


def test_image_block_renders_picture(engine: NjnEngine) -> None:
    block = {
        "type": "image",
        "size": "banner",
        "content": {
            "picture": {
                "type": "picture",
                "default": {"src": "hero.jpg", "alt": "Hero"},
                "sources": [{"srcset": "hero-wide.jpg", "media": "(min-width: 800px)"}],
            }
        },
    }

    html, _ = _render(engine, block)

    assert 'data-size="banner"' in html
    assert 'data-fitting="cover"' in html
    assert '<source srcset="hero-wide.jpg" media="(min-width: 800px)">' in html
    assert '<img src="hero.jpg" alt="Hero">' in html


def test_icon_block(engine: NjnEngine) -> None:
    block = {
        "type": "icon",
        "content": {"icon": {"class": ["fa", "fa-star"], "name": "Star", "align": "left"}},
    }

    html, _ = _render(engine, block)

    assert 'class="njn-icon njn-icon-left"' in html
    assert '<i class="fa fa-star" title="Star"></i>' in html


def test_icon_block_requires_a_name(engine: NjnEngine) -> None:
    block = {"type": "icon", "content": {"icon": {"class": "fa fa-star"}}}
    _assert_error(engine, block, "icon block missing icon name")


def test_card_requires_picture_background(engine: NjnEngine) -> None:
    block = {
        "type": "card",
        "content": {"background": {"type": "img", "src": "x.png"}},
    }
    _assert_error(engine, block, "card block background is not a picture field: img")


def test_carousel_links_cards_in_a_ring(engine: NjnEngine) -> None:
    carousel = {"type": "carousel", "content": {"section": [_card("a"), _card("b"), _card("c")]}}

    html, result = _render(engine, carousel)

    assert result.error_count == 0
    assert 'data-last-card="2"' in html
    assert 'data-card-index="0" data-previous-card="c" data-next-card="b"' in html
    assert 'data-card-index="2" data-previous-card="b" data-next-card="a"' in html
    assert 'id="a" class="njn-block njn-card" data-depth="1"' in html


def test_single_card_wraps_to_itself(engine: NjnEngine) -> None:
    carousel = {"type": "carousel", "content": {"section": [_card("solo")]}}

    html, _ = _render(engine, carousel)

    assert 'data-card-index="0" data-previous-card="solo" data-next-card="solo"' in html


@pytest.mark.parametrize(
    ("content", "bookends", "message"),
    [
        ({"section": [_content("x")]}, 0, "carousel item is not a card: content"),
        ({"section": []}, 0, "at least one card is required"),
        ({"section": [_card("a")]}, 3, "too many bookends specified (3), 0-2 allowed"),
    ],
)
def test_carousel_validation(
    engine: NjnEngine, content: dict[str, Any], bookends: int, message: str
) -> None:
    block = {"type": "carousel", "bookends": bookends, "content": content}
    _assert_error(engine, block, message)


def test_pair_marks_and_orders_its_items(engine: NjnEngine) -> None:
    pair = {
        "type": "pair",
        "pair-order": "reverse",
        "content": {"section": [_content("Left"), _content("Right")]},
    }

    html, _ = _render(engine, pair)

    assert 'class="njn-block njn-content first content"' in html
    assert 'class="njn-block njn-content second content"' in html
    assert html.index("Right") < html.index("Left")
    assert 'data-pair-order="reverse"' in html


def test_pair_requires_two_items(engine: NjnEngine) -> None:
    pair = {"type": "pair", "content": {"section": [_content("Alone")]}}
    _assert_error(engine, pair, "pair block requires two items, 1 present")


def test_sidebar_marks_aside_blocks(engine: NjnEngine) -> None:
    sidebar = {
        "type": "sidebar",
        "side": "right",
        "content": {"blocks": [_content("Main")], "aside": [_content("Aside")]},
    }

    html, _ = _render(engine, sidebar)

    assert 'data-side="right"' in html
    assert 'id="content-2" class="njn-block njn-content" data-depth="0"' in html
    assert 'data-depth="1" data-profile="outer--inner" data-padding="both"' in html
    assert 'data-aside="true"' in html


def test_nested_failures_become_inline_error_blocks(engine: NjnEngine) -> None:
    sidebar = {
        "type": "sidebar",
        "content": {"blocks": [{"type": "bogus"}, _content("Still here")]},
    }

    html, result = _render(engine, sidebar)

    assert result.error_count == 1
    assert "unsupported block type: bogus" in html
    assert "Still here" in html
    assert "njn-sidebar" in html


def test_toc_block_lists_page_headings(engine: NjnEngine) -> None:
    document = [
        {"type": "header", "content": {"header": ["Site"]}},
        {"type": "toc", "content": {"header": ["Contents"]}},
        _content("Intro"),
        _content("Usage"),
    ]

    html, _ = _render(engine, *document)

    assert '<h2 class="njn-heading">Contents</h2>' in html
    assert '<a href="#content-3">Intro</a>' in html
    assert '<a href="#content-4">Usage</a>' in html
    assert 'href="#toc-2"' not in html


def test_toc_block_with_self_lists_itself_first(engine: NjnEngine) -> None:
    document = [
        {"type": "header", "content": {"header": ["Site"]}},
        {"type": "toc", "tag": "contents", "with-self": True, "content": {"header": ["Contents"]}},
        _content("Intro"),
    ]

    html, _ = _render(engine, *document)

    assert html.index('<a href="#contents">Contents</a>') < html.index('<a href="#content-3">')
    assert '<h2 class="njn-heading">Contents</h2>' not in html


def test_toc_block_inside_pair_leaves_itself_out(engine: NjnEngine) -> None:
    pair = {
        "type": "pair",
        "content": {
            "section": [
                {"type": "toc", "content": {"header": ["Contents"]}},
                _content("Side"),
            ]
        },
    }
    document = [{"type": "header", "content": {"header": ["Site"]}}, pair, _content("Body")]

    html, _ = _render(engine, *document)

    assert 'href="#toc-3"' not in html
    assert html.count(">Contents<") == 1
    assert 'class="njn-block njn-toc first toc' in html
    assert '<a href="#content-4">Side</a>' in html
    assert '<a href="#content-5">Body</a>' in html
