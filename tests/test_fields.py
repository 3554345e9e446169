from __future__ import annotations

from typing import Any

import pytest

from njnsmith import NjnEngine
from njnsmith.core.exceptions import PayloadError
from njnsmith.core.renderer import NjnRenderer
from njnsmith.fields import ListField
from njnsmith.fields.highlight import PygmentsHtmlHighlighter


@pytest.fixture(scope="module")
def engine() -> NjnEngine:
    return NjnEngine()


@pytest.fixture
def renderer(engine: NjnEngine) -> NjnRenderer:
    return engine.renderer()


def _render(renderer: NjnRenderer, field: dict[str, Any]) -> str:
    return str(renderer.render_container_field(field))


def _payload_error(renderer: NjnRenderer, field: dict[str, Any]) -> str:
    with pytest.raises(PayloadError) as excinfo:
        renderer.render_container_field(field)
    return str(excinfo.value)


def test_unordered_list(renderer: NjnRenderer) -> None:
    html = _render(renderer, {"type": "ul", "list": ["One", {"type": "b", "text": ["Two"]}]})

    assert html.startswith("<ul>")
    assert "<li>One</li>" in html
    assert "<li><b>Two</b></li>" in html


def test_list_requires_items(renderer: NjnRenderer) -> None:
    assert _payload_error(renderer, {"type": "ol"}) == "ordered list missing list"


def test_list_field_rejects_foreign_names() -> None:
    with pytest.raises(PayloadError):
        ListField(names=("dl",))


def test_table_head_and_body(renderer: NjnRenderer) -> None:
    table = {
        "type": "table",
        "attributes": {"class": "grid"},
        "head": [{"type": "th", "text": ["Name"]}],
        "body": [
            {
                "type": "tr",
                "data": [{"type": "td", "text": ["Ada"]}, {"type": "th", "text": ["skipped"]}],
            }
        ],
    }

    html = _render(renderer, table)

    assert '<table class="grid">' in html
    assert "<th>Name</th>" in html
    assert "<td>Ada</td>" in html
    assert "skipped" not in html


def test_table_rejects_unexpected_rows(renderer: NjnRenderer) -> None:
    head = {"type": "table", "head": [{"type": "td", "text": ["x"]}]}
    body = {"type": "table", "body": [{"type": "td"}]}
    cell = {"type": "table", "body": [{"type": "tr", "data": ["loose"]}]}

    assert _payload_error(renderer, head) == "unsupported table heading type: td [index=0]"
    assert _payload_error(renderer, body) == "unsupported table row type: td [index=0]"
    assert _payload_error(renderer, cell) == "body row data is not a map: str"


def test_code_is_escaped_and_joined(renderer: NjnRenderer) -> None:
    html = _render(renderer, {"type": "code", "code": ["a < b", "c"]})

    assert html.strip() == "<pre><code>a &lt; b\nc</code></pre>"


def test_decorated_code_keeps_lines(renderer: NjnRenderer) -> None:
    html = _render(renderer, {"type": "code", "decorated": True, "code": ["a", "b"]})

    assert '<pre class="decorated">' in html
    assert '<span class="njn-code-line">a</span>' in html
    assert '<span class="njn-code-line">b</span>' in html


def test_code_language_is_highlighted(renderer: NjnRenderer) -> None:
    html = _render(renderer, {"type": "code", "language": "python", "code": ["x = 1"]})

    assert '<pre class="language-python">' in html
    assert '<span class="o">=</span>' in html


def test_highlighter_falls_back_to_plain_text() -> None:
    highlighter = PygmentsHtmlHighlighter()

    assert str(highlighter.render("a < b", "no-such-language")) == "a &lt; b"
    lines = highlighter.render_lines(["x = 1", "y"], "python")
    assert len(lines) == 2
    assert "<span" in lines[0]


def test_pre_text_is_kept_verbatim(renderer: NjnRenderer) -> None:
    assert _render(renderer, {"type": "pre", "text": "  keep  <i>x</i>"}) == (
        "<pre>  keep  <i>x</i></pre>"
    )


def test_details(renderer: NjnRenderer) -> None:
    details = {
        "type": "details",
        "summary": ["More"],
        "open": "yes",
        "text": [{"type": "p", "text": ["Hidden"]}],
    }

    html = _render(renderer, details)

    assert html.startswith("<details open>")
    assert "<summary>More</summary>" in html
    assert "<p>Hidden</p>" in html
    assert _payload_error(renderer, {"type": "details"}) == "details field missing summary"


def test_container_attributes(renderer: NjnRenderer) -> None:
    div = {
        "type": "div",
        "attributes": {"class": ["a", "b"], "data-x": 1, "hidden": None},
        "text": ["Hi"],
    }

    html = _render(renderer, div)

    assert html.startswith('<div class="a b" data-x="1" hidden>')
    assert "Hi" in html


def test_paragraph_drops_container_children(renderer: NjnRenderer) -> None:
    paragraph = {"type": "p", "text": ["Hi", {"type": "div", "text": ["x"]}]}

    assert _render(renderer, paragraph) == "<p>Hi</p>"
    assert [name for name, _ in renderer.context.events] == ["nesting_denied"]


def test_adjacent_strings_are_space_separated(renderer: NjnRenderer) -> None:
    assert _render(renderer, {"type": "p", "text": ["one", "two", 3]}) == "<p>one two3</p>"


def test_anchor_variants(renderer: NjnRenderer) -> None:
    nested = {"type": "a", "href": "/in", "text": ["inner"]}
    anchor = {"type": "a", "href": "/out", "decorated": True, "target": "_blank", "text": [nested]}

    html = _render(renderer, anchor)

    assert html == '<a href="/out" class="decorated" target="_blank">/out</a>'
    assert _render(renderer, {"type": "a"}) == '<a href="#">#</a>'


def test_figure_with_caption(renderer: NjnRenderer) -> None:
    figure = {"type": "figure", "img": {"src": "a.png", "alt": "A"}, "caption": ["Cap"]}

    html = _render(renderer, figure)

    assert '<img src="a.png" alt="A">' in html
    assert "<figcaption>Cap</figcaption>" in html


def test_picture_validation(renderer: NjnRenderer) -> None:
    missing_default = {"type": "picture"}
    missing_src = {"type": "picture", "default": {"alt": "x"}}
    missing_media = {"type": "picture", "default": {"src": "a"}, "sources": [{"srcset": "b"}]}

    assert _payload_error(renderer, missing_default) == "picture field missing default image"
    assert _payload_error(renderer, missing_src) == "picture field default img missing src"
    assert _payload_error(renderer, missing_media) == "picture field source missing media"


def test_select_with_options(renderer: NjnRenderer) -> None:
    select = {
        "type": "select",
        "name": "size",
        "options": [
            {"type": "option", "text": ["Small"], "value": "s"},
            {
                "type": "optgroup",
                "label": "Big",
                "options": [{"type": "option", "text": ["Large"], "selected": True}],
            },
        ],
    }

    html = _render(renderer, select)

    assert html.startswith('<select name="size">')
    assert '<option value="s">Small</option>' in html
    assert '<optgroup label="Big">' in html
    assert '<option value="Large" selected>Large</option>' in html


def test_select_rejects_unknown_options(renderer: NjnRenderer) -> None:
    select = {"type": "select", "options": [{"type": "p", "text": ["x"]}]}

    assert _payload_error(renderer, select) == "unsupported select option type: p"
    assert _payload_error(renderer, {"type": "select"}) == "select missing options"


def test_input_and_fieldset(renderer: NjnRenderer) -> None:
    fieldset = {
        "type": "fieldset",
        "legend": ["Contact"],
        "text": [{"type": "input", "input-type": "email", "name": "mail"}],
    }

    html = _render(renderer, fieldset)

    assert "<legend>Contact</legend>" in html
    assert '<input type="email" name="mail">' in html


def test_icon_glyph(renderer: NjnRenderer) -> None:
    glyph = {"type": "fa", "class": "fa-solid fa-star", "title": "Star"}

    assert _render(renderer, glyph) == (
        '<i class="fa-solid fa-star" title="Star" aria-hidden="true"></i>'
    )
    assert _payload_error(renderer, {"type": "fa"}) == "fa field missing class"


def test_literals(renderer: NjnRenderer) -> None:
    assert _render(renderer, {"type": "br"}) == "<br>"
    assert _render(renderer, {"type": "hr"}) == "<hr>"


def test_footnote_requires_a_note(renderer: NjnRenderer) -> None:
    assert _payload_error(renderer, {"type": "footnote", "text": ["x"]}) == (
        "footnote missing note"
    )


def test_footnotes_do_not_nest(renderer: NjnRenderer) -> None:
    inner = {"type": "footnote", "text": ["inner"], "note": ["n"]}
    outer = {"type": "footnote", "text": ["outer", inner], "note": ["m"]}

    html = _render(renderer, outer)

    assert "inner" not in html
    assert len(renderer.context.footnotes) == 1
