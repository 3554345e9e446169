from __future__ import annotations

import logging

import pytest

from njnsmith.core.headings import (
    HeadingDirectives,
    evaluate_directives,
    parse_directives,
    promote_level,
    resolve_heading,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("+", 1),
        ("inc", 1),
        ("Increment", 1),
        ("-", -1),
        ("dec", -1),
        ("decrement", -1),
        (2, 2),
        ("-2", -2),
        (1.6, 2),
    ],
)
def test_parse_heading_level_words_and_numbers(value: object, expected: int) -> None:
    assert parse_directives({"heading-level": value}).adjust == expected


def test_parse_invalid_directives_logs_errors(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="njnsmith.core.headings"):
        directives = parse_directives({"heading-reset": "top", "heading-level": "up"})

    assert directives == HeadingDirectives()
    assert "heading-reset" in caplog.text
    assert "heading-level" in caplog.text


def test_first_header_is_level_one_then_two() -> None:
    first = resolve_heading({}, current_level=0, heading_count=0)
    assert (first.level, first.next_level) == (1, 2)

    second = resolve_heading({}, current_level=first.next_level, heading_count=1)
    assert (second.level, second.next_level) == (2, 3)


def test_reset_one_always_forces_level_one() -> None:
    outcome = resolve_heading({"heading-reset": 1}, current_level=4, heading_count=3)

    assert outcome.level == 1
    assert outcome.next_level == 1
    assert outcome.explicit_reset


def test_reset_zero_depends_on_heading_count() -> None:
    directives = HeadingDirectives(reset=0)

    assert evaluate_directives(directives, current_level=3, heading_count=0) == 1
    assert evaluate_directives(directives, current_level=3, heading_count=2) == 2


def test_positive_reset_is_literal_and_negative_is_relative() -> None:
    assert evaluate_directives(HeadingDirectives(reset=4), current_level=2, heading_count=1) == 4
    assert evaluate_directives(HeadingDirectives(reset=-1), current_level=4, heading_count=1) == 3


def test_reset_wins_over_level_adjustment() -> None:
    outcome = resolve_heading(
        {"heading-reset": 3, "heading-level": "+"}, current_level=1, heading_count=1
    )
    assert outcome.level == 3


def test_adjustment_is_applied_to_running_level() -> None:
    outcome = resolve_heading({"heading-level": "+"}, current_level=2, heading_count=1)
    assert outcome.level == 3
    assert outcome.next_level == 4


def test_floor_keeps_single_level_one_heading() -> None:
    assert evaluate_directives(HeadingDirectives(adjust=-5), current_level=2, heading_count=0) == 1
    assert evaluate_directives(HeadingDirectives(adjust=-5), current_level=2, heading_count=1) == 2


def test_promote_level_with_header_in_document() -> None:
    assert promote_level(0, 0, is_header=False, document_has_header=True) == 2
    assert promote_level(0, 0, is_header=True, document_has_header=True) == 0
    assert promote_level(2, 1, is_header=False, document_has_header=True) == 2


def test_promote_level_without_header() -> None:
    assert promote_level(0, 0, is_header=False, document_has_header=False) == 1
    assert promote_level(1, 0, is_header=False, document_has_header=False) == 2
    assert promote_level(2, 0, is_header=False, document_has_header=False) == 2
