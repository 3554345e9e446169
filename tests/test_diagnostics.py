from __future__ import annotations

import logging

import pytest

from njnsmith import NjnEngine
from njnsmith.core.diagnostics import (
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    format_event_message,
)
from njnsmith.core.exceptions import exception_hint, exception_messages
from njnsmith.ui.cli.diagnostics import CliEmitter
from njnsmith.ui.cli.state import debug_enabled, emit_error, get_cli_state, set_cli_state


def test_null_emitter_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    emitter = NullEmitter()
    with caplog.at_level(logging.WARNING):
        emitter.warning("nothing to see")
        emitter.error("still quiet")
    assert not caplog.records
    emitter.event("ignored", {"value": 1})
    assert emitter.debug_enabled is False
    assert isinstance(emitter, DiagnosticEmitter)


def test_logging_emitter_logs_messages(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(debug_enabled=True)
    with caplog.at_level(logging.INFO, logger="njnsmith.core.diagnostics"):
        emitter.error("boom")
        emitter.event("block_error", {"type": "notice", "summary": "bad"})
    messages = [record.getMessage() for record in caplog.records]
    assert "boom" in messages
    assert "Replaced notice block with an error block: bad" in messages
    assert emitter.debug_enabled is True


def test_format_event_message() -> None:
    assert format_event_message("template_fallback", {"name": "field/p", "theme": "default"}) == (
        "Template field/p resolved from parent theme default"
    )
    assert format_event_message("block_error", {}) == (
        "Replaced <unknown> block with an error block: error"
    )
    assert format_event_message("nesting_denied", {"parent": "a"}) is None


def test_engine_forwards_events_to_emitter(caplog: pytest.LogCaptureFixture) -> None:
    engine = NjnEngine(emitter=LoggingEmitter())

    with caplog.at_level(logging.INFO):
        result = engine.render([{"type": "bogus"}])

    assert result.error_count == 1
    assert "Replaced bogus block with an error block: unsupported block type: bogus" in (
        caplog.text
    )
    assert "error processing njn bogus block" in caplog.text


def test_cli_emitter_bridges_state(capsys: pytest.CaptureFixture[str]) -> None:
    state = set_cli_state(verbosity=1, debug=False)
    emitter = CliEmitter(state=state)

    emitter.warning("Heads up", exc=None)
    emitter.error("Boom", exc=None)
    emitter.event("template_fallback", {"name": "block/toc", "theme": "default"})

    captured = capsys.readouterr()
    assert "Heads up" in captured.err
    assert "Boom" in captured.err
    assert "block/toc" in captured.err
    assert state.events_named("template_fallback") == [
        {"name": "block/toc", "theme": "default"}
    ]
    assert emitter.debug_enabled is False


def test_set_cli_state_starts_a_fresh_state() -> None:
    first = set_cli_state(verbosity=2, debug=True)
    first.record_event("block_error", {"type": "bogus"})

    second = set_cli_state()

    assert get_cli_state() is second
    assert second.events == []
    assert second.verbosity == 0
    assert debug_enabled() is False


def test_error_details_follow_verbosity(capsys: pytest.CaptureFixture[str]) -> None:
    try:
        try:
            raise ValueError("root cause")
        except ValueError as exc:
            raise RuntimeError("wrapper") from exc
    except RuntimeError as error:
        set_cli_state(verbosity=0)
        emit_error("failed", exception=error)
        quiet = capsys.readouterr().err

        set_cli_state(verbosity=1)
        emit_error("failed", exception=error)
        hinted = capsys.readouterr().err

        set_cli_state(verbosity=2)
        emit_error("failed", exception=error)
        chained = capsys.readouterr().err

    assert "root cause" not in quiet
    assert "type: RuntimeError" in hinted
    assert "cause: root cause" in hinted
    assert "caused by:" in chained
    assert "root cause" in chained


def test_engine_reports_decode_errors_through_emitter(caplog: pytest.LogCaptureFixture) -> None:
    engine = NjnEngine(emitter=LoggingEmitter())

    with caplog.at_level(logging.ERROR, logger="njnsmith.core.diagnostics"):
        result = engine.process("[")

    assert 'id="json-error"' in result.markup
    assert "json syntax error: " in caplog.text


def test_invalid_link_target_is_reported_as_warning(caplog: pytest.LogCaptureFixture) -> None:
    engine = NjnEngine(emitter=LoggingEmitter())
    document = [
        {
            "type": "content",
            "link-href": "/next",
            "link-target": "_new",
            "content": {"section": ["x"]},
        }
    ]

    with caplog.at_level(logging.WARNING, logger="njnsmith.core.diagnostics"):
        html = engine.render(document).markup

    assert 'invalid block link target: "_new"' in caplog.text
    assert "target=" not in html


def test_exception_hint_reports_root_cause() -> None:
    try:
        try:
            raise ValueError("root cause")
        except ValueError as exc:
            raise RuntimeError("wrapper") from exc
    except RuntimeError as error:
        assert exception_messages(error) == ["wrapper", "root cause"]
        assert exception_hint(error) == "root cause"
