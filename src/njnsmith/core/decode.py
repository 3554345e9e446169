"""Decoding of NJN documents from JSON text."""

from __future__ import annotations

import json
import logging
from typing import Any

from .exceptions import DocumentDecodeError


logger = logging.getLogger(__name__)


def decode_document(content: str | bytes) -> Any:
    """Decode ``content`` into a node tree.

    Raises:
        DocumentDecodeError: when the payload is not valid UTF-8 JSON. The
            error records the offset of the failure so callers can highlight
            it in a diagnostic page.
    """
    if isinstance(content, (bytes, bytearray)):
        raw = bytes(content)
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            # the bytes before the first invalid sequence always decode
            prefix = raw[: exc.start].decode("utf-8")
            raise DocumentDecodeError(
                exc.reason,
                source=raw.decode("utf-8", errors="replace"),
                offset=len(prefix),
                lineno=prefix.count("\n") + 1,
                colno=len(prefix) - prefix.rfind("\n"),
                kind="json decoding error",
            ) from exc
    else:
        text = content

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.debug("json syntax error at offset %d: %s", exc.pos, exc.msg)
        raise DocumentDecodeError(
            exc.msg,
            source=text,
            offset=exc.pos,
            lineno=exc.lineno,
            colno=exc.colno,
        ) from exc


__all__ = ["decode_document"]
