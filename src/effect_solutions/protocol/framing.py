"""Newline-delimited message framing.

Input arrives as arbitrary byte chunks. ``LineBuffer`` accumulates them and
yields complete lines; a partial line stays buffered until its terminator
arrives in a later chunk.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from effect_solutions.protocol.jsonrpc import JSONRPC_VERSION

logger = logging.getLogger("effect-solutions.protocol")


class LineBuffer:
    """Accumulate bytes and split them on ``\\n``.

    Usage:
        >>> buffer = LineBuffer()
        >>> buffer.feed(b'{"a": 1}\\n{"b"')
        [b'{"a": 1}']
        >>> buffer.feed(b': 2}\\n')
        [b'{"b": 2}']
    """

    def __init__(self) -> None:
        self._pending = bytearray()

    @property
    def pending(self) -> bytes:
        return bytes(self._pending)

    def feed(self, chunk: bytes) -> list[bytes]:
        self._pending.extend(chunk)
        if b"\n" not in chunk:
            return []

        *lines, rest = bytes(self._pending).split(b"\n")
        self._pending = bytearray(rest)
        return [line.rstrip(b"\r") for line in lines]

    def flush(self) -> bytes | None:
        """Return and clear any unterminated trailing data (used at EOF)."""
        if not self._pending:
            return None
        rest = bytes(self._pending).rstrip(b"\r")
        self._pending.clear()
        return rest


def decode_message(line: bytes | str) -> dict[str, Any] | None:
    """Decode one line into a JSON-RPC request or notification.

    Returns None for blank lines and for anything that is not a JSON object
    with ``jsonrpc: "2.0"`` and a string ``method``; such lines are skipped.
    """
    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Skipping non-UTF-8 line")
            return None

    text = line.strip()
    if not text:
        return None

    try:
        message = json.loads(text)
    except json.JSONDecodeError:
        logger.debug("Skipping non-JSON line: %.80s", text)
        return None

    if not isinstance(message, dict):
        logger.debug("Skipping non-object message: %.80s", text)
        return None
    if message.get("jsonrpc") != JSONRPC_VERSION or not isinstance(message.get("method"), str):
        logger.debug("Skipping message without a JSON-RPC 2.0 envelope: %.80s", text)
        return None
    return message


def encode_message(message: dict[str, Any]) -> bytes:
    return (json.dumps(message, ensure_ascii=False) + "\n").encode("utf-8")
