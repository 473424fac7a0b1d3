"""Line-delimited JSON-RPC over stdio.

One request is processed to completion before the next line is handled;
malformed lines are skipped and the stream stays usable.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable

from effect_solutions.protocol.framing import LineBuffer, decode_message, encode_message
from effect_solutions.protocol.session import ProtocolSession

logger = logging.getLogger("effect-solutions.protocol")

READ_CHUNK_SIZE = 64 * 1024

Writer = Callable[[bytes], Awaitable[None]]


async def process_line(session: ProtocolSession, line: bytes, write: Writer) -> None:
    message = decode_message(line)
    if message is None:
        return
    response = session.handle(message)
    if response is not None:
        await write(encode_message(response))


async def serve_stream(session: ProtocolSession, reader: asyncio.StreamReader, write: Writer) -> None:
    """Serve requests from ``reader`` until EOF, then close the session."""
    buffer = LineBuffer()
    try:
        while True:
            chunk = await reader.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            for line in buffer.feed(chunk):
                await process_line(session, line, write)

        tail = buffer.flush()
        if tail:
            await process_line(session, tail, write)
    finally:
        session.close()


async def _stdin_reader() -> asyncio.StreamReader:
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)
    return reader


async def _write_stdout(data: bytes) -> None:
    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()


async def serve_stdio(session: ProtocolSession) -> None:
    """Serve one MCP session over this process's stdin/stdout."""
    logger.info("Serving MCP over stdio")
    reader = await _stdin_reader()
    await serve_stream(session, reader, _write_stdout)
