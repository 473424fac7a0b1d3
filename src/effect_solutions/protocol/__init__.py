"""MCP protocol front end: framing, session state machine and stdio loop."""

from effect_solutions.protocol.framing import LineBuffer, decode_message, encode_message
from effect_solutions.protocol.session import ProtocolSession, SessionState
from effect_solutions.protocol.stdio import serve_stdio, serve_stream

__all__ = [
    "LineBuffer",
    "ProtocolSession",
    "SessionState",
    "decode_message",
    "encode_message",
    "serve_stdio",
    "serve_stream",
]
