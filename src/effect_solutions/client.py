"""Stdio client for the Effect Solutions MCP server.

Spawns ``python -m effect_solutions.server`` as a subprocess and exchanges
newline-delimited JSON-RPC messages with it. Responses are matched to
requests by id through a pending-request table, so several requests may be
in flight at once.

Usage:
    async with StdioClient() as client:
        await client.initialize()
        tools = await client.list_tools()
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from effect_solutions import __version__
from effect_solutions.errors import ProtocolError
from effect_solutions.protocol.framing import LineBuffer, encode_message
from effect_solutions.protocol.jsonrpc import jsonrpc_notification, jsonrpc_request

logger = logging.getLogger("effect-solutions.client")

DEFAULT_REQUEST_TIMEOUT_S = 30.0


def default_server_command() -> list[str]:
    return [sys.executable, "-m", "effect_solutions.server"]


class StdioClient:
    """Async request/response client over a server subprocess's stdio."""

    def __init__(
        self,
        command: Sequence[str] | None = None,
        env: Mapping[str, str] | None = None,
        request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S,
    ) -> None:
        self.command = list(command or default_server_command())
        self.env = dict(os.environ if env is None else env)
        self.request_timeout_s = request_timeout_s

        self._process: asyncio.subprocess.Process | None = None
        self._receiver_task: asyncio.Task[Any] | None = None
        self._pending_requests: dict[int, asyncio.Future[dict[str, Any]]] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()
        self.server_info: dict[str, Any] | None = None

    @property
    def connected(self) -> bool:
        return self._process is not None and self._process.returncode is None

    async def __aenter__(self) -> StdioClient:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def start(self) -> None:
        async with self._lock:
            if self._process is not None:
                return
            self._process = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
                env=self.env,
            )
            self._receiver_task = asyncio.create_task(self._receive_loop())
            logger.info("Started server: %s", " ".join(self.command))

    async def close(self) -> None:
        """Close stdin (the server exits at EOF) and wait for the process."""
        async with self._lock:
            process = self._process
            receiver_task = self._receiver_task
            self._process = None
            self._receiver_task = None

        if process is not None:
            if process.stdin is not None and not process.stdin.is_closing():
                process.stdin.close()
            try:
                await asyncio.wait_for(process.wait(), timeout=self.request_timeout_s)
            except asyncio.TimeoutError:
                logger.warning("Server did not exit after stdin closed; killing it")
                process.kill()
                await process.wait()

        if receiver_task is not None:
            receiver_task.cancel()
            try:
                await receiver_task
            except asyncio.CancelledError:
                pass

        self._fail_pending(ConnectionError("Client closed"))

    def _fail_pending(self, exc: Exception) -> None:
        pending = list(self._pending_requests.values())
        self._pending_requests.clear()
        for future in pending:
            if not future.done():
                future.set_exception(exc)

    async def _receive_loop(self) -> None:
        assert self._process is not None and self._process.stdout is not None
        stdout = self._process.stdout
        buffer = LineBuffer()
        try:
            while True:
                chunk = await stdout.read(64 * 1024)
                if not chunk:
                    break
                for line in buffer.feed(chunk):
                    self._handle_line(line)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Client receive loop stopped: %s", exc)
        finally:
            self._fail_pending(ConnectionError("Server connection lost"))

    def _handle_line(self, line: bytes) -> None:
        if not line.strip():
            return
        try:
            payload = json.loads(line)
        except ValueError:
            logger.debug("Ignoring non-JSON line from server: %.80r", line)
            return
        if not isinstance(payload, dict):
            return
        request_id = payload.get("id")
        if not isinstance(request_id, (str, int)) or isinstance(request_id, bool):
            logger.debug("Ignoring server message without a usable id: %.80r", line)
            return
        future = self._pending_requests.pop(request_id, None)
        if future is not None and not future.done():
            future.set_result(payload)

    async def _send(self, message: dict[str, Any]) -> None:
        if not self.connected:
            raise ConnectionError("Server is not running")
        assert self._process is not None and self._process.stdin is not None
        self._process.stdin.write(encode_message(message))
        await self._process.stdin.drain()

    async def request(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send one request and wait for its response.

        Returns:
            The response's ``result`` object

        Raises:
            ProtocolError: If the server answered with a JSON-RPC error
            TimeoutError: If no response arrives within ``request_timeout_s``
        """
        request_id = next(self._ids)
        future: asyncio.Future[dict[str, Any]] = asyncio.get_running_loop().create_future()
        self._pending_requests[request_id] = future

        try:
            await self._send(jsonrpc_request(request_id, method, params))
            response = await asyncio.wait_for(future, timeout=self.request_timeout_s)
        except asyncio.TimeoutError as exc:
            self._pending_requests.pop(request_id, None)
            raise TimeoutError(f"{method} timed out after {self.request_timeout_s:.1f}s") from exc
        except BaseException:
            self._pending_requests.pop(request_id, None)
            raise

        error = response.get("error")
        if error is not None:
            raise ProtocolError(error.get("code", 0), error.get("message", "Unknown error"))
        return response.get("result", {})

    async def notify(self, method: str, params: dict[str, Any] | None = None) -> None:
        await self._send(jsonrpc_notification(method, params))

    async def initialize(self, client_name: str = "effect-solutions-client") -> dict[str, Any]:
        """Run the initialize handshake and mark the session ready."""
        result = await self.request(
            "initialize",
            {
                "protocolVersion": "2025-06-18",
                "capabilities": {},
                "clientInfo": {"name": client_name, "version": __version__},
            },
        )
        self.server_info = result.get("serverInfo")
        await self.notify("notifications/initialized")
        return result

    async def list_tools(self) -> list[dict[str, Any]]:
        result = await self.request("tools/list")
        return result.get("tools", [])

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        return await self.request("tools/call", {"name": name, "arguments": arguments or {}})

    async def list_resources(self) -> list[dict[str, Any]]:
        result = await self.request("resources/list")
        return result.get("resources", [])

    async def read_resource(self, uri: str) -> str:
        result = await self.request("resources/read", {"uri": uri})
        return result["contents"][0]["text"]
