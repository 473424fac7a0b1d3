"""MCP session state machine and request routing.

States::

    UNINITIALIZED --initialize--> INITIALIZING --notifications/initialized--> READY
          any state --close()--> CLOSED

Only ``initialize`` (and ``ping``) are served before READY; every other
request gets a JSON-RPC error rather than a tool-level one. Tool failures
after READY are reported inside the ``tools/call`` result with
``isError: true``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from mcp import types

from effect_solutions import __version__
from effect_solutions.context import AppContext
from effect_solutions.docs.config import DOC_URI_TEMPLATE, MARKDOWN_MIME_TYPE, TOPICS_URI, doc_uri
from effect_solutions.errors import DocumentNotFoundError, ProtocolError
from effect_solutions.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    RESOURCE_NOT_FOUND,
    is_notification,
    jsonrpc_error,
    jsonrpc_response,
)
from effect_solutions.tools.dispatcher import ToolDispatcher

logger = logging.getLogger("effect-solutions.protocol")

SERVER_NAME = "effect-solutions"

SERVER_INSTRUCTIONS = (
    "Effect Solutions: curated best practices for TypeScript with Effect. "
    "Search guides with search_effect_solutions, read them as effect-docs:// "
    "resources, and report problems with open_issue. Call get_help for details."
)

_DOC_URI_PREFIX = doc_uri("")


class SessionState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    CLOSED = "closed"


class ProtocolSession:
    """Serve MCP requests for one connection.

    ``handle`` is synchronous: each request is computed to completion before
    the caller reads the next line.
    """

    def __init__(self, context: AppContext, dispatcher: ToolDispatcher | None = None) -> None:
        self.context = context
        self.dispatcher = dispatcher or ToolDispatcher(context)
        self.state = SessionState.UNINITIALIZED
        self.client_info: dict[str, Any] | None = None

        self._handlers: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "resources/list": self._resources_list,
            "resources/templates/list": self._resource_templates_list,
            "resources/read": self._resources_read,
        }

    def close(self) -> None:
        if self.state is not SessionState.CLOSED:
            logger.info("Session closed")
        self.state = SessionState.CLOSED

    def handle(self, message: dict[str, Any]) -> dict[str, Any] | None:
        """Process one decoded message.

        Returns:
            The JSON-RPC response, or None for notifications and for anything
            received after the session closed
        """
        if self.state is SessionState.CLOSED:
            logger.debug("Ignoring %s after close", message.get("method"))
            return None

        method = message["method"]
        if is_notification(message):
            self._handle_notification(method)
            return None

        request_id = message["id"]
        try:
            params = _params(message)
            result = self._dispatch(method, params)
        except ProtocolError as exc:
            logger.info("Rejected %s: %s", method, exc.message)
            return jsonrpc_error(request_id, exc.rpc_code, exc.message)
        except Exception as exc:
            logger.exception("Internal error while handling %s", method)
            return jsonrpc_error(request_id, INTERNAL_ERROR, f"Internal error: {exc}")
        return jsonrpc_response(request_id, result)

    def _handle_notification(self, method: str) -> None:
        if method == "notifications/initialized":
            if self.state is SessionState.INITIALIZING:
                self.state = SessionState.READY
                logger.info("Session ready")
            else:
                logger.debug("Unexpected initialized notification in state %s", self.state.value)
            return
        logger.debug("Ignoring notification %s", method)

    def _dispatch(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        if method == "ping":
            return {}
        if method == "initialize":
            return self._initialize(params)

        if self.state is not SessionState.READY:
            raise ProtocolError(
                INVALID_REQUEST,
                f"Server not initialized: '{method}' received before initialization completed",
            )

        handler = self._handlers.get(method)
        if handler is None:
            raise ProtocolError(METHOD_NOT_FOUND, f"Method not found: {method}")
        return handler(params)

    def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        if self.state is SessionState.READY:
            raise ProtocolError(INVALID_REQUEST, "Session is already initialized")

        client_info = params.get("clientInfo")
        self.client_info = client_info if isinstance(client_info, dict) else None
        requested = params.get("protocolVersion")
        version = requested if isinstance(requested, str) and requested else types.LATEST_PROTOCOL_VERSION

        self.state = SessionState.INITIALIZING
        logger.info("Initializing session for %s", (self.client_info or {}).get("name", "unknown client"))

        result = types.InitializeResult(
            protocolVersion=version,
            capabilities=types.ServerCapabilities(
                tools=types.ToolsCapability(listChanged=False),
                resources=types.ResourcesCapability(subscribe=False, listChanged=False),
            ),
            serverInfo=types.Implementation(name=SERVER_NAME, version=__version__),
            instructions=SERVER_INSTRUCTIONS,
        )
        return _dump(result)

    def _tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": self.dispatcher.list_tools()}

    def _tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise ProtocolError(INVALID_PARAMS, "tools/call requires a string 'name'")

        arguments = params.get("arguments")
        if arguments is not None and not isinstance(arguments, dict):
            raise ProtocolError(INVALID_PARAMS, "tools/call 'arguments' must be an object")

        return self.dispatcher.call(name, arguments).to_protocol()

    def _resources_list(self, params: dict[str, Any]) -> dict[str, Any]:
        resources = [
            types.Resource(
                uri=TOPICS_URI,
                name="topics",
                description="Index of all Effect Solutions guides",
                mimeType=MARKDOWN_MIME_TYPE,
            )
        ]
        for doc in self.context.store.all():
            resources.append(
                types.Resource(
                    uri=doc_uri(doc.slug),
                    name=doc.slug,
                    description=doc.description or doc.title,
                    mimeType=MARKDOWN_MIME_TYPE,
                )
            )
        return _dump(types.ListResourcesResult(resources=resources))

    def _resource_templates_list(self, params: dict[str, Any]) -> dict[str, Any]:
        template = types.ResourceTemplate(
            uriTemplate=DOC_URI_TEMPLATE,
            name="doc",
            description="A single Effect Solutions guide by slug",
            mimeType=MARKDOWN_MIME_TYPE,
        )
        return _dump(types.ListResourceTemplatesResult(resourceTemplates=[template]))

    def _resources_read(self, params: dict[str, Any]) -> dict[str, Any]:
        uri = params.get("uri")
        if not isinstance(uri, str) or not uri:
            raise ProtocolError(INVALID_PARAMS, "resources/read requires a string 'uri'")

        text = self.read_resource(uri)
        contents = types.TextResourceContents(uri=uri, mimeType=MARKDOWN_MIME_TYPE, text=text)
        return _dump(types.ReadResourceResult(contents=[contents]))

    def read_resource(self, uri: str) -> str:
        """Return the markdown text behind a resource URI.

        Raises:
            ProtocolError: If the URI does not name the topic index or a known doc
        """
        if uri == TOPICS_URI:
            return self.context.renderer.render_topics()

        if uri.startswith(_DOC_URI_PREFIX):
            slug = uri[len(_DOC_URI_PREFIX):]
            try:
                return self.context.renderer.render_doc(slug)
            except DocumentNotFoundError as exc:
                raise ProtocolError(RESOURCE_NOT_FOUND, f"Resource not found: {uri} ({exc.message})") from exc

        raise ProtocolError(RESOURCE_NOT_FOUND, f"Resource not found: {uri}")


def _params(message: dict[str, Any]) -> dict[str, Any]:
    params = message.get("params")
    if params is None:
        return {}
    if not isinstance(params, dict):
        raise ProtocolError(INVALID_PARAMS, "params must be an object")
    return params


def _dump(model: Any) -> dict[str, Any]:
    return model.model_dump(by_alias=True, exclude_none=True, mode="json")
