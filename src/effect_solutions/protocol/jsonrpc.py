"""JSON-RPC 2.0 helpers for the MCP stdio transport.

See: https://www.jsonrpc.org/specification
"""

from typing import Any

JSONRPC_VERSION = "2.0"

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# MCP: requested resource does not exist
RESOURCE_NOT_FOUND = -32002


def jsonrpc_response(id: Any, result: Any) -> dict:
    """Create a JSON-RPC 2.0 success response.

    Args:
        id: Request ID (must match the request)
        result: The result payload

    Returns:
        JSON-RPC 2.0 response dict
    """
    return {"jsonrpc": JSONRPC_VERSION, "id": id, "result": result}


def jsonrpc_error(id: Any, code: int, message: str) -> dict:
    """Create a JSON-RPC 2.0 error response.

    Args:
        id: Request ID (can be None when the request could not be identified)
        code: Error code (negative integer)
        message: Human-readable error message

    Returns:
        JSON-RPC 2.0 error response dict
    """
    return {"jsonrpc": JSONRPC_VERSION, "id": id, "error": {"code": code, "message": message}}


def jsonrpc_request(id: Any, method: str, params: dict | None = None) -> dict:
    message: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "id": id, "method": method}
    if params is not None:
        message["params"] = params
    return message


def jsonrpc_notification(method: str, params: dict | None = None) -> dict:
    message: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "method": method}
    if params is not None:
        message["params"] = params
    return message


def is_notification(message: dict) -> bool:
    return "id" not in message
