"""Error types shared by the store, tools, CLI and protocol layers.

Every error carries a stable machine-readable ``code`` so tool payloads and
CLI output can report failures without string matching.
"""

from __future__ import annotations

from typing import Any


class EffectSolutionsError(Exception):
    """Base class for all domain errors."""

    code = "error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class DocumentNotFoundError(EffectSolutionsError):
    code = "not_found"

    def __init__(self, slug: str) -> None:
        super().__init__(f"Unknown doc slug: {slug}", {"slug": slug})
        self.slug = slug


class InvalidArgumentError(EffectSolutionsError):
    code = "invalid_argument"

    def __init__(self, argument: str, reason: str) -> None:
        super().__init__(f"Invalid argument '{argument}': {reason}", {"argument": argument, "reason": reason})
        self.argument = argument
        self.reason = reason


class UnknownToolError(EffectSolutionsError):
    code = "unknown_tool"

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        details: dict[str, Any] = {"name": name}
        if available:
            details["available_tools"] = available
        super().__init__(f"Unknown tool: {name}", details)
        self.name = name


class ToolExecutionError(EffectSolutionsError):
    """Unexpected failure inside a tool handler; the cause is chained."""

    code = "execution_error"

    def __init__(self, name: str, cause: BaseException) -> None:
        super().__init__(f"Tool '{name}' failed: {cause}", {"name": name, "cause": type(cause).__name__})
        self.name = name


class ProtocolError(EffectSolutionsError):
    """Request rejected at the JSON-RPC layer (wrong state, bad envelope)."""

    code = "protocol_error"

    def __init__(self, rpc_code: int, message: str) -> None:
        super().__init__(message, {"rpc_code": rpc_code})
        self.rpc_code = rpc_code


class ManifestError(EffectSolutionsError):
    """The document manifest or its content could not be loaded."""

    code = "manifest_error"
