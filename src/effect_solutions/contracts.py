"""Tool result contracts.

Every tool result is carried in two representations for heterogeneous MCP
clients: a structured object (``structuredContent``) and a text block holding
the same object as JSON. The structured payload is computed once; the text is
derived from it with a single encode step so the two can never drift.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field

from effect_solutions.errors import EffectSolutionsError


class ToolError(BaseModel):
    """Structured business error for tool payloads."""

    code: str = Field(description="Stable machine-readable error code")
    message: str = Field(description="Human-readable error summary")
    details: dict[str, Any] | None = Field(default=None, description="Optional structured error details")


class ToolResult(BaseModel):
    """Result of one tool invocation."""

    structured: dict[str, Any]
    is_error: bool = False

    @property
    def text(self) -> str:
        return encode_payload(self.structured)

    def to_protocol(self) -> dict[str, Any]:
        """Render as an MCP ``tools/call`` result object."""
        return {
            "content": [{"type": "text", "text": self.text}],
            "structuredContent": self.structured,
            "isError": self.is_error,
        }


def encode_payload(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False)


def build_ok(payload: dict[str, Any]) -> ToolResult:
    return ToolResult(structured=payload)


def build_error(code: str, message: str, details: dict[str, Any] | None = None) -> ToolResult:
    """Build and validate an error result."""
    error = ToolError(code=code, message=message, details=details or None)
    return ToolResult(structured={"error": error.model_dump(exclude_none=True)}, is_error=True)


def build_error_from_exception(exc: EffectSolutionsError) -> ToolResult:
    return build_error(exc.code, exc.message, exc.details)
