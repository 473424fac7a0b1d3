"""Tool specification shared by the dispatcher and transport adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from pydantic import BaseModel

if TYPE_CHECKING:
    from effect_solutions.context import AppContext


ToolHandler = Callable[["AppContext", Any], dict[str, Any]]


@dataclass(frozen=True)
class ToolSpec:
    """A named tool: its argument model, description and handler.

    The argument model is the single source of truth for both validation in
    ``tools/call`` and the ``inputSchema`` published by ``tools/list``.
    """

    name: str
    description: str
    arguments: type[BaseModel]
    handler: ToolHandler

    @property
    def input_schema(self) -> dict[str, Any]:
        return self.arguments.model_json_schema()

    def to_listing(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }
