"""Tool dispatch: route named invocations to typed handlers.

The dispatcher is the boundary for tool failures. Validation problems
surface as ``InvalidArgumentError``, unknown names as ``UnknownToolError``,
and anything unexpected raised by a handler is wrapped in
``ToolExecutionError`` so it never escapes past this layer.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from effect_solutions.context import AppContext
from effect_solutions.contracts import ToolResult, build_error_from_exception, build_ok
from effect_solutions.errors import (
    EffectSolutionsError,
    InvalidArgumentError,
    ToolExecutionError,
    UnknownToolError,
)
from effect_solutions.tools import get_help, open_issue, search_effect_solutions
from effect_solutions.tools.base import ToolSpec

logger = logging.getLogger("effect-solutions.tools")

DEFAULT_TOOLS: tuple[ToolSpec, ...] = (
    search_effect_solutions.TOOL,
    open_issue.TOOL,
    get_help.TOOL,
)


class ToolDispatcher:
    """Map tool names to handlers bound to one AppContext."""

    def __init__(self, context: AppContext, tools: Iterable[ToolSpec] = DEFAULT_TOOLS) -> None:
        self.context = context
        self._tools = {spec.name: spec for spec in tools}

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def list_tools(self) -> list[dict[str, Any]]:
        """Tool listings for ``tools/list``."""
        return [spec.to_listing() for spec in self._tools.values()]

    def invoke(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        """Validate arguments and run one tool.

        Args:
            name: Tool name (e.g. "search_effect_solutions")
            arguments: Argument mapping; ``None`` is treated as empty

        Returns:
            ToolResult carrying the structured payload

        Raises:
            UnknownToolError: If no tool is registered under ``name``
            InvalidArgumentError: If arguments fail validation
            ToolExecutionError: If the handler fails unexpectedly
        """
        spec = self._tools.get(name)
        if spec is None:
            raise UnknownToolError(name, available=self.names)

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise InvalidArgumentError("arguments", "expected an object")

        try:
            args = spec.arguments.model_validate(dict(arguments))
        except ValidationError as exc:
            raise _invalid_argument(exc) from exc

        try:
            payload = spec.handler(self.context, args)
        except EffectSolutionsError:
            raise
        except Exception as exc:
            logger.exception("Tool %s failed", name)
            raise ToolExecutionError(name, exc) from exc

        return build_ok(payload)

    def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        """Like ``invoke`` but returns tool-level failures as error results."""
        try:
            return self.invoke(name, arguments)
        except EffectSolutionsError as exc:
            logger.info("Tool %s rejected: %s", name, exc)
            return build_error_from_exception(exc)


def _invalid_argument(exc: ValidationError) -> InvalidArgumentError:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "arguments"
    reason = first.get("msg", "invalid value")
    if first.get("type") == "missing":
        reason = "required argument is missing"
    return InvalidArgumentError(location, reason)
