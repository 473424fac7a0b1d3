"""Search Tool - Keyword search over the Effect Solutions guides."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import BaseModel, ConfigDict

from effect_solutions.tools.base import ToolSpec
from effect_solutions.utils import DEFAULT_SEARCH_LIMIT, SearchLimit, SearchQuery

if TYPE_CHECKING:
    from effect_solutions.context import AppContext
    from effect_solutions.tools.dispatcher import ToolDispatcher

NAME = "search_effect_solutions"

DESCRIPTION = (
    "Search Effect best-practice guides by keywords (case-insensitive). "
    "Returns matching guide slugs and titles; read a guide with the "
    "effect-docs://docs/<slug> resource."
)


class SearchArguments(BaseModel):
    model_config = ConfigDict(extra="forbid")

    query: SearchQuery
    limit: SearchLimit = DEFAULT_SEARCH_LIMIT


def run(context: AppContext, args: SearchArguments) -> dict[str, Any]:
    results = context.index.search(args.query, limit=args.limit)
    return {"results": [result.to_dict() for result in results]}


TOOL = ToolSpec(name=NAME, description=DESCRIPTION, arguments=SearchArguments, handler=run)


def register(mcp: FastMCP, dispatcher: ToolDispatcher) -> None:
    """Register search_effect_solutions with a FastMCP server."""

    @mcp.tool(name=NAME, description=DESCRIPTION)
    def search_effect_solutions(
        query: SearchQuery,
        limit: SearchLimit = DEFAULT_SEARCH_LIMIT,
    ) -> dict[str, Any]:
        result = dispatcher.call(NAME, {"query": query, "limit": limit})
        if result.is_error:
            raise ToolError(result.structured["error"]["message"])
        return result.structured
