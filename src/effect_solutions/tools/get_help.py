"""Help Tool - Static guide to the server's tools and resources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP
from pydantic import BaseModel, ConfigDict

from effect_solutions.docs.config import DOC_URI_TEMPLATE, TOPICS_URI
from effect_solutions.tools.base import ToolSpec

if TYPE_CHECKING:
    from effect_solutions.context import AppContext
    from effect_solutions.tools.dispatcher import ToolDispatcher

NAME = "get_help"

DESCRIPTION = "Explain the tools and resources this server provides and how to use them."

GUIDE = f"""# Effect Solutions MCP Server Guide

Curated best practices for writing TypeScript with Effect.

## Available Tools

- `search_effect_solutions(query, limit?)`: keyword search over all guides.
  Title matches rank above description matches, which rank above body matches.
- `open_issue(category, title, description)`: draft a GitHub issue.
  `category` is one of Question, Fix, Improvement, Request.
- `get_help()`: show this guide.

## Resources

- `{TOPICS_URI}`: index of every guide with its slug and description.
- `{DOC_URI_TEMPLATE}`: full markdown of one guide.

## Typical Workflow

1. Read `{TOPICS_URI}` or call `search_effect_solutions` with the topic at hand.
2. Read the matching guide resources before writing code.
3. Report gaps or mistakes with `open_issue`.
"""


class HelpArguments(BaseModel):
    model_config = ConfigDict(extra="forbid")


def run(context: AppContext, args: HelpArguments) -> dict[str, Any]:
    return {"guide": GUIDE}


TOOL = ToolSpec(name=NAME, description=DESCRIPTION, arguments=HelpArguments, handler=run)


def register(mcp: FastMCP, dispatcher: ToolDispatcher) -> None:
    """Register get_help with a FastMCP server."""

    @mcp.tool(name=NAME, description=DESCRIPTION)
    def get_help() -> dict[str, Any]:
        return dispatcher.call(NAME, {}).structured
