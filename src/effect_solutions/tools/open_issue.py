"""Open Issue Tool - Draft a GitHub issue about the guides."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from effect_solutions.issues import IssueCategory, IssueRequest
from effect_solutions.tools.base import ToolSpec

if TYPE_CHECKING:
    from effect_solutions.context import AppContext
    from effect_solutions.tools.dispatcher import ToolDispatcher

NAME = "open_issue"

DESCRIPTION = (
    "Draft a GitHub issue for the Effect Solutions guides (question, fix, "
    "improvement or request). Returns the prefilled issue URL and whether it "
    "was opened for the user."
)


def run(context: AppContext, args: IssueRequest) -> dict[str, Any]:
    return context.issues.file_issue(args).to_payload()


TOOL = ToolSpec(name=NAME, description=DESCRIPTION, arguments=IssueRequest, handler=run)


def register(mcp: FastMCP, dispatcher: ToolDispatcher) -> None:
    """Register open_issue with a FastMCP server."""

    @mcp.tool(name=NAME, description=DESCRIPTION)
    def open_issue(
        category: IssueCategory = Field(description="Kind of feedback: Question, Fix, Improvement or Request"),
        title: str = Field(min_length=1, description="Short issue title"),
        description: str = Field(min_length=1, description="Issue body; what is wrong or missing"),
    ) -> dict[str, Any]:
        result = dispatcher.call(NAME, {"category": category.value, "title": title, "description": description})
        if result.is_error:
            raise ToolError(result.structured["error"]["message"])
        return result.structured
