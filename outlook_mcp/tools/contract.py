"""Tool catalog — the six email tools, their parameters and defaults.

Both front-ends go through the dispatcher, which reads required parameters
and defaults from here; the stdio front-end also advertises the catalog as
its MCP tool list.
"""

import math
from dataclasses import dataclass, field
from typing import Any

from mcp.types import Tool

from outlook_mcp.graph.types import DEFAULT_ORDER_BY, DEFAULT_TOP

# JSON-schema type name → accepted Python types.  `type_matches` also
# excludes bool and non-finite floats from "number".
_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "number": (int, float),
    "boolean": (bool,),
}


@dataclass(frozen=True)
class ParamSpec:
    """One declared tool parameter."""

    name: str
    type: str
    description: str
    required: bool = False
    default: Any = None
    # Message used when a required parameter is missing
    missing_message: str = ""

    def type_matches(self, value: Any) -> bool:
        if self.type == "number" and isinstance(value, bool):
            return False
        if self.type == "number" and isinstance(value, float) and not math.isfinite(value):
            return False
        return isinstance(value, _JSON_TYPES[self.type])

    def to_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.default is not None:
            schema["default"] = self.default
        return schema


@dataclass(frozen=True)
class ToolSpec:
    """A named tool with its parameter declarations."""

    name: str
    description: str
    params: tuple[ParamSpec, ...] = field(default_factory=tuple)

    @property
    def required(self) -> list[ParamSpec]:
        return [p for p in self.params if p.required]

    def input_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {p.name: p.to_schema() for p in self.params},
        }
        if self.required:
            schema["required"] = [p.name for p in self.required]
        return schema

    def to_mcp_tool(self) -> Tool:
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema())


def _message_id(description: str = "The ID of the email message") -> ParamSpec:
    return ParamSpec(
        name="message_id",
        type="string",
        description=description,
        required=True,
        missing_message="Message ID is required",
    )


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="set_access_token",
        description="Set the Microsoft Graph API access token for Outlook access",
        params=(
            ParamSpec(
                name="access_token",
                type="string",
                description="Microsoft Graph API access token",
                required=True,
                missing_message="Access token is required",
            ),
        ),
    ),
    ToolSpec(
        name="list_emails",
        description="List emails from Outlook inbox",
        params=(
            ParamSpec(
                name="top",
                type="number",
                description=f"Number of emails to retrieve (default: {DEFAULT_TOP})",
                default=DEFAULT_TOP,
            ),
            ParamSpec(
                name="skip",
                type="number",
                description="Number of emails to skip (for pagination)",
            ),
            ParamSpec(
                name="filter",
                type="string",
                description='OData filter query (e.g., "isRead eq false")',
            ),
            ParamSpec(
                name="orderBy",
                type="string",
                description='Order by field (e.g., "receivedDateTime DESC")',
                default=DEFAULT_ORDER_BY,
            ),
            ParamSpec(
                name="search",
                type="string",
                description="Search query to find emails",
            ),
        ),
    ),
    ToolSpec(
        name="get_email",
        description="Get detailed information about a specific email",
        params=(_message_id(),),
    ),
    ToolSpec(
        name="search_emails",
        description="Search for emails using a search query",
        params=(
            ParamSpec(
                name="query",
                type="string",
                description="Search query to find emails",
                required=True,
                missing_message="Search query is required",
            ),
            ParamSpec(
                name="top",
                type="number",
                description=f"Maximum number of results to return (default: {DEFAULT_TOP})",
                default=DEFAULT_TOP,
            ),
        ),
    ),
    ToolSpec(
        name="mark_as_read",
        description="Mark an email as read or unread",
        params=(
            _message_id(),
            ParamSpec(
                name="is_read",
                type="boolean",
                description="Mark as read (true) or unread (false)",
                default=True,
            ),
        ),
    ),
    ToolSpec(
        name="delete_email",
        description="Delete an email",
        params=(_message_id("The ID of the email message to delete"),),
    ),
)

TOOLS_BY_NAME: dict[str, ToolSpec] = {t.name: t for t in TOOLS}


def mcp_tools() -> list[Tool]:
    """The catalog as MCP Tool objects, in declaration order."""
    return [t.to_mcp_tool() for t in TOOLS]
