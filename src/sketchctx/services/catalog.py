"""Tool catalog — the fixed list of tools exposed to editors.

Two categories:

- ``query``: answered locally from the document (get_file,
  list_components, get_selection).
- ``relay``: executed inside the design tool by a connected plugin
  (create_rectangle, create_text).

Parameter validation is shape-only: required fields must be present.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from sketchctx.domain.errors import UnknownToolError, ValidationError

ToolCategory = Literal["query", "relay"]


class ToolParam(BaseModel):
    """One declared tool parameter."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    description: str
    required: bool = False
    items: dict[str, Any] | None = None

    def schema_fragment(self) -> dict[str, Any]:
        fragment: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.items is not None:
            fragment["items"] = self.items
        return fragment


class ToolSpec(BaseModel):
    """A named tool with its parameter schema."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    category: ToolCategory
    params: tuple[ToolParam, ...] = ()

    @property
    def required(self) -> list[str]:
        return [p.name for p in self.params if p.required]

    def schema(self) -> dict[str, Any]:
        """Catalog entry as exposed by ``get_tools``."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": {
                "type": "object",
                "properties": {p.name: p.schema_fragment() for p in self.params},
                "required": self.required,
            },
        }


_URL = "URL to a Sketch file or Sketch Cloud document"

TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="get_file",
        description="Get the contents of a Sketch file",
        category="query",
        params=(
            ToolParam(name="url", type="string", description=_URL, required=True),
            ToolParam(
                name="nodeId",
                type="string",
                description="Optional. ID of a specific node within the document to retrieve",
            ),
        ),
    ),
    ToolSpec(
        name="list_components",
        description="List all components in a Sketch file",
        category="query",
        params=(ToolParam(name="url", type="string", description=_URL, required=True),),
    ),
    ToolSpec(
        name="get_selection",
        description="Get information about selected elements in a Sketch document",
        category="query",
        params=(
            ToolParam(name="url", type="string", description="URL to the Sketch document", required=True),
            ToolParam(
                name="selectionIds",
                type="array",
                items={"type": "string"},
                description="Array of selected element IDs from the Sketch Selection Helper plugin",
                required=True,
            ),
        ),
    ),
    ToolSpec(
        name="create_rectangle",
        description="Create a new rectangle in the Sketch document",
        category="relay",
        params=(
            ToolParam(name="x", type="number", description="X position of the rectangle"),
            ToolParam(name="y", type="number", description="Y position of the rectangle"),
            ToolParam(name="width", type="number", description="Width of the rectangle", required=True),
            ToolParam(name="height", type="number", description="Height of the rectangle", required=True),
            ToolParam(name="color", type="string", description="Fill color of the rectangle (hex format)"),
        ),
    ),
    ToolSpec(
        name="create_text",
        description="Create a new text layer in the Sketch document",
        category="relay",
        params=(
            ToolParam(name="text", type="string", description="Text content", required=True),
            ToolParam(name="x", type="number", description="X position of the text layer"),
            ToolParam(name="y", type="number", description="Y position of the text layer"),
            ToolParam(name="fontSize", type="number", description="Font size"),
            ToolParam(name="color", type="string", description="Text color (hex format)"),
        ),
    ),
)

_BY_NAME: dict[str, ToolSpec] = {tool.name: tool for tool in TOOLS}


def get_tool(name: str) -> ToolSpec:
    """Look up a tool by name.

    Raises:
        UnknownToolError: *name* is not in the catalog.
    """
    tool = _BY_NAME.get(name)
    if tool is None:
        raise UnknownToolError(f"Unknown tool: {name}", details={"tool": name})
    return tool


def tool_schemas(category: ToolCategory | None = None) -> list[dict[str, Any]]:
    return [tool.schema() for tool in TOOLS if category is None or tool.category == category]


def validate_params(tool: ToolSpec, params: Any) -> dict[str, Any]:
    """Check that *params* is an object carrying every required field.

    Raises:
        ValidationError: *params* is not an object or misses required fields.
    """
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise ValidationError(f"Parameters for {tool.name} must be an object", details={"tool": tool.name})
    missing = [name for name in tool.required if params.get(name) is None]
    if missing:
        msg = f"Missing required parameter(s) for {tool.name}: {', '.join(missing)}"
        raise ValidationError(msg, details={"tool": tool.name, "missing": missing})
    return params
