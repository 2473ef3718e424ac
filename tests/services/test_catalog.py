"""Tests for the tool catalog and parameter validation."""

from __future__ import annotations

import pytest

from sketchctx.domain.errors import UnknownToolError, ValidationError
from sketchctx.services.catalog import TOOLS, get_tool, tool_schemas, validate_params


class TestCatalog:
    def test_tool_names(self) -> None:
        assert [tool.name for tool in TOOLS] == [
            "get_file",
            "list_components",
            "get_selection",
            "create_rectangle",
            "create_text",
        ]

    def test_categories(self) -> None:
        assert [s["name"] for s in tool_schemas("relay")] == ["create_rectangle", "create_text"]
        assert len(tool_schemas("query")) == 3

    def test_schema_shape(self) -> None:
        schema = get_tool("get_selection").schema()
        assert schema["parameters"]["type"] == "object"
        assert schema["parameters"]["required"] == ["url", "selectionIds"]
        assert schema["parameters"]["properties"]["selectionIds"]["items"] == {"type": "string"}

    def test_unknown_tool(self) -> None:
        with pytest.raises(UnknownToolError, match="Unknown tool: explode"):
            get_tool("explode")


class TestValidateParams:
    def test_passes_through(self) -> None:
        params = {"width": 10, "height": 5, "extra": True}
        assert validate_params(get_tool("create_rectangle"), params) is params

    def test_none_means_empty(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_params(get_tool("create_text"), None)
        assert exc_info.value.details["missing"] == ["text"]

    def test_missing_required(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_params(get_tool("create_rectangle"), {"width": 10})
        assert exc_info.value.details["missing"] == ["height"]

    def test_not_an_object(self) -> None:
        with pytest.raises(ValidationError, match="must be an object"):
            validate_params(get_tool("get_file"), ["url"])

    def test_optional_fields_not_required(self) -> None:
        assert validate_params(get_tool("get_file"), {"url": "/a.sketch"}) == {"url": "/a.sketch"}
