"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from sketchctx.domain.errors import NodeNotFoundError
from sketchctx.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="list_components", data={"count": 2})
        assert result.ok is True
        assert result.data == {"count": 2}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_from_exception(self) -> None:
        result = ServiceResult.failure("get_file", NodeNotFoundError("Node X not found", details={"node_id": "X"}))
        assert result.ok is False
        assert result.error == ServiceError(code="NODE_NOT_FOUND", message="Node X not found", detail={"node_id": "X"})

    def test_json_serialization(self) -> None:
        raw = ServiceResult(ok=True, op="get_file", data={"k": "v"}, meta={"ms": 3}).model_dump_json()
        parsed = json.loads(raw)
        assert parsed["op"] == "get_file"
        assert parsed["meta"] == {"ms": 3}

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="x")
        with pytest.raises(PydanticValidationError):
            result.ok = False  # type: ignore[misc]
