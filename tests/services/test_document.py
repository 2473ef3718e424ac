"""Tests for DocumentService (query tools)."""

from __future__ import annotations

from pathlib import Path

import pytest

from sketchctx.infrastructure.cloud import SketchCloudClient
from sketchctx.infrastructure.sources import DocumentLoader
from sketchctx.services.document import DocumentService


@pytest.fixture
def service(sketch_file: Path) -> DocumentService:
    return DocumentService(DocumentLoader(SketchCloudClient(None), local_file=sketch_file))


class TestGetFile:
    @pytest.mark.asyncio
    async def test_whole_document(self, service: DocumentService, sketch_file: Path) -> None:
        result = await service.get_file(str(sketch_file))
        assert result.ok
        assert result.op == "get_file"
        assert result.data["document"]["do_objectID"] == "DOC"
        assert result.data["meta"] == {"version": 146}
        assert len(result.data["pages"]) == 2

    @pytest.mark.asyncio
    async def test_relative_locator_uses_fallback(self, service: DocumentService) -> None:
        result = await service.get_file("current-document")
        assert result.ok

    @pytest.mark.asyncio
    async def test_single_node(self, service: DocumentService, sketch_file: Path) -> None:
        result = await service.get_file(str(sketch_file), "S1")
        assert result.ok
        assert result.data["type"] == "symbolMaster"
        assert result.data["metadata"] == {"id": "S1", "name": "Button", "class": "symbolMaster"}

    @pytest.mark.asyncio
    async def test_node_not_found(self, service: DocumentService, sketch_file: Path) -> None:
        result = await service.get_file(str(sketch_file), "ZZZ")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NODE_NOT_FOUND"
        assert result.error.message == "Node ZZZ not found"

    @pytest.mark.asyncio
    async def test_missing_file(self, service: DocumentService, tmp_path: Path) -> None:
        result = await service.get_file(str(tmp_path / "missing.sketch"))
        assert result.error is not None
        assert result.error.code == "DOCUMENT_SOURCE_ERROR"

    @pytest.mark.asyncio
    async def test_corrupt_file(self, service: DocumentService, tmp_path: Path) -> None:
        bad = tmp_path / "bad.sketch"
        bad.write_bytes(b"not a zip")
        result = await service.get_file(str(bad))
        assert result.error is not None
        assert result.error.code == "INVALID_FORMAT"


class TestListComponents:
    @pytest.mark.asyncio
    async def test_components_in_order(self, service: DocumentService, sketch_file: Path) -> None:
        result = await service.list_components(str(sketch_file))
        assert result.data["count"] == 3
        assert [c["name"] for c in result.data["components"]] == ["Button", "Icon", "Card"]
        assert result.data["url"] == str(sketch_file)


class TestGetSelection:
    @pytest.mark.asyncio
    async def test_found_and_missing(self, service: DocumentService, sketch_file: Path) -> None:
        result = await service.get_selection(str(sketch_file), ["R1", "nope", "S3"])
        assert result.data["selectionCount"] == 2
        assert [n["metadata"]["id"] for n in result.data["selectedNodes"]] == ["R1", "S3"]
        assert result.data["missingIds"] == ["nope"]

    @pytest.mark.asyncio
    async def test_empty_selection(self, service: DocumentService, sketch_file: Path) -> None:
        result = await service.get_selection(str(sketch_file), [])
        assert result.data == {
            "url": str(sketch_file),
            "selectionCount": 0,
            "selectedNodes": [],
            "missingIds": [],
        }
