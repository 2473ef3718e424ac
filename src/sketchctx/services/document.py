"""DocumentService — query tools answered from the document tree.

No relay is involved: each call loads a fresh tree through the
:class:`DocumentLoader`, answers from it, and discards it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sketchctx.domain.errors import NodeNotFoundError
from sketchctx.domain.nodes import enrich, find_node_by_id, list_components
from sketchctx.services.base import BaseService

if TYPE_CHECKING:
    from sketchctx.infrastructure.sources import DocumentLoader
    from sketchctx.services.result import ServiceResult

logger = logging.getLogger(__name__)


class DocumentService(BaseService):
    """get_file, list_components, and get_selection over a loaded document."""

    def __init__(self, loader: DocumentLoader) -> None:
        self._loader = loader

    async def get_file(self, url: str, node_id: str | None = None) -> ServiceResult:
        """Whole document, or one enriched node when *node_id* is given."""
        return await self._run("get_file", self._get_file(url, node_id))

    async def list_components(self, url: str) -> ServiceResult:
        return await self._run("list_components", self._list_components(url))

    async def get_selection(self, url: str, selection_ids: list[str]) -> ServiceResult:
        """Enriched nodes for *selection_ids*, plus the IDs that were not found."""
        return await self._run("get_selection", self._get_selection(url, selection_ids))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _get_file(self, url: str, node_id: str | None) -> dict[str, Any]:
        tree = await self._loader.load(url)
        if not node_id:
            return tree.to_dict()
        node = find_node_by_id(tree, node_id)
        if node is None:
            raise NodeNotFoundError(f"Node {node_id} not found", details={"node_id": node_id})
        return enrich(node).to_dict()

    async def _list_components(self, url: str) -> dict[str, Any]:
        tree = await self._loader.load(url)
        components = [summary.to_dict() for summary in list_components(tree)]
        logger.debug("Found %d component(s) in %s", len(components), url)
        return {"url": url, "count": len(components), "components": components}

    async def _get_selection(self, url: str, selection_ids: list[str]) -> dict[str, Any]:
        tree = await self._loader.load(url)
        selected: list[dict[str, Any]] = []
        missing: list[str] = []
        for node_id in selection_ids:
            node = find_node_by_id(tree, node_id)
            if node is None:
                missing.append(node_id)
            else:
                selected.append(enrich(node).to_dict())
        return {
            "url": url,
            "selectionCount": len(selected),
            "selectedNodes": selected,
            "missingIds": missing,
        }
