"""Document sources — resolve a locator to bytes and parse it.

Locator rules:

- contains ``sketch.cloud`` → Sketch Cloud share URL (API key required)
- absolute POSIX path or Windows drive path → read that file
- anything else → the configured local fallback file

Every query builds a fresh tree; nothing is cached across calls.  File
reads and archive decompression run in a worker thread so the event loop
keeps serving relay traffic.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from sketchctx.domain.errors import DocumentSourceError
from sketchctx.domain.nodes import DocumentTree
from sketchctx.infrastructure.cloud import SketchCloudClient, extract_document_id, is_cloud_url
from sketchctx.infrastructure.container import parse_container

logger = logging.getLogger(__name__)


def is_local_path(locator: str) -> bool:
    return locator.startswith("/") or ":\\" in locator


class DocumentLoader:
    """Load :class:`DocumentTree` instances for query tools.

    Parameters:
        cloud: Sketch Cloud client used for ``sketch.cloud`` locators.
        local_file: Fallback file for locators that are neither cloud URLs
            nor absolute paths.
    """

    def __init__(self, cloud: SketchCloudClient, *, local_file: Path | None = None) -> None:
        self._cloud = cloud
        self._local_file = local_file

    def resolve_path(self, locator: str) -> Path:
        """Pick the local file for a non-cloud locator."""
        if is_local_path(locator):
            return Path(locator)
        if self._local_file is None:
            msg = (
                "No local Sketch file specified. Use --local-file parameter "
                "or set LOCAL_SKETCH_PATH environment variable."
            )
            raise DocumentSourceError(msg, details={"locator": locator})
        return self._local_file

    async def load(self, locator: str) -> DocumentTree:
        data = await self.read_bytes(locator)
        return await asyncio.to_thread(parse_container, data)

    async def read_bytes(self, locator: str) -> bytes:
        if is_cloud_url(locator):
            document_id = extract_document_id(locator)
            if document_id is None:
                msg = f"Not a Sketch Cloud share URL: {locator}"
                raise DocumentSourceError(msg, details={"locator": locator})
            logger.info("Fetching Sketch Cloud document %s", document_id)
            return await self._cloud.fetch_document(document_id)

        path = self.resolve_path(locator)
        if not path.is_file():
            raise DocumentSourceError(
                f"Local Sketch file not found: {path}", details={"path": str(path)}
            )
        logger.debug("Reading local Sketch file %s", path)
        return await asyncio.to_thread(path.read_bytes)
