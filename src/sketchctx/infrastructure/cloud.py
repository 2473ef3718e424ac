"""Fetch shared Sketch Cloud documents and download their archives.

Two requests per document: ``GET {api_base}/documents/{id}`` (bearer
auth) returns JSON whose ``shortcut.downloadUrl`` points at the ``.sketch``
archive, which is then downloaded without auth.
"""

from __future__ import annotations

import logging
import re

import httpx

from sketchctx.domain.errors import ConfigurationError, DocumentSourceError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.sketch.cloud/v1"
SHARE_URL_PATTERN = re.compile(r"sketch\.cloud/s/([a-zA-Z0-9]+)")


def is_cloud_url(locator: str) -> bool:
    return "sketch.cloud" in locator


def extract_document_id(url: str) -> str | None:
    """Pull the share ID out of a Sketch Cloud URL.

    Examples:
        >>> extract_document_id("https://www.sketch.cloud/s/Abc123")
        'Abc123'
        >>> extract_document_id("https://example.com") is None
        True
    """
    match = SHARE_URL_PATTERN.search(url)
    return match.group(1) if match else None


class SketchCloudClient:
    """Async Sketch Cloud API client.

    Parameters:
        api_key: Personal access token; required for every fetch.
        api_base: API root URL.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def fetch_document(self, document_id: str) -> bytes:
        """Return the raw ``.sketch`` archive for a shared document."""
        if not self._api_key:
            raise ConfigurationError("Sketch API key is required for cloud files")

        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            api_url = f"{self._api_base}/documents/{document_id}"
            response = await self._get(
                client,
                api_url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                failure="Failed to fetch document from Sketch Cloud",
            )
            try:
                download_url = response.json()["shortcut"]["downloadUrl"]
            except (ValueError, KeyError, TypeError) as exc:
                msg = "Sketch Cloud response has no download URL"
                raise DocumentSourceError(msg, details={"document_id": document_id}) from exc

            logger.debug("Downloading Sketch document %s", document_id)
            archive = await self._get(client, download_url, failure="Failed to download Sketch file")
            return archive.content

    async def _get(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        failure: str,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = await client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            raise DocumentSourceError(f"{failure}: {exc}", details={"url": url}) from exc
        if response.is_error:
            raise DocumentSourceError(
                f"{failure}: {response.reason_phrase}",
                details={"url": url, "status": response.status_code},
            )
        return response
