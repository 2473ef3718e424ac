"""BaseService — shared foundation for sketchctx services.

Services own the translation from raised :class:`SketchCtxError` to a
failed :class:`ServiceResult`.  Anything else propagates: an unexpected
exception is a bug, and the front end reports it as an internal error.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any

from sketchctx.domain.errors import SketchCtxError
from sketchctx.services.result import ServiceResult

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class DocumentService(BaseService):
            async def list_components(self, url: str) -> ServiceResult:
                return await self._run("list_components", self._components(url))
    """

    async def _run(self, op: str, work: Awaitable[dict[str, Any]]) -> ServiceResult:
        """Await *work* and wrap its payload (or its domain error) in a ServiceResult."""
        try:
            data = await work
        except SketchCtxError as exc:
            logger.info("%s failed: %s (%s)", op, exc.message, exc.code)
            return ServiceResult.failure(op, exc)
        return ServiceResult(ok=True, op=op, data=data)
