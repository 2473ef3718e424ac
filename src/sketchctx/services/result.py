"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
The HTTP, stdio, MCP, and CLI front ends all consume this type.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from sketchctx.domain.errors import SketchCtxError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: SketchCtxError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=exc.details)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (the tool name, e.g. ``"get_file"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (request ID, timing, counts).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, exc: SketchCtxError, **kwargs: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc), **kwargs)
