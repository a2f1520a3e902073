"""ServiceResult and ServiceError — the contract between services and the CLI.

INVARIANT: public service methods return a ServiceResult and never raise.
Per-document failures travel in ``data`` and ``warnings``; ``error`` is
reserved for outcomes that stop or spoil the whole run.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Error codes carried by :class:`ServiceError`."""

    NOT_FOUND = "NOT_FOUND"
    LOOKUP_FAILED = "LOOKUP_FAILED"
    BACKUP_NOT_CONFIGURED = "BACKUP_NOT_CONFIGURED"
    DELETE_FAILED = "DELETE_FAILED"
    CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"
    CANCELLED = "CANCELLED"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"plan"``, ``"delete"``).
        data: Operation-specific payload (also present on partial failure).
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (counts, settings used).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: ErrorCode,
        message: str,
        *,
        data: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
        **detail: Any,
    ) -> ServiceResult:
        """Build a failed result with a single structured error."""
        return cls(
            ok=False,
            op=op,
            data=data or {},
            warnings=warnings or [],
            error=ServiceError(code=str(code), message=message, detail=detail),
        )
