"""ServiceResult: what every service method hands back.

Core diagnostics (hierarchy, scope, configuration) are never failures:
they ride along in ``warnings`` next to a best-effort ``data`` payload.
``ok=False`` is reserved for requests that cannot be answered at all,
and those always carry one of the :class:`ErrorCode` values.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Closed set of failure codes surfaced to callers."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    INVALID_PERIOD = "INVALID_PERIOD"
    UNKNOWN_ROLE = "UNKNOWN_ROLE"
    SNAPSHOT_INVALID = "SNAPSHOT_INVALID"


class ServiceError(BaseModel):
    """Why a request could not be answered."""

    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: False only when ``error`` explains why nothing was computed.
        op: Operation name used for rendering (``"resolve_scope"``, ...).
        data: JSON-ready payload.
        warnings: Human-readable diagnostics; the CLI prints them to stderr.
        error: Set exactly when ``ok`` is False.
        meta: Telemetry and other out-of-band details (``-v`` only).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


def failure(op: str, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
    """Shorthand for an ``ok=False`` result."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=detail),
    )


def not_found(op: str, kind: str, key: str) -> ServiceResult:
    """Lookup miss, e.g. ``Duty type id 'guard' not found``."""
    label = kind.replace("_", " ").capitalize()
    return failure(op, ErrorCode.NOT_FOUND, f"{label} '{key}' not found", **{kind: key})
