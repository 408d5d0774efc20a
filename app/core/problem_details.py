"""RFC 7807 Problem Details for the seeder HTTP API.

Every error leaving the API is rendered as ``application/problem+json`` so the
admin panel and scripted callers can branch on ``code`` instead of parsing
free-form messages.

Reference: https://datatracker.ietf.org/doc/html/rfc7807
"""

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from app.core.logging import request_id_ctx

# Relative URIs keep the document portable across hosts
ERROR_TYPE_BASE = "/errors"

ERROR_TYPES = {
    "VALIDATION_ERROR": f"{ERROR_TYPE_BASE}/validation",
    "FORBIDDEN": f"{ERROR_TYPE_BASE}/forbidden",
    "SERVICE_UNAVAILABLE": f"{ERROR_TYPE_BASE}/service-unavailable",
    "INTERNAL_ERROR": f"{ERROR_TYPE_BASE}/internal",
    "TEMPLATE_NOT_FOUND": f"{ERROR_TYPE_BASE}/seeder/template-not-found",
    "INVALID_CONSTRAINT": f"{ERROR_TYPE_BASE}/seeder/invalid-constraint",
    "DEPENDENCY_UNAVAILABLE": f"{ERROR_TYPE_BASE}/seeder/dependency-unavailable",
    "PERSISTENCE_FAILURE": f"{ERROR_TYPE_BASE}/seeder/persistence-failure",
    "SEED_TIMEOUT": f"{ERROR_TYPE_BASE}/seeder/timeout",
    "UNKNOWN_MODULE": f"{ERROR_TYPE_BASE}/seeder/unknown-module",
    "CIRCULAR_DEPENDENCY": f"{ERROR_TYPE_BASE}/seeder/circular-dependency",
}


class ProblemDetail(BaseModel):
    """RFC 7807 problem document.

    Attributes:
        type: URI identifying the error type.
        title: Short human-readable summary of the problem type.
        status: HTTP status code.
        detail: Explanation specific to this occurrence.
        instance: URI reference for this occurrence.
        errors: Field-level validation errors (extension for 422).
        code: Machine-readable error code (extension).
        details: Structured error context (extension).
        request_id: Request correlation ID (extension).
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(default="about:blank", description="URI identifying the problem type.")
    title: str = Field(..., description="Short summary of the problem type.")
    status: int = Field(..., ge=400, le=599, description="HTTP status code.")
    detail: str | None = Field(None, description="Explanation specific to this occurrence.")
    instance: str | None = Field(None, description="URI reference for this occurrence.")
    errors: list[dict[str, Any]] | None = Field(None, description="Field-level errors.")
    code: str | None = Field(None, description="Machine-readable error code.")
    details: dict[str, Any] | None = Field(None, description="Structured error context.")
    request_id: str | None = Field(None, description="Request correlation ID.")


class ProblemDetailResponse(JSONResponse):
    """JSON response with the RFC 7807 media type."""

    media_type = "application/problem+json"


def problem_response(
    status: int,
    title: str,
    detail: str | None = None,
    error_code: str = "INTERNAL_ERROR",
    errors: list[dict[str, Any]] | None = None,
    details: dict[str, Any] | None = None,
) -> ProblemDetailResponse:
    """Build a problem+json response for the current request.

    Args:
        status: HTTP status code.
        title: Short problem summary.
        detail: Detailed explanation (optional).
        error_code: Internal error code for type URI lookup.
        errors: Field-level validation errors (optional).
        details: Structured context such as the offending module (optional).

    Returns:
        JSONResponse with problem+json content type.
    """
    request_id = request_id_ctx.get()

    problem = ProblemDetail(
        type=ERROR_TYPES.get(error_code, f"{ERROR_TYPE_BASE}/{error_code.lower()}"),
        title=title,
        status=status,
        detail=detail,
        instance=f"/requests/{request_id}" if request_id else None,
        errors=errors,
        code=error_code,
        details=details or None,
        request_id=request_id,
    )

    return ProblemDetailResponse(
        status_code=status,
        content=problem.model_dump(exclude_none=True),
    )
