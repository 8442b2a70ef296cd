"""Pydantic schemas for API errors and bulk write responses."""
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ApiErrorType(str, Enum):
    """Stable machine-readable error kinds."""

    UNKNOWN = "unknown"
    BAD_PARAM = "bad_param"
    MISSING_PARAM = "missing_param"
    ALREADY_REGISTERED = "already_registered"
    UNREGISTERED = "unregistered"


ERROR_DESCRIPTIONS: dict[ApiErrorType, str] = {
    ApiErrorType.UNKNOWN: "An unknown error occurred",
    ApiErrorType.BAD_PARAM: "A validation error occurred",
    ApiErrorType.MISSING_PARAM: "A required parameter is missing",
    ApiErrorType.ALREADY_REGISTERED: "A vehicle with device_id is already registered",
    ApiErrorType.UNREGISTERED: "This device_id is unregistered",
}


class ApiErrorBody(BaseModel):
    """Error payload: {error, error_description, error_details}."""

    error: ApiErrorType
    error_description: str
    error_details: list[str] = Field(default_factory=list)

    @classmethod
    def of(cls, kind: ApiErrorType, details: list[str] | None = None) -> "ApiErrorBody":
        return cls(error=kind, error_description=ERROR_DESCRIPTIONS[kind], error_details=list(details or []))


class FailureDetails(ApiErrorBody):
    """One failed item in a bulk write, flattened with its error fields."""

    item: dict[str, Any]


class BulkResponse(BaseModel):
    """Aggregate outcome of a bulk register/update."""

    success: int = 0
    total: int = 0
    failures: list[FailureDetails] = Field(default_factory=list)
