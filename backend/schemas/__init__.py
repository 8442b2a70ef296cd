# Schemas package
from .errors import ApiErrorBody, ApiErrorType, BulkResponse, FailureDetails
from .health import HealthResponse
from .pagination import Page, PaginatedVehiclesResponse, PaginationLinks
from .vehicles import AuthInfo, PropulsionType, Vehicle, VehicleType

__all__ = [
    "ApiErrorBody",
    "ApiErrorType",
    "AuthInfo",
    "BulkResponse",
    "FailureDetails",
    "HealthResponse",
    "Page",
    "PaginatedVehiclesResponse",
    "PaginationLinks",
    "PropulsionType",
    "Vehicle",
    "VehicleType",
]
