"""Validate vehicles submitted for registration or update."""
from enum import Enum

from schemas.vehicles import NULL_UUID, AuthInfo, Vehicle


class BulkOperation(str, Enum):
    """Write operations accepted on /vehicles."""

    REGISTER = "register"
    UPDATE = "update"


NULL_DEVICE_ID = "device_id: null UUID is not allowed"
# Ownership messages differ by operation; clients match on the exact strings.
FOREIGN_PROVIDER_ON_REGISTER = "provider_id: not allowed to register vehicle for another provider"
FOREIGN_PROVIDER_ON_UPDATE = "provider_id: does not match user's provider ID"


def validate_vehicle(vehicle: Vehicle, auth: AuthInfo, operation: BulkOperation) -> list[str]:
    """
    Return field-level errors for a vehicle acting as auth's provider; empty when valid.
    Pure: the same input always yields the same list.
    """
    errors: list[str] = []
    if vehicle.device_id == NULL_UUID:
        errors.append(NULL_DEVICE_ID)
    if vehicle.provider_id != auth.provider_id:
        if operation is BulkOperation.REGISTER:
            errors.append(FOREIGN_PROVIDER_ON_REGISTER)
        else:
            errors.append(FOREIGN_PROVIDER_ON_UPDATE)
    return errors
