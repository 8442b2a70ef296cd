"""Apply a bulk register/update item by item and aggregate the outcomes."""
import logging
from collections.abc import Callable, Sequence
from time import monotonic
from typing import Optional

from fastapi import status

from repositories.errors import ConflictError, NotFoundError
from schemas.errors import ApiErrorBody, ApiErrorType, BulkResponse, FailureDetails
from schemas.vehicles import AuthInfo, Vehicle
from utils.validators import BulkOperation, validate_vehicle

LOG = logging.getLogger(__name__)

_SUCCESS_STATUS = {
    BulkOperation.REGISTER: status.HTTP_201_CREATED,
    BulkOperation.UPDATE: status.HTTP_200_OK,
}


def _failure(vehicle: Vehicle, kind: ApiErrorType, details: list[str] | None = None) -> FailureDetails:
    error = ApiErrorBody.of(kind, details)
    return FailureDetails(item=vehicle.model_dump(mode="json"), **error.model_dump())


def overall_status(response: BulkResponse, server_errors: int, operation: BulkOperation) -> int:
    """
    500 only when every item failed for server reasons; 400 when nothing succeeded;
    otherwise the operation's success code. An empty batch is a success.
    """
    if response.total > 0 and server_errors == response.total:
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    if response.total > 0 and response.success == 0:
        return status.HTTP_400_BAD_REQUEST
    return _SUCCESS_STATUS[operation]


def apply_bulk(
    vehicles: Sequence[Vehicle],
    auth: AuthInfo,
    operation: BulkOperation,
    write: Callable[[Vehicle], None],
    deadline: Optional[float] = None,
) -> tuple[int, BulkResponse]:
    """
    Validate and write each vehicle in input order; one item's failure never stops the rest.
    write is the repository call for the operation (insert or update).
    deadline is a time.monotonic() value; once it passes, the remaining items are not
    attempted and are reported as unknown failures.
    Returns (http_status, BulkResponse).
    """
    response = BulkResponse(total=len(vehicles))
    server_errors = 0
    for index, vehicle in enumerate(vehicles):
        if deadline is not None and monotonic() >= deadline:
            skipped = vehicles[index:]
            LOG.warning("Request deadline passed; %d of %d vehicles not attempted", len(skipped), len(vehicles))
            response.failures.extend(_failure(v, ApiErrorType.UNKNOWN) for v in skipped)
            server_errors += len(skipped)
            break
        errors = validate_vehicle(vehicle, auth, operation)
        if errors:
            response.failures.append(_failure(vehicle, ApiErrorType.BAD_PARAM, errors))
            continue
        try:
            write(vehicle)
        except ConflictError:
            response.failures.append(_failure(vehicle, ApiErrorType.ALREADY_REGISTERED))
            continue
        except NotFoundError:
            response.failures.append(_failure(vehicle, ApiErrorType.UNREGISTERED))
            continue
        except Exception:
            LOG.exception("Failed to %s vehicle %s", operation.value, vehicle.device_id)
            response.failures.append(_failure(vehicle, ApiErrorType.UNKNOWN))
            server_errors += 1
            continue
        response.success += 1
    return overall_status(response, server_errors, operation), response
