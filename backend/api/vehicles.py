"""Vehicle API routes: bulk register/update, paginated list, fetch by device_id."""
import logging
from collections.abc import Callable
from time import monotonic
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.errors import ApiError
from db import get_db
from repositories.vehicle_repository import (
    fetch_vehicle as repo_fetch_vehicle,
    insert_vehicle as repo_insert_vehicle,
    list_vehicles as repo_list_vehicles,
    update_vehicle as repo_update_vehicle,
)
from schemas.errors import ApiErrorType, BulkResponse
from schemas.pagination import PaginatedVehiclesResponse
from schemas.vehicles import AuthInfo, Vehicle
from utils.auth import get_auth_info
from utils.bulk import apply_bulk
from utils.config import API_VERSION, REQUEST_TIMEOUT_SECONDS
from utils.pagination import LIMIT_MISSING, build_links, compute_link_offsets, parse_page_params
from utils.validators import BulkOperation

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/vehicles", tags=["vehicles"])

PAYLOAD_NOT_JSON = "vehicles payload is not valid JSON"

# A JSON null body is an empty batch.
_vehicle_list = TypeAdapter(Optional[list[Vehicle]])


def request_deadline() -> float:
    """FastAPI dependency: monotonic time by which a bulk write must stop starting new items."""
    return monotonic() + REQUEST_TIMEOUT_SECONDS


async def decode_vehicles(request: Request) -> list[Vehicle]:
    """Decode the request body as a JSON array of vehicles; any failure rejects the whole batch."""
    body = await request.body()
    try:
        return _vehicle_list.validate_json(body) or []
    except ValidationError as e:
        LOG.info("Malformed vehicles payload: %s", e)
        raise ApiError(status.HTTP_400_BAD_REQUEST, ApiErrorType.BAD_PARAM, [PAYLOAD_NOT_JSON]) from e


def _writer(db: Session, write: Callable[[Session, Vehicle], None]) -> Callable[[Vehicle], None]:
    """Bind a repository write to the request session, discarding the session state if storage fails."""

    def run(vehicle: Vehicle) -> None:
        try:
            write(db, vehicle)
        except SQLAlchemyError:
            db.rollback()
            raise

    return run


def _bulk_response(code: int, response: BulkResponse) -> JSONResponse:
    return JSONResponse(status_code=code, content=response.model_dump(mode="json"))


@router.post("", response_model=BulkResponse, status_code=status.HTTP_201_CREATED)
def register_vehicles(
    auth: AuthInfo = Depends(get_auth_info),
    vehicles: list[Vehicle] = Depends(decode_vehicles),
    db: Session = Depends(get_db),
    deadline: float = Depends(request_deadline),
) -> JSONResponse:
    """Register a batch of vehicles owned by the caller."""
    code, response = apply_bulk(vehicles, auth, BulkOperation.REGISTER, _writer(db, repo_insert_vehicle), deadline)
    LOG.info("Registered %d/%d vehicles for provider %s", response.success, response.total, auth.provider_id)
    return _bulk_response(code, response)


@router.put("", response_model=BulkResponse, status_code=status.HTTP_200_OK)
def update_vehicles(
    auth: AuthInfo = Depends(get_auth_info),
    vehicles: list[Vehicle] = Depends(decode_vehicles),
    db: Session = Depends(get_db),
    deadline: float = Depends(request_deadline),
) -> JSONResponse:
    """Update a batch of the caller's vehicles."""
    code, response = apply_bulk(vehicles, auth, BulkOperation.UPDATE, _writer(db, repo_update_vehicle), deadline)
    LOG.info("Updated %d/%d vehicles for provider %s", response.success, response.total, auth.provider_id)
    return _bulk_response(code, response)


@router.get("", response_model=PaginatedVehiclesResponse)
def list_vehicles(
    request: Request,
    auth: AuthInfo = Depends(get_auth_info),
    db: Session = Depends(get_db),
) -> Response:
    """List one page of the caller's vehicles; page[limit] is required."""
    params, errors, warnings = parse_page_params(request.query_params)
    if errors:
        kind = ApiErrorType.MISSING_PARAM if errors == [LIMIT_MISSING] else ApiErrorType.BAD_PARAM
        raise ApiError(status.HTTP_400_BAD_REQUEST, kind, errors)

    try:
        page = repo_list_vehicles(db, auth.provider_id, params.limit, params.offset)
    except SQLAlchemyError:
        LOG.exception("Failed to list vehicles for provider %s", auth.provider_id)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    offsets = compute_link_offsets(page.total, params.limit, params.offset)
    body = PaginatedVehiclesResponse(
        version=API_VERSION,
        links=build_links(request.url, offsets),
        vehicles=page.items,
    )
    headers = {}
    if warnings:
        LOG.info("List vehicles request adjusted: %s", "; ".join(warnings))
        headers["Warning"] = ", ".join(f'299 - "{w}"' for w in warnings)
    return JSONResponse(content=body.model_dump(mode="json"), headers=headers)


@router.get("/{device_id}", response_model=Vehicle)
def fetch_vehicle(
    device_id: str,
    auth: AuthInfo = Depends(get_auth_info),
    db: Session = Depends(get_db),
) -> Response:
    """Fetch one of the caller's vehicles. Unknown, foreign and malformed ids all answer 404."""
    try:
        vid = UUID(device_id)
    except ValueError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    try:
        vehicle = repo_fetch_vehicle(db, vid, auth.provider_id)
    except SQLAlchemyError:
        LOG.exception("Failed to fetch vehicle %s", device_id)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    if vehicle is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return JSONResponse(content=vehicle.model_dump(mode="json"))
