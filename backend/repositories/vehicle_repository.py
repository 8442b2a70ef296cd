"""Vehicle repository: fetch, list, insert, update.

Reads are scoped to the owning provider, so a vehicle registered by another
provider is indistinguishable from one that does not exist.
"""
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.vehicle import Vehicle as VehicleModel
from repositories.errors import ConflictError, NotFoundError
from schemas.pagination import Page
from schemas.vehicles import Vehicle


def _row_values(vehicle: Vehicle) -> dict[str, Any]:
    """Column values for everything except the identity columns (device_id, provider_id)."""
    return {
        "data_provider_id": str(vehicle.data_provider_id) if vehicle.data_provider_id else None,
        "external_id": vehicle.vehicle_id,
        "vehicle_type": vehicle.vehicle_type.value,
        "propulsion_types": [pt.value for pt in vehicle.propulsion_types],
        "attributes": dict(vehicle.vehicle_attributes),
        "accessibility_attributes": dict(vehicle.accessibility_attributes),
        "battery_capacity": vehicle.battery_capacity or None,
        "fuel_capacity": vehicle.fuel_capacity or None,
        "maximum_speed": vehicle.maximum_speed or None,
    }


def _vehicle_from_row(row: VehicleModel) -> Vehicle:
    """Build the wire Vehicle from a model instance."""
    return Vehicle(
        device_id=row.device_id,
        provider_id=row.provider_id,
        data_provider_id=row.data_provider_id,
        vehicle_id=row.external_id,
        vehicle_type=row.vehicle_type,
        propulsion_types=row.propulsion_types or [],
        vehicle_attributes=row.attributes,
        accessibility_attributes=row.accessibility_attributes,
        battery_capacity=row.battery_capacity,
        fuel_capacity=row.fuel_capacity,
        maximum_speed=row.maximum_speed,
    )


def _owned_by(provider_id: UUID):
    return VehicleModel.provider_id == str(provider_id)


def fetch_vehicle(session: Session, device_id: UUID, provider_id: UUID) -> Optional[Vehicle]:
    """Return the provider's vehicle by device_id, or None."""
    row = session.execute(
        select(VehicleModel).where(VehicleModel.device_id == str(device_id), _owned_by(provider_id))
    ).scalar_one_or_none()
    return _vehicle_from_row(row) if row is not None else None


def count_vehicles(session: Session, provider_id: UUID) -> int:
    """Return the number of vehicles registered by a provider."""
    result = session.execute(select(func.count()).select_from(VehicleModel).where(_owned_by(provider_id)))
    return result.scalar() or 0


def list_vehicles(session: Session, provider_id: UUID, limit: int, offset: int) -> Page[Vehicle]:
    """Return one page of the provider's vehicles ordered by device_id, with the total count.

    The total is computed by a window over the same statement that selects the page,
    so both describe the same snapshot. An empty page (offset past the end) has no
    row to carry the window value and falls back to a count in the same transaction.
    """
    result = session.execute(
        select(VehicleModel, func.count().over().label("total"))
        .where(_owned_by(provider_id))
        .order_by(VehicleModel.device_id)
        .limit(limit)
        .offset(offset)
    )
    rows = result.all()
    if rows:
        total = rows[0][1]
    else:
        total = count_vehicles(session, provider_id)
    return Page[Vehicle](items=[_vehicle_from_row(row) for row, _ in rows], total=total)


def insert_vehicle(session: Session, vehicle: Vehicle) -> None:
    """Insert a new vehicle and commit. Raises ConflictError if device_id is taken."""
    device_id = str(vehicle.device_id)
    if session.get(VehicleModel, device_id) is not None:
        raise ConflictError(f"vehicle {device_id} is already registered")
    try:
        # Savepoint so a concurrent duplicate only discards this insert.
        with session.begin_nested():
            session.add(
                VehicleModel(
                    device_id=device_id,
                    provider_id=str(vehicle.provider_id),
                    **_row_values(vehicle),
                )
            )
    except IntegrityError as e:
        raise ConflictError(f"vehicle {device_id} is already registered") from e
    session.commit()


def update_vehicle(session: Session, vehicle: Vehicle) -> None:
    """Overwrite a provider's vehicle and commit. Raises NotFoundError if it has no such vehicle.

    provider_id is part of the match and is never written, so ownership cannot change.
    """
    row = session.execute(
        select(VehicleModel).where(
            VehicleModel.device_id == str(vehicle.device_id),
            _owned_by(vehicle.provider_id),
        )
    ).scalar_one_or_none()
    if row is None:
        raise NotFoundError(f"vehicle {vehicle.device_id} is not registered")
    for key, value in _row_values(vehicle).items():
        setattr(row, key, value)
    session.commit()
