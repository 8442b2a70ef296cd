"""Pydantic schemas for vehicle API."""
from enum import Enum
from typing import Annotated, Any
from uuid import UUID

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, model_serializer

NULL_UUID = UUID(int=0)


class VehicleType(str, Enum):
    """Vehicle category as published on the wire."""

    OTHER = "other"
    BICYCLE = "bicycle"
    BUS = "bus"
    CARGO_BICYCLE = "cargo_bicycle"
    CAR = "car"
    DELIVERY_ROBOT = "delivery_robot"
    MOPED = "moped"
    SCOOTER_STANDING = "scooter_standing"
    SCOOTER_SEATED = "scooter_seated"
    TRUCK = "truck"


class PropulsionType(str, Enum):
    """Propulsion kind; a vehicle carries a set of these."""

    UNKNOWN = "unknown"
    HUMAN = "human"
    ELECTRIC_ASSIST = "electric_assist"
    ELECTRIC = "electric"
    COMBUSTION = "combustion"
    COMBUSTION_DIESEL = "combustion_diesel"
    HYBRID = "hybrid"
    HYDROGEN_FUEL_CELL = "hydrogen_fuel_cell"
    PLUG_IN_HYBRID = "plug_in_hybrid"


def new_propulsion_set(*items: PropulsionType | str) -> list[PropulsionType]:
    """De-duplicate propulsion types and order them by name."""
    return sorted({PropulsionType(i) for i in items}, key=lambda pt: pt.value)


def _canonical_propulsion_set(items: list[PropulsionType]) -> list[PropulsionType]:
    return new_propulsion_set(*items)


def _empty_record_if_null(value: Any) -> Any:
    return {} if value is None else value


PropulsionTypeSet = Annotated[list[PropulsionType], AfterValidator(_canonical_propulsion_set)]
Record = Annotated[dict[str, Any], BeforeValidator(_empty_record_if_null)]

# Optional on the wire: null/absent is dropped from output, and so is 0 for the capacities.
_OMIT_IF_NONE = ("data_provider_id", "vehicle_id")
_OMIT_IF_ZERO = ("battery_capacity", "fuel_capacity", "maximum_speed")


class Vehicle(BaseModel):
    """Vehicle record as registered, updated and fetched by providers.

    A missing device_id or provider_id decodes to the nil UUID so that the
    request fails per-item validation instead of the whole payload decode.
    """

    device_id: UUID = NULL_UUID
    provider_id: UUID = NULL_UUID
    data_provider_id: UUID | None = None
    vehicle_id: str | None = None
    vehicle_type: VehicleType = VehicleType.OTHER
    propulsion_types: PropulsionTypeSet = Field(default_factory=list)
    vehicle_attributes: Record = Field(default_factory=dict)
    accessibility_attributes: Record = Field(default_factory=dict)
    battery_capacity: int | None = Field(default=None, ge=0)
    fuel_capacity: int | None = Field(default=None, ge=0)
    maximum_speed: int | None = Field(default=None, ge=0)

    @model_serializer(mode="wrap")
    def _omit_not_provided(self, handler):
        data = handler(self)
        for key in _OMIT_IF_NONE:
            if data.get(key) is None:
                data.pop(key, None)
        for key in _OMIT_IF_ZERO:
            if not data.get(key):
                data.pop(key, None)
        return data


class AuthInfo(BaseModel):
    """Identity established from a verified bearer token; lives for one request."""

    provider_id: UUID
