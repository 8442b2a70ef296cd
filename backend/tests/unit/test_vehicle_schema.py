"""Unit tests: vehicle wire schema (enums, propulsion sets, omitted fields)."""
import itertools
import json
import uuid

import pytest
from pydantic import ValidationError

from schemas.vehicles import NULL_UUID, PropulsionType, Vehicle, VehicleType, new_propulsion_set

pytestmark = pytest.mark.unit

DEVICE_ID = "1443963e-7d93-469c-b8e1-a262715c3b49"


@pytest.mark.parametrize(
    "items",
    list(itertools.permutations(["electric", "combustion", "human"])),
)
def test_propulsion_set_is_order_independent(items):
    """Every ordering of the same members yields the same sorted set."""
    assert new_propulsion_set(*items) == [
        PropulsionType.COMBUSTION,
        PropulsionType.ELECTRIC,
        PropulsionType.HUMAN,
    ]


def test_propulsion_set_removes_duplicates():
    assert new_propulsion_set("combustion", "electric", "combustion") == new_propulsion_set("electric", "combustion")


def test_propulsion_set_sorts_by_name():
    """Ordering is by canonical name, not declaration order."""
    assert new_propulsion_set(PropulsionType.UNKNOWN, PropulsionType.HYBRID, PropulsionType.ELECTRIC_ASSIST) == [
        PropulsionType.ELECTRIC_ASSIST,
        PropulsionType.HYBRID,
        PropulsionType.UNKNOWN,
    ]


def test_vehicle_propulsion_types_canonicalized_on_decode():
    vehicle = Vehicle.model_validate_json(
        json.dumps({"device_id": DEVICE_ID, "propulsion_types": ["electric", "combustion", "electric"]})
    )
    assert vehicle.model_dump(mode="json")["propulsion_types"] == ["combustion", "electric"]


def test_vehicles_equal_regardless_of_propulsion_order():
    a = Vehicle(device_id=DEVICE_ID, propulsion_types=["combustion", "electric"])
    b = Vehicle(device_id=DEVICE_ID, propulsion_types=["electric", "combustion", "electric"])
    assert a == b


def test_json_round_trip_preserves_set_equality():
    original = Vehicle(device_id=DEVICE_ID, propulsion_types=["hybrid", "hydrogen_fuel_cell"])
    decoded = Vehicle.model_validate_json(original.model_dump_json())
    assert decoded == original


@pytest.mark.parametrize("value", [v.value for v in VehicleType])
def test_vehicle_type_parses_and_formats(value):
    vehicle = Vehicle.model_validate({"vehicle_type": value})
    assert vehicle.vehicle_type == VehicleType(value)
    assert vehicle.model_dump(mode="json")["vehicle_type"] == value


def test_unknown_vehicle_type_rejected():
    with pytest.raises(ValidationError):
        Vehicle.model_validate({"device_id": DEVICE_ID, "vehicle_type": "hovercraft"})


def test_unknown_propulsion_type_rejected():
    with pytest.raises(ValidationError):
        Vehicle.model_validate({"device_id": DEVICE_ID, "propulsion_types": ["steam"]})


def test_negative_capacity_rejected():
    with pytest.raises(ValidationError):
        Vehicle.model_validate({"device_id": DEVICE_ID, "battery_capacity": -1})


def test_missing_ids_decode_to_null_uuid():
    """Missing ids are left for validation to reject rather than failing decode."""
    vehicle = Vehicle.model_validate({})
    assert vehicle.device_id == NULL_UUID
    assert vehicle.provider_id == NULL_UUID


def test_null_attributes_serialize_as_empty_objects():
    vehicle = Vehicle.model_validate(
        {"device_id": DEVICE_ID, "vehicle_attributes": None, "accessibility_attributes": None}
    )
    data = vehicle.model_dump(mode="json")
    assert data["vehicle_attributes"] == {}
    assert data["accessibility_attributes"] == {}


def test_zero_and_missing_capacities_omitted():
    data = Vehicle(device_id=DEVICE_ID, battery_capacity=0, maximum_speed=25).model_dump(mode="json")
    assert "battery_capacity" not in data
    assert "fuel_capacity" not in data
    assert data["maximum_speed"] == 25


def test_optional_ids_omitted_when_null():
    data = Vehicle(device_id=DEVICE_ID).model_dump(mode="json")
    assert "data_provider_id" not in data
    assert "vehicle_id" not in data


def test_full_vehicle_serializes_all_fields():
    data_provider = uuid.uuid4()
    data = Vehicle(
        device_id=DEVICE_ID,
        provider_id=DEVICE_ID,
        data_provider_id=data_provider,
        vehicle_id="SCOOT-1",
        vehicle_type="scooter_standing",
        propulsion_types=["electric"],
        vehicle_attributes={"year": 2023},
        battery_capacity=500,
        fuel_capacity=3,
        maximum_speed=25,
    ).model_dump(mode="json")
    assert data == {
        "device_id": DEVICE_ID,
        "provider_id": DEVICE_ID,
        "data_provider_id": str(data_provider),
        "vehicle_id": "SCOOT-1",
        "vehicle_type": "scooter_standing",
        "propulsion_types": ["electric"],
        "vehicle_attributes": {"year": 2023},
        "accessibility_attributes": {},
        "battery_capacity": 500,
        "fuel_capacity": 3,
        "maximum_speed": 25,
    }
