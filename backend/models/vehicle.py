"""Vehicle model for DB persistence."""
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from models import Base


class Vehicle(Base):
    """Vehicle table: one row per registered device, owned by a single provider."""

    __tablename__ = "vehicle"

    device_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    # Owning provider. Set at registration and never rewritten by updates.
    provider_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    data_provider_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    external_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    vehicle_type: Mapped[str] = mapped_column(String(32), nullable=False, default="other")
    # Canonical (sorted, de-duplicated) propulsion type names.
    propulsion_types: Mapped[list] = mapped_column(JSON(), nullable=False, default=list)
    attributes: Mapped[dict] = mapped_column(JSON(), nullable=False, default=dict)
    accessibility_attributes: Mapped[dict] = mapped_column(JSON(), nullable=False, default=dict)
    battery_capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    fuel_capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    maximum_speed: Mapped[int | None] = mapped_column(Integer, nullable=True)
