"""Pydantic schemas for paginated list responses."""
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, model_serializer

from schemas.vehicles import Vehicle

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of items plus the total count they were drawn from."""

    items: list[T] = Field(default_factory=list)
    total: int = 0


class PaginationLinks(BaseModel):
    """first/last are always set; prev/next only when such a page exists."""

    first: str
    last: str
    prev: str | None = None
    next: str | None = None

    @model_serializer(mode="wrap")
    def _omit_missing(self, handler):
        return {k: v for k, v in handler(self).items() if v is not None}


class PaginatedVehiclesResponse(BaseModel):
    """Response for GET /vehicles."""

    version: str
    links: PaginationLinks
    vehicles: list[Vehicle]
