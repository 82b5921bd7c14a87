"""Warehouse catalog model as delivered by the inventory service."""

from collections.abc import Iterable
from enum import Enum
from typing import Any, TypeAlias

from pydantic import BaseModel, field_validator

WarehouseId: TypeAlias = int | str


class WarehouseType(str, Enum):
    """Tier a warehouse serves."""

    ZONAL = "zonal"
    DIVISION = "division"


def coerce_warehouse_id(value: Any) -> WarehouseId:
    """Normalize a warehouse id.

    The admin forms submit ids as strings, the catalog returns integers.
    Canonical ASCII decimal strings ("12", not "012") are converted to int
    so both compare equal; anything else is kept as the original string.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid warehouse id: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        raise ValueError("Warehouse id must not be empty")
    if text.isascii() and text.isdecimal() and str(int(text)) == text:
        return int(text)
    return text


class Warehouse(BaseModel):
    """A warehouse from the external catalog.

    Attributes:
        id: Catalog identifier
        type: Zonal or division tier
        name: Human-readable warehouse name
        location: Free-text location, descriptive only
        parent_warehouse_id: Parent warehouse; divisions are grouped under it
    """

    id: WarehouseId
    type: WarehouseType
    name: str
    location: str | None = None
    parent_warehouse_id: WarehouseId | None = None

    model_config = {"from_attributes": True}

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> WarehouseId:
        return coerce_warehouse_id(value)

    @field_validator("parent_warehouse_id", mode="before")
    @classmethod
    def _coerce_parent_id(cls, value: Any) -> WarehouseId | None:
        if value is None:
            return None
        return coerce_warehouse_id(value)

    def __repr__(self) -> str:
        return f"<Warehouse(id={self.id!r}, type={self.type.value!r}, name={self.name!r})>"


def ids_of_type(
    warehouses: Iterable[Warehouse],
    warehouse_type: WarehouseType,
) -> list[WarehouseId]:
    """Return the ids of all warehouses of a type, in catalog order."""
    return [w.id for w in warehouses if w.type == warehouse_type]


def zonal_ids(warehouses: Iterable[Warehouse]) -> list[WarehouseId]:
    """Return the ids of all zonal warehouses."""
    return ids_of_type(warehouses, WarehouseType.ZONAL)


def division_ids(warehouses: Iterable[Warehouse]) -> list[WarehouseId]:
    """Return the ids of all division warehouses."""
    return ids_of_type(warehouses, WarehouseType.DIVISION)


def index_by_id(warehouses: Iterable[Warehouse]) -> dict[WarehouseId, Warehouse]:
    """Build an id lookup for a catalog."""
    return {w.id: w for w in warehouses}
