"""Membership management for primary and fallback warehouse pools."""

from collections.abc import Mapping, Sequence
from enum import Enum

from warehouse_mapping.models.mapping import MappingStrategy
from warehouse_mapping.models.warehouse import Warehouse, WarehouseId, WarehouseType


class PoolSlot(str, Enum):
    """The two pools a warehouse can be assigned to."""

    PRIMARY = "primary"
    FALLBACK = "fallback"


class SlotTypeMismatchError(ValueError):
    """Raised when a warehouse's type does not fit the pool it is placed in."""


def toggle_membership(
    ids: Sequence[WarehouseId],
    warehouse_id: WarehouseId,
) -> list[WarehouseId]:
    """Add the id if absent, remove it if present.

    Returns a new list; the input is not modified. Membership is what
    matters: the remaining ids keep their relative order and a newly added
    id goes to the end, so toggling an id off and on again restores the
    same set but may move that id to the end.
    """
    if warehouse_id in ids:
        return [existing for existing in ids if existing != warehouse_id]
    return [*ids, warehouse_id]


def expected_type(
    strategy: MappingStrategy,
    slot: PoolSlot,
) -> WarehouseType | None:
    """Return the warehouse type a pool expects under a strategy.

    None means the pool accepts any type.
    """
    if strategy == MappingStrategy.CUSTOM:
        return None
    if slot == PoolSlot.FALLBACK:
        return WarehouseType.DIVISION
    if strategy == MappingStrategy.DIVISION_ONLY:
        return WarehouseType.DIVISION
    return WarehouseType.ZONAL


def check_slot(
    warehouse_id: WarehouseId,
    slot: PoolSlot,
    strategy: MappingStrategy,
    catalog: Mapping[WarehouseId, Warehouse],
) -> None:
    """Verify a warehouse may be placed into a pool.

    Ids missing from the catalog are accepted since the catalog may be
    stale relative to the inventory service.

    Raises:
        SlotTypeMismatchError: If the warehouse type does not match the pool.
    """
    required = expected_type(strategy, slot)
    warehouse = catalog.get(warehouse_id)
    if required is None or warehouse is None:
        return
    if warehouse.type != required:
        raise SlotTypeMismatchError(
            f"Warehouse {warehouse_id!r} is {warehouse.type.value}, "
            f"{slot.value} pool under {strategy.value} expects {required.value}"
        )
