"""Per-warehouse opening stock for a product.

A product carries a list of ``{warehouse_id, stock_quantity}`` entries.
Only positive quantities are kept: entering an empty, invalid, zero or
negative quantity removes the warehouse from the list. Updating a
warehouse that is already listed replaces its entry in place, a new
warehouse is appended.

Validation rules:
- a nationwide product needs stock in at least one zonal warehouse
- every product needs stock in at least one warehouse
"""

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from warehouse_mapping.models.warehouse import (
    Warehouse,
    WarehouseId,
    WarehouseType,
    coerce_warehouse_id,
)

logger = logging.getLogger(__name__)

NATIONWIDE_NEEDS_ZONAL = "Nationwide products should have at least one zonal assignment"
NO_STOCK_ASSIGNED = "Assign stock to at least one zonal or division warehouse"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class DeliveryType(str, Enum):
    """How widely a product is delivered."""

    NATIONWIDE = "nationwide"
    ZONAL = "zonal"


@dataclass(frozen=True)
class StockAssignment:
    """Opening stock held for a product in one warehouse."""

    warehouse_id: WarehouseId
    stock_quantity: int

    def to_payload(self) -> dict[str, Any]:
        return {"warehouse_id": self.warehouse_id, "stock_quantity": self.stock_quantity}


def parse_quantity(value: Any) -> int | None:
    """Read a stock quantity as typed into the form.

    The leading integer is used ("12 units" is 12, "3.7" is 3). Returns
    None for empty input, input without a leading integer, and negative
    numbers.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        quantity = value
    else:
        match = _LEADING_INT.match(str(value))
        if match is None:
            return None
        quantity = int(match.group(1))
    return quantity if quantity >= 0 else None


def update_assignment(
    assignments: Sequence[StockAssignment],
    warehouse_id: WarehouseId,
    value: Any,
) -> list[StockAssignment]:
    """Set the stock for one warehouse, returning a new list.

    A quantity that is empty, invalid or not positive removes the entry.
    """
    warehouse_id = coerce_warehouse_id(warehouse_id)
    quantity = parse_quantity(value)

    if quantity is None or quantity <= 0:
        return [a for a in assignments if a.warehouse_id != warehouse_id]

    updated = StockAssignment(warehouse_id=warehouse_id, stock_quantity=quantity)
    result = list(assignments)
    for index, assignment in enumerate(result):
        if assignment.warehouse_id == warehouse_id:
            result[index] = updated
            return result
    result.append(updated)
    return result


def parse_assignments(items: Iterable[Mapping[str, Any]] | None) -> list[StockAssignment]:
    """Build assignments from stored or submitted entries.

    Entries are applied in order through update_assignment, so a repeated
    warehouse keeps its first position with the last quantity given.
    """
    assignments: list[StockAssignment] = []
    for item in items or []:
        assignments = update_assignment(
            assignments, item["warehouse_id"], item.get("stock_quantity")
        )
    return assignments


def clear_assignments_by_type(
    assignments: Sequence[StockAssignment],
    warehouse_type: WarehouseType,
    catalog: Mapping[WarehouseId, Warehouse],
) -> list[StockAssignment]:
    """Drop every assignment to a warehouse of the given type.

    Assignments to warehouses missing from the catalog are kept.
    """
    result = []
    for assignment in assignments:
        warehouse = catalog.get(assignment.warehouse_id)
        if warehouse is not None and warehouse.type == warehouse_type:
            continue
        result.append(assignment)
    return result


def assigned_stock(
    assignments: Sequence[StockAssignment],
    warehouse_id: WarehouseId,
) -> int | None:
    """Return the stock assigned to a warehouse, or None if unassigned."""
    warehouse_id = coerce_warehouse_id(warehouse_id)
    for assignment in assignments:
        if assignment.warehouse_id == warehouse_id:
            return assignment.stock_quantity
    return None


def divisions_by_parent(
    warehouses: Iterable[Warehouse],
) -> dict[WarehouseId | None, list[Warehouse]]:
    """Group division warehouses under their parent warehouse id.

    Divisions without a parent are grouped under None. Groups and their
    members keep catalog order.
    """
    grouped: dict[WarehouseId | None, list[Warehouse]] = {}
    for warehouse in warehouses:
        if warehouse.type != WarehouseType.DIVISION:
            continue
        grouped.setdefault(warehouse.parent_warehouse_id, []).append(warehouse)
    return grouped


def zonal_assignment_count(
    assignments: Sequence[StockAssignment],
    catalog: Mapping[WarehouseId, Warehouse],
) -> int:
    """Count zonal warehouses holding stock."""
    count = 0
    for assignment in assignments:
        warehouse = catalog.get(assignment.warehouse_id)
        if (
            warehouse is not None
            and warehouse.type == WarehouseType.ZONAL
            and assignment.stock_quantity > 0
        ):
            count += 1
    return count


def total_assigned_warehouses(assignments: Sequence[StockAssignment]) -> int:
    """Count warehouses holding stock, whatever their type."""
    return sum(1 for a in assignments if a.stock_quantity > 0)


def validate_stock_assignments(
    assignments: Sequence[StockAssignment],
    catalog: Mapping[WarehouseId, Warehouse],
    delivery_type: DeliveryType | str,
) -> list[str]:
    """Check a product's stock assignments.

    Returns:
        Error messages, empty when the assignments are acceptable.
    """
    delivery_type = DeliveryType(delivery_type)
    errors = []
    if (
        delivery_type == DeliveryType.NATIONWIDE
        and zonal_assignment_count(assignments, catalog) == 0
    ):
        errors.append(NATIONWIDE_NEEDS_ZONAL)
    if total_assigned_warehouses(assignments) == 0:
        errors.append(NO_STOCK_ASSIGNED)
    if errors:
        logger.debug("Stock assignment validation failed: %s", "; ".join(errors))
    return errors
