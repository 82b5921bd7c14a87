"""Human-readable summary of a resolved warehouse assignment."""

import logging
from collections.abc import Mapping, Sequence

from warehouse_mapping.models.mapping import (
    MappingStrategy,
    ProductWarehouseMapping,
    parse_strategy,
)
from warehouse_mapping.models.warehouse import Warehouse, WarehouseId

logger = logging.getLogger(__name__)

NATIONWIDE_SUMMARY = "All zonal warehouses with division fallback enabled"


def warehouse_name(
    warehouse_id: WarehouseId,
    catalog: Mapping[WarehouseId, Warehouse],
) -> str:
    """Look up a warehouse name, falling back to a placeholder."""
    warehouse = catalog.get(warehouse_id)
    if warehouse is None or not warehouse.name:
        return f"Warehouse {warehouse_id}"
    return warehouse.name


def should_show_summary(
    primary: Sequence[WarehouseId],
    fallback: Sequence[WarehouseId],
    strategy: MappingStrategy | str,
) -> bool:
    """Whether there is anything worth summarizing."""
    return (
        len(primary) > 0
        or len(fallback) > 0
        or parse_strategy(strategy) == MappingStrategy.NATIONWIDE
    )


def summarize(
    strategy: MappingStrategy | str,
    primary: Sequence[WarehouseId],
    fallback: Sequence[WarehouseId],
    enable_fallback: bool,
    catalog: Mapping[WarehouseId, Warehouse],
) -> list[str]:
    """Describe an assignment as summary lines.

    Nationwide always yields the same single line regardless of pool
    contents. Other strategies list the primary pool and, only while
    fallback is enabled, the fallback pool.
    """
    if parse_strategy(strategy) == MappingStrategy.NATIONWIDE:
        return [NATIONWIDE_SUMMARY]

    lines: list[str] = []
    if primary:
        names = ", ".join(warehouse_name(i, catalog) for i in primary)
        lines.append(f"Primary: {names}")
    if enable_fallback and fallback:
        names = ", ".join(warehouse_name(i, catalog) for i in fallback)
        lines.append(f"Fallback: {names}")
    return lines


def find_empty_pools(mapping: ProductWarehouseMapping) -> list[str]:
    """List advisory warnings for a mapping that would source nothing.

    These never block a save; an empty mapping is a legal state.
    """
    if mapping.warehouse_mapping_type == MappingStrategy.NATIONWIDE:
        return []

    warnings: list[str] = []
    if not mapping.primary_warehouses:
        warnings.append("No primary warehouses selected")
    if mapping.enable_fallback and not mapping.fallback_warehouses:
        warnings.append("Fallback enabled without fallback warehouses")

    for warning in warnings:
        logger.warning(
            "Warehouse mapping %s: %s",
            mapping.warehouse_mapping_type.value,
            warning,
        )
    return warnings
