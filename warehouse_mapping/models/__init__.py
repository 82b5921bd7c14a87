"""Data models for warehouse assignment."""

from warehouse_mapping.models.mapping import (
    MappingStrategy,
    ProductWarehouseMapping,
    UnknownStrategyError,
    parse_strategy,
)
from warehouse_mapping.models.warehouse import Warehouse, WarehouseId, WarehouseType

__all__ = [
    "MappingStrategy",
    "ProductWarehouseMapping",
    "UnknownStrategyError",
    "Warehouse",
    "WarehouseId",
    "WarehouseType",
    "parse_strategy",
]
