"""Product-to-warehouse mapping model."""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from warehouse_mapping.models.warehouse import WarehouseId, coerce_warehouse_id

logger = logging.getLogger(__name__)


class MappingStrategy(str, Enum):
    """Policy governing how a product's warehouse pools are derived."""

    NATIONWIDE = "nationwide"
    ZONAL_WITH_FALLBACK = "zonal_with_fallback"
    ZONAL_ONLY = "zonal_only"
    DIVISION_ONLY = "division_only"
    CUSTOM = "custom"


DEFAULT_STRATEGY = MappingStrategy.NATIONWIDE

# Names stored by the older product forms
LEGACY_STRATEGY_ALIASES: dict[str, MappingStrategy] = {
    "auto_zonal_to_division": MappingStrategy.NATIONWIDE,
    "auto_central_to_zonal": MappingStrategy.NATIONWIDE,
    "zonal": MappingStrategy.ZONAL_ONLY,
    "selective_zonal": MappingStrategy.ZONAL_WITH_FALLBACK,
    "selective_zonal_division": MappingStrategy.ZONAL_WITH_FALLBACK,
}


class UnknownStrategyError(ValueError):
    """Raised when a strategy name is not a known mapping strategy."""


def parse_strategy(value: MappingStrategy | str) -> MappingStrategy:
    """Parse a strategy name into a MappingStrategy.

    Accepts enum members, their string values (case-insensitive) and the
    legacy aliases in LEGACY_STRATEGY_ALIASES.

    Raises:
        UnknownStrategyError: If the name matches no strategy.
    """
    if isinstance(value, MappingStrategy):
        return value
    name = str(value).strip().lower()
    try:
        return MappingStrategy(name)
    except ValueError:
        pass
    if name in LEGACY_STRATEGY_ALIASES:
        return LEGACY_STRATEGY_ALIASES[name]
    raise UnknownStrategyError(f"Unknown warehouse mapping strategy: {value!r}")


def unique_ids(values: Any) -> list[WarehouseId]:
    """Coerce a sequence of ids, dropping repeats but keeping first-seen order."""
    if values is None:
        return []
    result: list[WarehouseId] = []
    for value in values:
        warehouse_id = coerce_warehouse_id(value)
        if warehouse_id not in result:
            result.append(warehouse_id)
    return result


class ProductWarehouseMapping(BaseModel):
    """Warehouse assignment for a single product.

    Attributes:
        warehouse_mapping_type: Strategy in effect
        primary_warehouses: First-choice sourcing pool
        fallback_warehouses: Pool consulted when primary cannot fulfil
        enable_fallback: Whether the fallback pool may be consulted at all
        warehouse_notes: Free-text annotation
    """

    warehouse_mapping_type: MappingStrategy = DEFAULT_STRATEGY
    primary_warehouses: list[WarehouseId] = Field(default_factory=list)
    fallback_warehouses: list[WarehouseId] = Field(default_factory=list)
    enable_fallback: bool = True
    warehouse_notes: str = ""

    @field_validator("warehouse_mapping_type", mode="before")
    @classmethod
    def _parse_strategy(cls, value: Any) -> MappingStrategy:
        if value is None:
            return DEFAULT_STRATEGY
        return parse_strategy(value)

    @field_validator("primary_warehouses", "fallback_warehouses", mode="before")
    @classmethod
    def _unique_ids(cls, value: Any) -> list[WarehouseId]:
        return unique_ids(value)

    @field_validator("warehouse_notes", mode="before")
    @classmethod
    def _notes(cls, value: Any) -> str:
        return value or ""

    @classmethod
    def from_product(cls, product: Mapping[str, Any]) -> "ProductWarehouseMapping":
        """Seed a mapping from a product record.

        Fallback stays enabled unless the product explicitly stores False.
        A stored strategy that no longer parses (for example "central")
        opens as the default strategy instead of failing.
        """
        stored = product.get("warehouse_mapping_type")
        strategy = DEFAULT_STRATEGY
        if stored is not None:
            try:
                strategy = parse_strategy(stored)
            except UnknownStrategyError:
                logger.warning(
                    "Product %s stores unknown warehouse mapping type %r, using %s",
                    product.get("id"),
                    stored,
                    DEFAULT_STRATEGY.value,
                )
        return cls(
            warehouse_mapping_type=strategy,
            primary_warehouses=product.get("primary_warehouses"),
            fallback_warehouses=product.get("fallback_warehouses"),
            enable_fallback=product.get("enable_fallback") is not False,
            warehouse_notes=product.get("warehouse_notes"),
        )

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the inventory service.

        The fallback pool is only sent while fallback is enabled.
        """
        return {
            "warehouse_mapping_type": self.warehouse_mapping_type.value,
            "primary_warehouses": list(self.primary_warehouses),
            "fallback_warehouses": (
                list(self.fallback_warehouses) if self.enable_fallback else []
            ),
            "enable_fallback": self.enable_fallback,
            "warehouse_notes": self.warehouse_notes,
        }
