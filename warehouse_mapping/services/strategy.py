"""Strategy selection: default warehouse pools for each mapping strategy.

Selecting a strategy always discards the pools chosen under the previous
one. Only the nationwide strategy derives its pools from the catalog:
- nationwide: every zonal warehouse is primary, every division warehouse
  is fallback, and fallback is forced on
- zonal_only / division_only: empty pools, fallback forced off
- zonal_with_fallback / custom: empty pools, fallback flag left as it was
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from warehouse_mapping.models.mapping import (
    MappingStrategy,
    UnknownStrategyError,
    parse_strategy,
)
from warehouse_mapping.models.warehouse import (
    Warehouse,
    WarehouseId,
    division_ids,
    zonal_ids,
)

__all__ = [
    "StrategyDefaults",
    "UnknownStrategyError",
    "is_pool_editable",
    "parse_strategy",
    "select_strategy",
]


@dataclass(frozen=True)
class StrategyDefaults:
    """Pools and fallback flag to apply after a strategy is selected."""

    primary: list[WarehouseId] = field(default_factory=list)
    fallback: list[WarehouseId] = field(default_factory=list)
    enable_fallback: bool = True


def select_strategy(
    strategy: MappingStrategy | str,
    all_warehouses: Iterable[Warehouse],
    current_enable_fallback: bool = True,
) -> StrategyDefaults:
    """Compute the default pools for a strategy.

    Args:
        strategy: Strategy to apply (enum member or name)
        all_warehouses: The full warehouse catalog
        current_enable_fallback: Fallback flag before the change, kept by
            strategies that let the user toggle it

    Returns:
        StrategyDefaults with fresh pool lists.

    Raises:
        UnknownStrategyError: If the strategy name is not recognized.
    """
    strategy = parse_strategy(strategy)

    if strategy == MappingStrategy.NATIONWIDE:
        warehouses = list(all_warehouses)
        return StrategyDefaults(
            primary=zonal_ids(warehouses),
            fallback=division_ids(warehouses),
            enable_fallback=True,
        )
    if strategy in (MappingStrategy.ZONAL_ONLY, MappingStrategy.DIVISION_ONLY):
        return StrategyDefaults(enable_fallback=False)
    return StrategyDefaults(enable_fallback=current_enable_fallback)


def is_pool_editable(strategy: MappingStrategy | str) -> bool:
    """Whether pools may be edited by hand under a strategy."""
    return parse_strategy(strategy) != MappingStrategy.NATIONWIDE
