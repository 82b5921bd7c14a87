"""Editing session for one product's warehouse mapping.

An editor owns a private copy of the mapping seeded from the product it was
opened for. All edits are synchronous and in memory; the only suspension
point is save(), which replaces the product's mapping on the inventory
service wholesale. A failed save leaves the local copy untouched so the
user can retry.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from warehouse_mapping.config import settings
from warehouse_mapping.models.mapping import (
    MappingStrategy,
    ProductWarehouseMapping,
    parse_strategy,
)
from warehouse_mapping.models.warehouse import (
    Warehouse,
    WarehouseId,
    coerce_warehouse_id,
    index_by_id,
)
from warehouse_mapping.services.inventory_client import (
    InventoryServiceClient,
    InventoryServiceError,
)
from warehouse_mapping.services.resolver import PoolSlot, check_slot, toggle_membership
from warehouse_mapping.services.strategy import is_pool_editable, select_strategy
from warehouse_mapping.services.summary import (
    find_empty_pools,
    should_show_summary,
    summarize,
)

logger = logging.getLogger(__name__)

SINGLE_TIER_STRATEGIES = (MappingStrategy.ZONAL_ONLY, MappingStrategy.DIVISION_ONLY)


class PoolNotEditableError(ValueError):
    """Raised when a pool cannot be edited under the active strategy."""


class EditorClosedError(RuntimeError):
    """Raised when an editor is used after it was saved or discarded."""


class MappingSaveError(Exception):
    """Raised when saving a mapping fails. Local edits are kept."""


class MappingEditor:
    """Local editing state for a product's warehouse mapping."""

    def __init__(
        self,
        product: Mapping[str, Any],
        warehouses: Iterable[Warehouse],
        enforce_slot_types: bool | None = None,
    ) -> None:
        """Open an editor for a product.

        Args:
            product: Product record; must carry an ``id``.
            warehouses: The warehouse catalog.
            enforce_slot_types: Reject warehouses of the wrong type for a
                pool. Defaults to settings.
        """
        if product.get("id") is None:
            raise ValueError("Product must have an id")
        self.product_id = product["id"]
        self.warehouses = list(warehouses)
        self._catalog = index_by_id(self.warehouses)
        self.enforce_slot_types = (
            settings.enforce_slot_types
            if enforce_slot_types is None
            else enforce_slot_types
        )
        self.mapping = ProductWarehouseMapping.from_product(product)
        self.closed = False

    def _ensure_open(self) -> None:
        if self.closed:
            raise EditorClosedError(f"Editor for product {self.product_id} is closed")

    def select_strategy(self, strategy: MappingStrategy | str) -> ProductWarehouseMapping:
        """Switch strategy, resetting both pools to the strategy defaults."""
        self._ensure_open()
        strategy = parse_strategy(strategy)
        defaults = select_strategy(
            strategy, self.warehouses, self.mapping.enable_fallback
        )
        self.mapping = self.mapping.model_copy(
            update={
                "warehouse_mapping_type": strategy,
                "primary_warehouses": defaults.primary,
                "fallback_warehouses": defaults.fallback,
                "enable_fallback": defaults.enable_fallback,
            }
        )
        return self.mapping

    def _toggle(self, slot: PoolSlot, warehouse_id: WarehouseId) -> list[WarehouseId]:
        self._ensure_open()
        strategy = self.mapping.warehouse_mapping_type
        if not is_pool_editable(strategy):
            raise PoolNotEditableError(
                f"Pools are derived from the catalog under {strategy.value}"
            )
        if slot == PoolSlot.FALLBACK and strategy in SINGLE_TIER_STRATEGIES:
            raise PoolNotEditableError(f"{strategy.value} has no fallback pool")

        warehouse_id = coerce_warehouse_id(warehouse_id)
        field = (
            "primary_warehouses" if slot == PoolSlot.PRIMARY else "fallback_warehouses"
        )
        current: list[WarehouseId] = getattr(self.mapping, field)
        if self.enforce_slot_types and warehouse_id not in current:
            check_slot(warehouse_id, slot, strategy, self._catalog)

        updated = toggle_membership(current, warehouse_id)
        self.mapping = self.mapping.model_copy(update={field: updated})
        return updated

    def toggle_primary(self, warehouse_id: WarehouseId) -> list[WarehouseId]:
        """Toggle a warehouse in the primary pool."""
        return self._toggle(PoolSlot.PRIMARY, warehouse_id)

    def toggle_fallback(self, warehouse_id: WarehouseId) -> list[WarehouseId]:
        """Toggle a warehouse in the fallback pool."""
        return self._toggle(PoolSlot.FALLBACK, warehouse_id)

    def set_enable_fallback(self, enabled: bool) -> None:
        """Turn the fallback pool on or off.

        The fallback selection is kept while disabled; it is only dropped
        from the payload sent on save.
        """
        self._ensure_open()
        strategy = self.mapping.warehouse_mapping_type
        if enabled and strategy in SINGLE_TIER_STRATEGIES:
            raise PoolNotEditableError(f"{strategy.value} cannot enable fallback")
        if enabled and strategy == MappingStrategy.NATIONWIDE:
            return
        if not enabled and strategy == MappingStrategy.NATIONWIDE:
            raise PoolNotEditableError("nationwide always falls back to divisions")
        self.mapping = self.mapping.model_copy(update={"enable_fallback": bool(enabled)})

    def set_notes(self, notes: str) -> None:
        """Replace the free-text notes."""
        self._ensure_open()
        self.mapping = self.mapping.model_copy(update={"warehouse_notes": notes or ""})

    def apply(self, submitted: ProductWarehouseMapping) -> ProductWarehouseMapping:
        """Replay a submitted mapping through the editing rules.

        The strategy is selected first, then each submitted warehouse is
        toggled in. Under nationwide the submitted pools are ignored since
        they are derived from the catalog.

        Raises:
            PoolNotEditableError: If the submission fills a pool the
                strategy does not have.
            SlotTypeMismatchError: If slot types are enforced and a
                warehouse does not fit its pool.
        """
        strategy = submitted.warehouse_mapping_type
        self.select_strategy(strategy)
        self.set_notes(submitted.warehouse_notes)
        if not is_pool_editable(strategy):
            return self.mapping

        for warehouse_id in submitted.primary_warehouses:
            self.toggle_primary(warehouse_id)
        if strategy in SINGLE_TIER_STRATEGIES:
            if submitted.fallback_warehouses:
                raise PoolNotEditableError(f"{strategy.value} has no fallback pool")
            return self.mapping

        self.set_enable_fallback(submitted.enable_fallback)
        for warehouse_id in submitted.fallback_warehouses:
            self.toggle_fallback(warehouse_id)
        return self.mapping

    @property
    def show_summary(self) -> bool:
        """Whether the summary panel has anything to show."""
        return should_show_summary(
            self.mapping.primary_warehouses,
            self.mapping.fallback_warehouses,
            self.mapping.warehouse_mapping_type,
        )

    @property
    def summary_lines(self) -> list[str]:
        """Summary of the current assignment."""
        return summarize(
            self.mapping.warehouse_mapping_type,
            self.mapping.primary_warehouses,
            self.mapping.fallback_warehouses,
            self.mapping.enable_fallback,
            self._catalog,
        )

    @property
    def warnings(self) -> list[str]:
        """Advisory warnings about empty pools."""
        return find_empty_pools(self.mapping)

    async def save(self, client: InventoryServiceClient) -> ProductWarehouseMapping:
        """Send the mapping to the inventory service and close the editor.

        Raises:
            MappingSaveError: If the service call fails. The editor stays
                open with its state unchanged.
        """
        self._ensure_open()
        mapping = self.mapping.model_copy(deep=True)
        try:
            await client.save_mapping(self.product_id, mapping)
        except InventoryServiceError as e:
            logger.error(
                "Failed to save warehouse mapping for product %s: %s",
                self.product_id,
                e,
            )
            raise MappingSaveError(f"Failed to save warehouse mapping: {e}") from e

        self.closed = True
        return mapping

    def discard(self) -> None:
        """Close without saving."""
        self.closed = True


def merge_saved_mapping(
    products: Sequence[Mapping[str, Any]],
    product_id: Any,
    mapping: ProductWarehouseMapping,
) -> list[dict[str, Any]]:
    """Merge saved mapping fields into the matching product of a list.

    Returns a new list; products other than ``product_id`` are copied
    unchanged.
    """
    fields = mapping.to_payload()
    return [
        {**product, **fields} if product.get("id") == product_id else dict(product)
        for product in products
    ]
