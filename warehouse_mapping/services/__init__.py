"""Business logic services for warehouse assignment."""

from warehouse_mapping.services.editor import (
    EditorClosedError,
    MappingEditor,
    MappingSaveError,
    PoolNotEditableError,
    merge_saved_mapping,
)
from warehouse_mapping.services.inventory_client import (
    InventoryServiceAuthError,
    InventoryServiceClient,
    InventoryServiceError,
)
from warehouse_mapping.services.resolver import (
    PoolSlot,
    SlotTypeMismatchError,
    check_slot,
    toggle_membership,
)
from warehouse_mapping.services.stock_assignment import (
    DeliveryType,
    StockAssignment,
    clear_assignments_by_type,
    divisions_by_parent,
    parse_assignments,
    update_assignment,
    validate_stock_assignments,
)
from warehouse_mapping.services.strategy import (
    StrategyDefaults,
    is_pool_editable,
    select_strategy,
)
from warehouse_mapping.services.summary import (
    NATIONWIDE_SUMMARY,
    find_empty_pools,
    should_show_summary,
    summarize,
    warehouse_name,
)

__all__ = [
    "NATIONWIDE_SUMMARY",
    "DeliveryType",
    "EditorClosedError",
    "InventoryServiceAuthError",
    "InventoryServiceClient",
    "InventoryServiceError",
    "MappingEditor",
    "MappingSaveError",
    "PoolNotEditableError",
    "PoolSlot",
    "SlotTypeMismatchError",
    "StockAssignment",
    "StrategyDefaults",
    "check_slot",
    "clear_assignments_by_type",
    "divisions_by_parent",
    "find_empty_pools",
    "is_pool_editable",
    "merge_saved_mapping",
    "parse_assignments",
    "select_strategy",
    "should_show_summary",
    "summarize",
    "toggle_membership",
    "update_assignment",
    "validate_stock_assignments",
    "warehouse_name",
]
