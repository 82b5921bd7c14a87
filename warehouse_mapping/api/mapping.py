"""FastAPI routes for product warehouse mapping."""

from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from warehouse_mapping.models.mapping import (
    ProductWarehouseMapping,
    UnknownStrategyError,
    parse_strategy,
)
from warehouse_mapping.models.warehouse import (
    Warehouse,
    WarehouseId,
    WarehouseType,
    index_by_id,
)
from warehouse_mapping.services.editor import (
    MappingEditor,
    MappingSaveError,
    PoolNotEditableError,
)
from warehouse_mapping.services.inventory_client import (
    InventoryServiceAuthError,
    InventoryServiceClient,
    InventoryServiceError,
)
from warehouse_mapping.services.resolver import SlotTypeMismatchError
from warehouse_mapping.services.stock_assignment import (
    DeliveryType,
    parse_assignments,
    total_assigned_warehouses,
    validate_stock_assignments,
    zonal_assignment_count,
)
from warehouse_mapping.services.strategy import select_strategy

router = APIRouter(prefix="/warehouse-mapping", tags=["warehouse-mapping"])


class WarehouseListResponse(BaseModel):
    """Response schema for the warehouse catalog endpoint."""

    warehouses: list[Warehouse]
    total: int


class StrategyDefaultsResponse(BaseModel):
    """Default pools for a strategy against the current catalog."""

    strategy: str
    primary_warehouses: list[WarehouseId]
    fallback_warehouses: list[WarehouseId]
    enable_fallback: bool


class MappingPreviewResponse(BaseModel):
    """Resolved mapping and its summary, before saving."""

    mapping: ProductWarehouseMapping
    show_summary: bool
    summary: list[str]
    warnings: list[str]


class MappingSaveResponse(BaseModel):
    """Response schema for a saved mapping."""

    product_id: str
    mapping: ProductWarehouseMapping
    summary: list[str]
    warnings: list[str]


class StockAssignmentItem(BaseModel):
    """One submitted warehouse stock entry."""

    warehouse_id: WarehouseId
    stock_quantity: int | str | None = None


class StockAssignmentRequest(BaseModel):
    """Stock entries to check for a product."""

    delivery_type: DeliveryType = DeliveryType.ZONAL
    warehouse_assignments: list[StockAssignmentItem] = []


class StockAssignmentResponse(BaseModel):
    """Normalized stock entries and validation result."""

    warehouse_assignments: list[dict[str, Any]]
    zonal_assignment_count: int
    total_assigned_warehouses: int
    valid: bool
    errors: list[str]


def _upstream_error(e: Exception) -> HTTPException:
    """Translate an inventory service failure into an HTTP error."""
    if isinstance(e, InventoryServiceAuthError):
        return HTTPException(
            status_code=401,
            detail=f"Inventory service authentication failed: {e}",
        )
    if isinstance(e, InventoryServiceError):
        return HTTPException(
            status_code=502,
            detail=f"Inventory service error: {e}",
        )
    return HTTPException(
        status_code=503,
        detail=f"Inventory service unavailable: {e}",
    )


async def _fetch_catalog() -> list[Warehouse]:
    try:
        async with InventoryServiceClient() as client:
            return await client.list_warehouses()
    except Exception as e:
        raise _upstream_error(e) from e


def _build_editor(
    product_id: str,
    submitted: ProductWarehouseMapping,
    catalog: list[Warehouse],
) -> MappingEditor:
    editor = MappingEditor({"id": product_id}, catalog)
    try:
        editor.apply(submitted)
    except (PoolNotEditableError, SlotTypeMismatchError) as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return editor


@router.get("/warehouses", response_model=WarehouseListResponse)
async def list_warehouses(
    warehouse_type: Annotated[
        WarehouseType | None,
        Query(alias="type", description="Only return warehouses of this type"),
    ] = None,
) -> WarehouseListResponse:
    """Fetch the warehouse catalog from the inventory service.

    Raises:
        HTTPException: 401 if the inventory service rejects our token.
        HTTPException: 502 if the inventory service call fails.
        HTTPException: 503 if the inventory service is unreachable.
    """
    try:
        async with InventoryServiceClient() as client:
            warehouses = await client.list_warehouses(warehouse_type)
    except Exception as e:
        raise _upstream_error(e) from e

    return WarehouseListResponse(warehouses=warehouses, total=len(warehouses))


@router.get(
    "/strategies/{strategy}/defaults",
    response_model=StrategyDefaultsResponse,
)
async def get_strategy_defaults(
    strategy: str,
    current_enable_fallback: Annotated[
        bool,
        Query(description="Fallback flag before switching strategy"),
    ] = True,
) -> StrategyDefaultsResponse:
    """Compute the pools a strategy starts from.

    Raises:
        HTTPException: 422 if the strategy is unknown.
    """
    try:
        parsed = parse_strategy(strategy)
    except UnknownStrategyError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    catalog = await _fetch_catalog()
    defaults = select_strategy(parsed, catalog, current_enable_fallback)
    return StrategyDefaultsResponse(
        strategy=parsed.value,
        primary_warehouses=defaults.primary,
        fallback_warehouses=defaults.fallback,
        enable_fallback=defaults.enable_fallback,
    )


@router.post(
    "/products/{product_id}/preview",
    response_model=MappingPreviewResponse,
)
async def preview_mapping(
    product_id: str,
    submitted: ProductWarehouseMapping,
) -> MappingPreviewResponse:
    """Resolve a submitted mapping and summarize it without saving.

    Raises:
        HTTPException: 422 if the mapping breaks the strategy's pool rules.
    """
    catalog = await _fetch_catalog()
    editor = _build_editor(product_id, submitted, catalog)
    return MappingPreviewResponse(
        mapping=editor.mapping,
        show_summary=editor.show_summary,
        summary=editor.summary_lines,
        warnings=editor.warnings,
    )


@router.put(
    "/products/{product_id}",
    response_model=MappingSaveResponse,
)
async def save_mapping(
    product_id: str,
    submitted: ProductWarehouseMapping,
) -> MappingSaveResponse:
    """Resolve a mapping and replace the product's mapping upstream.

    Raises:
        HTTPException: 422 if the mapping breaks the strategy's pool rules.
        HTTPException: 401 if the inventory service rejects our token.
        HTTPException: 502 if the inventory service call fails.
    """
    catalog = await _fetch_catalog()
    editor = _build_editor(product_id, submitted, catalog)
    summary = editor.summary_lines
    warnings = editor.warnings

    try:
        async with InventoryServiceClient() as client:
            saved = await editor.save(client)
    except MappingSaveError as e:
        raise _upstream_error(e.__cause__ or e) from e
    except Exception as e:
        raise _upstream_error(e) from e

    return MappingSaveResponse(
        product_id=product_id,
        mapping=saved,
        summary=summary,
        warnings=warnings,
    )


@router.get("/products/{product_id}/stock-summary")
async def get_stock_summary(product_id: str) -> dict[str, Any]:
    """Fetch the per-warehouse stock summary for a product."""
    try:
        async with InventoryServiceClient() as client:
            return await client.get_product_stock_summary(product_id)
    except Exception as e:
        raise _upstream_error(e) from e


@router.post(
    "/stock-assignments/validate",
    response_model=StockAssignmentResponse,
)
async def validate_stock(request: StockAssignmentRequest) -> StockAssignmentResponse:
    """Normalize per-warehouse stock entries and check them against the catalog.

    Entries with an empty or non-positive quantity are dropped.

    Raises:
        HTTPException: 422 if a warehouse id is invalid.
    """
    try:
        assignments = parse_assignments(
            item.model_dump() for item in request.warehouse_assignments
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    catalog = index_by_id(await _fetch_catalog())
    errors = validate_stock_assignments(assignments, catalog, request.delivery_type)
    return StockAssignmentResponse(
        warehouse_assignments=[a.to_payload() for a in assignments],
        zonal_assignment_count=zonal_assignment_count(assignments, catalog),
        total_assigned_warehouses=total_assigned_warehouses(assignments),
        valid=not errors,
        errors=errors,
    )
