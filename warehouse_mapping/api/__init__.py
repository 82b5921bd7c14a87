"""FastAPI routes for warehouse assignment."""

from warehouse_mapping.api.mapping import router as mapping_router

__all__ = ["mapping_router"]
