"""FastAPI application entry point."""

from fastapi import FastAPI

from warehouse_mapping.api.mapping import router as mapping_router
from warehouse_mapping.config import settings

app = FastAPI(
    title="Warehouse Mapping Service",
    description="Warehouse assignment rules for product inventory sourcing",
    version="0.1.0",
    debug=settings.debug,
)

app.include_router(mapping_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
