"""Client for the external product/inventory service."""

import logging
from typing import Any

import httpx

from warehouse_mapping.config import settings
from warehouse_mapping.models.mapping import ProductWarehouseMapping
from warehouse_mapping.models.warehouse import Warehouse, WarehouseId, WarehouseType

logger = logging.getLogger(__name__)


class InventoryServiceError(Exception):
    """Raised when an inventory service call fails."""


class InventoryServiceAuthError(InventoryServiceError):
    """Raised when the inventory service rejects our credentials."""


class InventoryServiceClient:
    """Async client for the product/inventory REST API.

    The service wraps responses in an envelope of the form
    ``{"success": bool, "data": ..., "error": str}``. A 2xx response whose
    envelope reports ``success: false`` is treated as a failure.

    Requests are sent once; there is no retry.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the inventory service client.

        Args:
            base_url: API base URL. Defaults to settings.
            token: Bearer token for admin routes. Defaults to settings.
            timeout: Request timeout in seconds. Defaults to settings.
        """
        self.base_url = (base_url or settings.inventory_api_base_url).rstrip("/")
        self.token = token if token is not None else settings.inventory_api_token
        self.timeout = timeout or settings.inventory_api_timeout
        self._http_client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "InventoryServiceClient":
        """Enter async context manager."""
        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit async context manager."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    @property
    def _client(self) -> httpx.AsyncClient:
        """Get the HTTP client, raising if not in context manager."""
        if self._http_client is None:
            raise RuntimeError(
                "InventoryServiceClient must be used as an async context manager"
            )
        return self._http_client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> Any:
        """Make an API request and unwrap failures.

        Args:
            method: HTTP method (GET, PUT, etc.)
            endpoint: API endpoint path (without base URL)
            params: Optional query parameters
            json_data: Optional JSON body

        Returns:
            Parsed JSON response.

        Raises:
            InventoryServiceAuthError: On 401 or 403.
            InventoryServiceError: On any other failure.
        """
        url = f"{self.base_url}{endpoint}"

        try:
            response = await self._client.request(
                method,
                url,
                headers=self._headers(),
                params=params,
                json=json_data,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            message = _error_message(e.response)
            logger.error(
                "Inventory service error: %s %s - %s %s",
                method,
                endpoint,
                status_code,
                message,
            )
            if status_code in (401, 403):
                raise InventoryServiceAuthError(
                    f"Authentication failed: {status_code} - {message}"
                ) from e
            raise InventoryServiceError(
                f"API call failed: {status_code} - {message}"
            ) from e
        except httpx.RequestError as e:
            logger.error("Inventory service request error: %s %s - %s", method, endpoint, e)
            raise InventoryServiceError(f"Request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Inventory service returned invalid JSON: %s %s", method, endpoint)
            raise InventoryServiceError("Invalid JSON in response") from e

        if isinstance(data, dict) and data.get("success") is False:
            message = data.get("error") or data.get("message") or "Unknown error"
            logger.error(
                "Inventory service reported failure: %s %s - %s",
                method,
                endpoint,
                message,
            )
            raise InventoryServiceError(str(message))

        return data

    async def list_warehouses(
        self,
        warehouse_type: WarehouseType | None = None,
    ) -> list[Warehouse]:
        """Fetch the warehouse catalog.

        Args:
            warehouse_type: Only return warehouses of this type.

        Returns:
            List of warehouses in catalog order.
        """
        params = {"type": warehouse_type.value} if warehouse_type else None
        response = await self._request("GET", "/warehouses", params=params)
        # Catalog may come back bare or under data/warehouses
        if isinstance(response, list):
            items = response
        else:
            items = response.get("data", response.get("warehouses", [])) or []
        return [Warehouse.model_validate(item) for item in items]

    async def get_warehouse(self, warehouse_id: WarehouseId) -> Warehouse:
        """Fetch a single warehouse by id."""
        response = await self._request("GET", f"/warehouses/{warehouse_id}")
        item = response.get("data", response) if isinstance(response, dict) else response
        return Warehouse.model_validate(item)

    async def get_product_warehouses(self, product_id: int | str) -> list[dict[str, Any]]:
        """Fetch the warehouses a product is currently mapped to."""
        response = await self._request("GET", f"/products/{product_id}/warehouses")
        if isinstance(response, list):
            return response
        result: list[dict[str, Any]] = response.get("warehouses", response.get("data", []))
        return result

    async def get_product_stock_summary(self, product_id: int | str) -> dict[str, Any]:
        """Fetch the per-warehouse stock summary for a product.

        The reconciliation across warehouses is computed by the service.
        """
        response = await self._request(
            "GET", f"/product-warehouse/products/{product_id}/stock-summary"
        )
        if not isinstance(response, dict):
            raise InventoryServiceError("Unexpected stock summary response")
        result: dict[str, Any] = response.get("data") or {}
        return result

    async def save_mapping(
        self,
        product_id: int | str,
        mapping: ProductWarehouseMapping,
    ) -> dict[str, Any]:
        """Replace a product's warehouse mapping.

        The whole mapping is sent; the service does not merge.

        Returns:
            The response envelope.
        """
        response: dict[str, Any] = await self._request(
            "PUT",
            f"/admin/products/{product_id}/warehouse-mapping",
            json_data=mapping.to_payload(),
        )
        logger.info(
            "Saved warehouse mapping for product %s (%s)",
            product_id,
            mapping.warehouse_mapping_type.value,
        )
        return response


def _error_message(response: httpx.Response) -> str:
    """Extract the service's error message from a failed response."""
    try:
        data = response.json()
    except ValueError:
        return response.text
    if isinstance(data, dict):
        return str(data.get("error") or data.get("message") or response.text)
    return response.text
