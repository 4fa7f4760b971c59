"""
Store API Client

HTTP client for the remote catalog, cart, order and auth store.
Attaches the session's bearer credential to every request and turns every
failed answer into a typed StorefrontError.
"""

import logging
from decimal import Decimal
from typing import Any, Optional, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from ..core.errors import StorefrontError, TransientFailure, error_for_status
from ..core.session import ShopperSession
from ..models import Cart, Order, Product

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreClient:
    """
    Client for the remote store.

    All methods are coroutines; each one is a single request and the only
    suspension point of the operation that awaits it.
    """

    def __init__(
        self,
        store_base_url: str,
        session: ShopperSession,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize store client.

        Args:
            store_base_url: Base URL of the store API
            session: Session whose credential is attached to requests
            timeout: Per-request timeout in seconds
            transport: Alternative httpx transport (in-process apps, tests)
        """
        self.base_url = store_base_url.rstrip("/")
        self.session = session
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def __aenter__(self) -> "StoreClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _generate_headers(self) -> dict[str, str]:
        """Generate headers including the bearer credential if signed in"""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        headers.update(self.session.auth_headers())
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Make an HTTP request and return the decoded JSON body"""
        logger.debug(f"{method} {path}")
        try:
            response = await self._http_client.request(
                method=method,
                url=path,
                headers=self._generate_headers(),
                json=body,
                params=params,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {method} {path}")
            raise TransientFailure(f"The store did not answer in time: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"Request failed: {method} {path} - {e}")
            raise TransientFailure(f"Network error: {e}") from e

        if response.status_code >= 400:
            error = self._failure_from(response)
            logger.error(f"Request failed: {response.status_code} - {error.message}")
            raise error

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise TransientFailure("The store sent a malformed response", response.status_code) from e

    @staticmethod
    def _failure_from(response: httpx.Response) -> StorefrontError:
        """Classify an error answer using its {code, message} body if present"""
        code = None
        message = response.reason_phrase or f"HTTP {response.status_code}"
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict):
            code = data.get("code")
            detail = data.get("message") or data.get("detail")
            if isinstance(detail, str) and detail:
                message = detail

        return error_for_status(response.status_code, message, code)

    @staticmethod
    def _parse(adapter: TypeAdapter[T], data: Any) -> T:
        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            logger.error(f"Unexpected response shape: {e}")
            raise TransientFailure("The store sent an unexpected response") from e

    # ==================== Auth APIs ====================

    async def login(self, email: str, password: str) -> dict:
        """Exchange credentials for a bearer token"""
        return await self._request(
            "POST",
            "/api/auth/login",
            body={"email": email, "password": password},
        )

    async def register(
        self,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
    ) -> dict:
        """Create an account; answers like login"""
        return await self._request(
            "POST",
            "/api/auth/register",
            body={
                "email": email,
                "password": password,
                "firstName": first_name,
                "lastName": last_name,
            },
        )

    # ==================== Product APIs ====================

    async def list_products(self, category: Optional[str] = None) -> list[Product]:
        """List products, optionally for one category"""
        params = {"category": category} if category else None
        data = await self._request("GET", "/api/products", params=params)
        return self._parse(_PRODUCTS, data)

    async def get_product(self, product_id: int) -> Product:
        """Get product details"""
        data = await self._request("GET", f"/api/products/{product_id}")
        return self._parse(_PRODUCT, data)

    async def create_product(self, product: dict) -> Product:
        data = await self._request("POST", "/api/products", body=_jsonable(product))
        return self._parse(_PRODUCT, data)

    async def update_product(self, product_id: int, product: dict) -> Product:
        data = await self._request("PUT", f"/api/products/{product_id}", body=_jsonable(product))
        return self._parse(_PRODUCT, data)

    async def delete_product(self, product_id: int) -> None:
        await self._request("DELETE", f"/api/products/{product_id}")

    # ==================== Cart APIs ====================

    async def get_cart(self) -> Cart:
        """Get the shopper's cart"""
        return self._parse(_CART, await self._request("GET", "/api/cart"))

    async def add_item(self, product_id: int, quantity: int = 1) -> Cart:
        """Add a product; the store merges it into an existing line"""
        data = await self._request(
            "POST",
            "/api/cart",
            body={"productId": product_id, "quantity": quantity},
        )
        return self._parse(_CART, data)

    async def set_quantity(self, line_id: int, quantity: int) -> Cart:
        """Update a line's quantity"""
        data = await self._request(
            "PUT",
            f"/api/cart/items/{line_id}",
            body={"quantity": quantity},
        )
        return self._parse(_CART, data)

    async def remove_line(self, line_id: int) -> Cart:
        """Remove a line by its ID"""
        return self._parse(_CART, await self._request("DELETE", f"/api/cart/items/{line_id}"))

    async def remove_product(self, product_id: int) -> Cart:
        """Remove the line holding a product"""
        return self._parse(_CART, await self._request("DELETE", f"/api/cart/products/{product_id}"))

    async def clear_cart(self) -> None:
        """Remove every line in one operation"""
        await self._request("DELETE", "/api/cart")

    # ==================== Order APIs ====================

    async def create_order_from_cart(self) -> Order:
        """Atomically convert the current cart into an order"""
        return self._parse(_ORDER, await self._request("POST", "/api/orders/from-cart"))

    async def list_orders(self) -> list[Order]:
        """List placed orders, newest first"""
        return self._parse(_ORDERS, await self._request("GET", "/api/orders"))

    async def get_order(self, order_id: int) -> Order:
        """Get order details"""
        return self._parse(_ORDER, await self._request("GET", f"/api/orders/{order_id}"))


def _jsonable(payload: dict) -> dict:
    """Decimals go over the wire as strings to keep their precision"""
    return {k: str(v) if isinstance(v, Decimal) else v for k, v in payload.items()}


_PRODUCT = TypeAdapter(Product)
_PRODUCTS = TypeAdapter(list[Product])
_CART = TypeAdapter(Cart)
_ORDER = TypeAdapter(Order)
_ORDERS = TypeAdapter(list[Order])
