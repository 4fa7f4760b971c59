"""Wiring of the session, store client and services for one shopper"""

import logging
from typing import Optional

import httpx

from .core.config import Settings, get_settings
from .core.errors import AuthRequired, StorefrontError
from .core.session import Identity, SessionManager, ShopperSession
from .services.cart import CartState
from .services.catalog import CatalogAdmin, CatalogQuery
from .services.checkout import CheckoutTransition
from .services.orders import OrderHistory
from .services.store_client import StoreClient

logger = logging.getLogger(__name__)


class Storefront:
    """
    One shopper's client: a session context injected into every service.

    Usage:
        async with Storefront() as shop:
            if not shop.session.is_authenticated:
                await shop.sign_in("ada@example.com", "secret")
            await shop.cart.add_item(product_id=2)
            order = await shop.checkout.checkout()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        if self.settings.debug:
            logging.getLogger("storefront").setLevel(logging.DEBUG)
        self.session = ShopperSession()
        self.store = StoreClient(
            store_base_url=self.settings.store_base_url,
            session=self.session,
            timeout=self.settings.request_timeout,
            transport=transport,
        )
        self.sessions = SessionManager(
            store=self.store,
            session=self.session,
            session_path=self.settings.session_path,
            leeway_seconds=self.settings.token_leeway_seconds,
        )
        self.catalog = CatalogQuery(self.store)
        self.admin = CatalogAdmin(self.store, self.session)
        self.cart = CartState(self.store, self.session)
        self.checkout = CheckoutTransition(self.store, self.session, self.cart)
        self.orders = OrderHistory(self.store, self.session)

    async def start(self) -> Optional[Identity]:
        """
        Restore a persisted session and load its cart.

        Loading the cart re-validates the credential with the store; a
        credential the store rejects ends the session.
        """
        logger.info(f"{self.settings.app_name} using store at {self.settings.store_base_url}")
        identity = self.sessions.restore()
        if identity:
            try:
                await self.cart.load()
            except AuthRequired:
                logger.warning(f"Store rejected the persisted session for {identity.email}")
                self.sign_out()
                return None
        return identity

    async def sign_in(self, email: str, password: str) -> Identity:
        identity = await self.sessions.sign_in(email, password)
        await self.cart.load()
        return identity

    async def register(
        self,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
    ) -> Identity:
        identity = await self.sessions.register(email, password, first_name, last_name)
        await self.cart.load()
        return identity

    def sign_out(self) -> None:
        self.sessions.sign_out()
        self.cart.reset()
        self.orders.orders = []

    async def close(self) -> None:
        await self.store.close()

    async def __aenter__(self) -> "Storefront":
        try:
            await self.start()
        except StorefrontError:
            await self.close()
            raise
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
