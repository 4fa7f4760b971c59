"""Store client failure classification and failure messages."""

import httpx
import pytest

from storefront.core.errors import (
    AuthRequired,
    Conflict,
    FailureKind,
    NotFound,
    PermissionDenied,
    StorefrontError,
    TransientFailure,
    ValidationFailed,
    error_for_status,
)
from storefront.core.session import Identity, Role, ShopperSession
from storefront.services.feedback import failure_message
from storefront.services.store_client import StoreClient


def _client(handler, session=None) -> StoreClient:
    return StoreClient(
        "http://store.test",
        session or ShopperSession(),
        transport=httpx.MockTransport(handler),
    )


class TestFailureClassification:

    @pytest.mark.parametrize(
        "status, expected",
        [
            (400, ValidationFailed),
            (401, AuthRequired),
            (403, PermissionDenied),
            (404, NotFound),
            (409, Conflict),
            (422, ValidationFailed),
            (500, TransientFailure),
            (503, TransientFailure),
            (418, TransientFailure),
        ],
    )
    async def test_status_maps_to_kind(self, status, expected):
        store = _client(lambda request: httpx.Response(status, json={"message": "nope"}))
        with pytest.raises(expected) as excinfo:
            await store.get_cart()
        await store.close()

        assert excinfo.value.status_code == status
        assert excinfo.value.message == "nope"

    async def test_body_code_wins_over_status(self):
        store = _client(
            lambda request: httpx.Response(400, json={"code": "CONFLICT", "message": "Out of stock"})
        )
        with pytest.raises(Conflict, match="Out of stock"):
            await store.add_item(1)
        await store.close()

    async def test_non_json_error_body(self):
        store = _client(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))
        with pytest.raises(TransientFailure) as excinfo:
            await store.list_orders()
        await store.close()
        assert excinfo.value.retryable

    async def test_connection_error_is_transient(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        store = _client(refuse)
        with pytest.raises(TransientFailure):
            await store.list_products()
        await store.close()

    @pytest.mark.parametrize(
        "failure",
        [
            lambda request: httpx.DecodingError("bad gzip stream", request=request),
            lambda request: httpx.TooManyRedirects("redirect loop", request=request),
        ],
    )
    async def test_other_request_errors_are_transient(self, failure):
        def fail(request):
            raise failure(request)

        store = _client(fail)
        with pytest.raises(TransientFailure):
            await store.list_products()
        await store.close()

    async def test_timeout_is_transient(self):
        def slow(request):
            raise httpx.ReadTimeout("timed out", request=request)

        store = _client(slow)
        with pytest.raises(TransientFailure, match="did not answer in time"):
            await store.get_product(1)
        await store.close()

    async def test_unexpected_shape_is_transient(self):
        store = _client(lambda request: httpx.Response(200, json={"unexpected": True}))
        with pytest.raises(TransientFailure):
            await store.get_product(1)
        await store.close()

    def test_unknown_code_falls_back_to_status(self):
        error = error_for_status(404, "gone", code="SOMETHING_ELSE")
        assert isinstance(error, NotFound)

    def test_only_transient_is_retryable(self):
        for kind_error in (AuthRequired, ValidationFailed, NotFound, Conflict, PermissionDenied):
            assert not kind_error("x").retryable
        assert TransientFailure("x").retryable


class TestRequests:

    async def test_bearer_credential_attached(self):
        seen = {}

        def handler(request):
            seen["authorization"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"id": 1, "items": []})

        session = ShopperSession(Identity(email="ada@example.com", role=Role.USER, token="abc"))
        store = _client(handler, session)
        cart = await store.get_cart()
        await store.close()

        assert seen["authorization"] == "Bearer abc"
        assert cart.is_empty

    async def test_anonymous_request_has_no_credential(self):
        seen = {}

        def handler(request):
            seen["authorization"] = request.headers.get("Authorization")
            return httpx.Response(200, json=[])

        store = _client(handler)
        assert await store.list_products() == []
        await store.close()
        assert seen["authorization"] is None

    async def test_category_sent_as_query(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=[])

        store = _client(handler)
        await store.list_products("Video")
        await store.close()
        assert seen["params"] == {"category": "Video"}

    async def test_no_content_answer(self):
        store = _client(lambda request: httpx.Response(204))
        assert await store.delete_product(1) is None
        await store.close()


class TestFailureMessage:

    @pytest.mark.parametrize(
        "error, expected",
        [
            (AuthRequired("x"), "Please log in to add items to your cart."),
            (PermissionDenied("x"), "You don't have permission to add items to your cart."),
            (Conflict("Insufficient stock"), "Could not add items to your cart: Insufficient stock"),
            (
                TransientFailure("x"),
                "Failed to add items to your cart because of a network or server error. Please try again.",
            ),
        ],
    )
    def test_templates(self, error: StorefrontError, expected):
        assert failure_message(error, "add items to your cart") == expected

    def test_every_kind_has_a_message(self):
        for kind in FailureKind:
            error = error_for_status(400, "detail", code=kind.value)
            assert failure_message(error)
