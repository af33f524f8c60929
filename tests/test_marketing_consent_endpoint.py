try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest

from consent_bridge.core.errors import CustomerNotFound, UpstreamLookupError
from consent_bridge.main import app
from consent_bridge.services import (
    ConsentUpdater,
    CustomerResolver,
    MarketingConsentService,
    TokenStore,
)


class FakeAdminClient:
    """In-memory stand-in for the Shopify Admin API."""

    def __init__(self, customers: dict[str, int]) -> None:
        self.customers = customers
        self.calls: list[tuple] = []
        self.fail_search = False

    async def search_customers(self, email: str, *, token: str, message: str = "Failed to fetch customers."):
        self.calls.append(("search", email, token))
        if self.fail_search:
            raise UpstreamLookupError(message, error="Request failed with status code 503")
        if email in self.customers:
            return {"customers": [{"id": self.customers[email], "email": email}]}
        return {"customers": []}

    async def update_customer(self, customer_id, payload: dict, *, token: str):
        self.calls.append(("update", customer_id, payload, token))
        return {"customer": {"id": customer_id}}


pytestmark = pytest.mark.anyio("asyncio")


@pytest.fixture()
def overrides():
    from consent_bridge import dependencies

    admin = FakeAdminClient({"a@x.com": 1, "b@x.com": 2})
    token_store = TokenStore("token-1")
    resolver = CustomerResolver(admin)
    service = MarketingConsentService(
        resolver=resolver,
        updater=ConsentUpdater(admin),
        token_store=token_store,
    )

    app.dependency_overrides.clear()
    app.dependency_overrides.update(
        {
            dependencies.get_token_store: lambda: token_store,
            dependencies.get_customer_resolver: lambda: resolver,
            dependencies.get_marketing_consent_service: lambda: service,
        }
    )

    yield admin, token_store

    app.dependency_overrides.clear()


@pytest.fixture()
async def client(overrides):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client


def _item(email: str, value: str = "true") -> dict:
    return {
        "contact_email": email,
        "propertyName": "accepts_marketing",
        "propertyValue": value,
    }


async def test_batch_success(overrides, client):
    admin, _ = overrides

    response = await client.post(
        "/marketing-consent", json=[_item("a@x.com", "true"), _item("b@x.com", "false")]
    )

    assert response.status_code == 200
    assert response.json() == {
        "message": "Marketing consent updated successfully for all provided customers."
    }
    assert [call[0] for call in admin.calls] == ["search", "update", "search", "update"]
    first_update, second_update = admin.calls[1], admin.calls[3]
    first_consent = first_update[2]["customer"]["email_marketing_consent"]
    second_consent = second_update[2]["customer"]["email_marketing_consent"]
    assert first_consent["state"] == "subscribed"
    assert first_consent["consent_updated_at"] is not None
    assert second_consent["state"] == "unsubscribed"
    assert second_consent["consent_updated_at"] is None


async def test_batch_stops_at_missing_customer(overrides, client):
    admin, _ = overrides

    response = await client.post(
        "/marketing-consent",
        json=[_item("a@x.com", "true"), _item("missing@x.com", "false")],
    )

    assert response.status_code == 404
    assert response.json() == {"message": "No customer found with email: missing@x.com"}
    updates = [call for call in admin.calls if call[0] == "update"]
    assert len(updates) == 1
    assert updates[0][1] == 1


async def test_batch_rejects_non_array_body(overrides, client):
    admin, _ = overrides

    response = await client.post("/marketing-consent", json=_item("a@x.com"))

    assert response.status_code == 400
    assert response.json() == {"message": "Input must be an array of objects."}
    assert admin.calls == []


@pytest.mark.parametrize(
    "item, message",
    [
        (
            {"contact_email": "a@x.com", "propertyValue": "true"},
            "Each object must contain contact_email, propertyName, and propertyValue.",
        ),
        (
            {"contact_email": "a@x.com", "propertyName": "accepts_sms", "propertyValue": "true"},
            'propertyName must be "accepts_marketing".',
        ),
        (
            {"contact_email": "a@x.com", "propertyName": "accepts_marketing", "propertyValue": "yes"},
            'propertyValue must be "true" or "false".',
        ),
    ],
)
async def test_batch_validation_errors(overrides, client, item, message):
    admin, _ = overrides

    response = await client.post("/marketing-consent", json=[item])

    assert response.status_code == 400
    assert response.json() == {"message": message}
    assert admin.calls == []


async def test_batch_upstream_failure_returns_500(overrides, client):
    admin, _ = overrides
    admin.fail_search = True

    response = await client.post("/marketing-consent", json=[_item("a@x.com")])

    assert response.status_code == 500
    assert response.json() == {
        "message": "Failed to update marketing consent.",
        "error": "Request failed with status code 503",
    }


async def test_batch_without_token_is_forbidden(overrides, client):
    admin, token_store = overrides
    token_store.clear()

    response = await client.post("/marketing-consent", json=[_item("a@x.com")])

    assert response.status_code == 403
    assert admin.calls == []


async def test_customer_search_without_token_returns_403(overrides, client):
    admin, token_store = overrides
    token_store.clear()

    response = await client.get("/customers/a@x.com")

    assert response.status_code == 403
    assert "Access token is missing" in response.json()["message"]
    assert admin.calls == []


async def test_customer_search_redirects_browsers_without_token(overrides, client):
    admin, token_store = overrides
    token_store.clear()

    response = await client.get("/customers/a@x.com", headers={"accept": "text/html"})

    assert response.status_code == 307
    assert response.headers["location"] == "/auth?next=%2Fcustomers%2Fa%40x.com"
    assert admin.calls == []


async def test_customer_search_returns_raw_upstream_payload(overrides, client):
    admin, _ = overrides

    response = await client.get("/customers/a@x.com")

    assert response.status_code == 200
    assert response.json() == {"customers": [{"id": 1, "email": "a@x.com"}]}
    assert admin.calls == [("search", "a@x.com", "token-1")]


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_customer_not_found_message():
    assert CustomerNotFound("z@x.com").to_payload() == {
        "message": "No customer found with email: z@x.com"
    }


async def test_batch_with_malformed_json_is_shape_error(overrides, client):
    admin, _ = overrides

    response = await client.post(
        "/marketing-consent",
        content=b"[{bad json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Input must be an array of objects."}
    assert admin.calls == []


async def test_customer_search_with_non_json_upstream_reply_returns_500(overrides, client):
    from consent_bridge import dependencies
    from consent_bridge.clients import ShopifyAdminClient
    from consent_bridge.core.config import get_settings

    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, text="<html>maintenance</html>")
    )
    resolver = CustomerResolver(
        ShopifyAdminClient(get_settings().shopify, transport=transport)
    )
    app.dependency_overrides[dependencies.get_customer_resolver] = lambda: resolver

    response = await client.get("/customers/a@x.com")

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Failed to fetch customers."
    assert "maintenance" in body["error"]
