"""
HTTP-level tests of the REST API.

Requests go through httpx.AsyncClient with an ASGI transport, so the app,
the in-memory database and fakeredis all share the test event loop.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app import create_app
from models.search_filters import MAX_PAGE
from web.dependencies import get_session


@pytest.fixture(autouse=True)
def mock_notifications():
    targets = [
        'services.notification.NotificationService.order_confirmation',
        'services.notification.NotificationService.order_status_update',
        'services.notification.NotificationService.partner_application_received',
        'services.notification.NotificationService.partner_application_to_admin',
        'services.notification.NotificationService.partner_status_update',
        'services.notification.NotificationService.quote_to_admin',
        'services.notification.NotificationService.quote_received',
        'services.notification.NotificationService.quote_response',
    ]
    patchers = [patch(target, new_callable=AsyncMock) for target in targets]
    mocks = [patcher.start() for patcher in patchers]
    yield mocks
    for patcher in patchers:
        patcher.stop()


@pytest_asyncio.fixture
async def api(test_session, redis_client):
    app = create_app(use_lifespan=False)
    app.state.redis = redis_client

    async def override_session():
        yield test_session

    app.dependency_overrides[get_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


def as_user(user):
    return {"X-User-Id": str(user.id)}


def order_payload(*lines, method="cod"):
    return {
        "items": [{"partId": part_id, "quantity": quantity} for part_id, quantity in lines],
        "shipping": {
            "method": "standard",
            "address": {
                "name": "Jean Dupont",
                "email": "jean@example.mu",
                "phone": "+230 5712 3456",
                "street": "12 Royal Road",
                "city": "Port Louis",
            },
        },
        "payment": {"method": method},
    }


class TestHealthAndHeaders:

    @pytest.mark.asyncio
    async def test_health(self, api):
        response = await api.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_security_headers(self, api):
        response = await api.get("/api/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Strict-Transport-Security" not in response.headers
        assert "Cache-Control" not in response.headers

    @pytest.mark.asyncio
    async def test_customer_data_not_cacheable(self, api):
        cart = await api.get("/api/cart", headers={"X-Cart-Session": "s1"})
        tracking = await api.get("/api/orders/track/AMO-NONE-0000")

        assert cart.headers["Cache-Control"] == "no-store"
        assert "Cache-Control" not in tracking.headers


class TestPartsApi:

    @pytest.mark.asyncio
    async def test_list_with_filters_and_pagination(self, api, make_part):
        await make_part(name="Brake Pad Set", vehicle_make="Toyota")
        await make_part(name="Alternator", vehicle_make="Toyota", category="Electrical")
        await make_part(name="Clutch Kit", vehicle_make="Nissan", category="Transmission")

        response = await api.get("/api/parts", params={"make": "Toyota", "limit": 1, "sortBy": "name"})

        assert response.status_code == 200
        body = response.json()
        assert [part["name"] for part in body["parts"]] == ["Alternator"]
        assert body["total"] == 2
        assert body["pagination"] == {"page": 1, "limit": 1, "totalCount": 2, "totalPages": 2}
        assert body["filters"]["makes"] == ["Nissan", "Toyota"]

    @pytest.mark.asyncio
    async def test_limit_is_capped(self, api):
        response = await api.get("/api/parts", params={"limit": 500})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_page_far_past_the_end_is_empty(self, api, make_part):
        await make_part()

        response = await api.get("/api/parts", params={"page": "99999999999999999999"})

        assert response.status_code == 200
        assert response.json()["parts"] == []
        assert response.json()["pagination"]["page"] == MAX_PAGE
        assert response.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_order_page_out_of_range(self, api, customer):
        response = await api.get("/api/orders", headers=as_user(customer), params={"page": "99999999999999999999"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_invalid_price_bound(self, api):
        response = await api.get("/api/parts", params={"minPrice": "cheap"})

        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_detail_and_missing(self, api, make_part):
        part = await make_part(price_cents=8999)

        found = await api.get(f"/api/parts/{part.id}")
        missing = await api.get("/api/parts/9999")

        assert found.status_code == 200
        assert found.json()["part"]["price"] == 89.99
        assert "costPrice" not in found.json()["part"]
        assert missing.status_code == 404
        assert missing.json() == {"error": "Part not found"}

    @pytest.mark.asyncio
    async def test_create_requires_identity(self, api):
        response = await api.post("/api/parts", json={"partNumber": "X-1", "name": "X", "category": "Misc",
                                                      "price": 10})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_requires_admin(self, api, customer):
        response = await api.post("/api/parts", headers=as_user(customer),
                                  json={"partNumber": "X-1", "name": "X", "category": "Misc", "price": 10})

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_create_update_delete(self, api, admin):
        created = await api.post("/api/parts", headers=as_user(admin), json={
            "partNumber": "MAZ-SPK-010", "name": "Spark Plug", "category": "Ignition",
            "brand": "NGK", "price": "6.50", "costPrice": "3.10", "stock": 12,
        })
        part_id = created.json()["part"]["id"]
        updated = await api.put(f"/api/parts/{part_id}", headers=as_user(admin), json={"price": 7})
        deleted = await api.delete(f"/api/parts/{part_id}", headers=as_user(admin))
        after = await api.get(f"/api/parts/{part_id}")

        assert created.status_code == 201
        assert created.json()["part"]["costPrice"] == 3.1
        assert updated.json()["part"]["price"] == 7.0
        assert deleted.json() == {"success": True}
        assert after.status_code == 404

    @pytest.mark.asyncio
    async def test_duplicate_part_number(self, api, admin, make_part):
        part = await make_part()

        response = await api.post("/api/parts", headers=as_user(admin), json={
            "partNumber": part.part_number, "name": "Copy", "category": "Brakes", "price": 1,
        })

        assert response.status_code == 409


class TestCartApi:

    @pytest.mark.asyncio
    async def test_requires_session_header(self, api):
        response = await api.get("/api/cart")

        assert response.status_code == 400
        assert response.json() == {"error": "Cart session is missing"}

    @pytest.mark.asyncio
    async def test_add_update_remove(self, api, make_part):
        part = await make_part(price_cents=4500, stock=3)
        headers = {"X-Cart-Session": "browser-1"}

        added = await api.post("/api/cart/items", headers=headers, json={"partId": part.id})
        again = await api.post("/api/cart/items", headers=headers, json={"partId": part.id})
        capped = await api.patch(f"/api/cart/items/{part.id}", headers=headers, json={"quantity": 10})
        removed = await api.delete(f"/api/cart/items/{part.id}", headers=headers)

        assert added.json()["message"] == "Item added to cart"
        assert again.json()["totalItems"] == 2
        assert again.json()["totalPrice"] == 90.0
        assert capped.json()["items"][0]["quantity"] == 3
        assert capped.json()["message"] == "Cannot add more items - stock limit reached"
        assert removed.json()["items"] == []

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self, api, make_part):
        part = await make_part()
        await api.post("/api/cart/items", headers={"X-Cart-Session": "a"}, json={"partId": part.id})

        other = await api.get("/api/cart", headers={"X-Cart-Session": "b"})

        assert other.json()["totalItems"] == 0

    @pytest.mark.asyncio
    async def test_update_unknown_item_leaves_cart_unchanged(self, api, make_part):
        part = await make_part(price_cents=4500)
        headers = {"X-Cart-Session": "a"}
        await api.post("/api/cart/items", headers=headers, json={"partId": part.id})

        response = await api.patch("/api/cart/items/42", headers=headers, json={"quantity": 3})

        assert response.status_code == 200
        assert response.json()["message"] is None
        assert [(item["id"], item["quantity"]) for item in response.json()["items"]] == [(str(part.id), 1)]
        assert response.json()["totalPrice"] == 45.0

    @pytest.mark.asyncio
    async def test_concurrent_adds_on_one_session(self, api, make_part):
        part = await make_part(stock=10)
        headers = {"X-Cart-Session": "busy-tab"}

        responses = await asyncio.gather(*[
            api.post("/api/cart/items", headers=headers, json={"partId": part.id}) for _ in range(5)
        ])
        cart = await api.get("/api/cart", headers=headers)

        assert all(response.status_code == 200 for response in responses)
        assert cart.json()["totalItems"] == 5


class TestOrdersApi:

    @pytest.mark.asyncio
    async def test_create_and_track(self, api, customer, make_part):
        part = await make_part(price_cents=8999, stock=10)

        created = await api.post("/api/orders", headers=as_user(customer), json=order_payload((part.id, 2)))
        order = created.json()["order"]
        tracked = await api.get(f"/api/orders/track/{order['orderNumber'].lower()}")

        assert created.status_code == 201
        assert created.json()["success"] is True
        assert order["subtotal"] == 179.98
        assert order["shippingCost"] == 5.0
        assert order["tax"] == 27.0
        assert order["total"] == 211.98
        assert order["status"] == "pending"
        assert tracked.status_code == 200
        assert tracked.json()["orderNumber"] == order["orderNumber"]
        assert "address" not in tracked.json()["shipping"]
        assert tracked.json()["timeline"][0]["status"] == "placed"

    @pytest.mark.asyncio
    async def test_insufficient_stock(self, api, customer, make_part):
        part = await make_part(stock=1)

        response = await api.post("/api/orders", headers=as_user(customer), json=order_payload((part.id, 3)))

        assert response.status_code == 400
        assert response.json()["error"] == f"Insufficient stock for part {part.id}. Available: 1, Requested: 3"

    @pytest.mark.asyncio
    async def test_empty_order(self, api, customer):
        response = await api.post("/api/orders", headers=as_user(customer), json=order_payload())

        assert response.status_code == 400
        assert response.json() == {"error": "Order must contain at least one item"}

    @pytest.mark.asyncio
    async def test_unknown_payment_method_is_schema_error(self, api, customer, make_part):
        part = await make_part()

        response = await api.post("/api/orders", headers=as_user(customer),
                                  json=order_payload((part.id, 1), method="crypto"))

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_track_unknown_order(self, api):
        response = await api.get("/api/orders/track/AMO-NOPE-0000")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_customer_cancels_admin_ships(self, api, customer, admin, make_part):
        part = await make_part(stock=5)
        first = await api.post("/api/orders", headers=as_user(customer), json=order_payload((part.id, 1)))
        second = await api.post("/api/orders", headers=as_user(customer), json=order_payload((part.id, 1)))
        first_id = first.json()["order"]["id"]
        second_id = second.json()["order"]["id"]

        cancelled = await api.patch(f"/api/orders/{first_id}", headers=as_user(customer),
                                    json={"status": "cancelled"})
        denied = await api.patch(f"/api/orders/{second_id}", headers=as_user(customer),
                                 json={"status": "confirmed"})
        skipped = await api.patch(f"/api/orders/{second_id}", headers=as_user(admin), json={"status": "shipped"})
        confirmed = await api.patch(f"/api/orders/{second_id}", headers=as_user(admin),
                                    json={"status": "confirmed", "trackingNumber": "MP1"})

        assert cancelled.json()["order"]["status"] == "cancelled"
        assert denied.status_code == 403
        assert skipped.status_code == 400
        assert confirmed.json()["order"]["status"] == "confirmed"
        assert confirmed.json()["order"]["shipping"]["trackingNumber"] == "MP1"

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_caller(self, api, customer, admin, make_part):
        part = await make_part()
        await api.post("/api/orders", headers=as_user(customer), json=order_payload((part.id, 1)))

        own = await api.get("/api/orders", headers=as_user(customer))
        staff = await api.get("/api/orders", headers=as_user(admin))
        staff_active = await api.get("/api/orders", headers=as_user(admin), params={"status": "active"})
        anonymous = await api.get("/api/orders")

        assert own.json()["pagination"]["total"] == 1
        assert staff.json()["pagination"]["total"] == 1
        assert staff_active.json()["pagination"]["total"] == 1
        assert anonymous.status_code == 401


def partner_payload():
    return {
        "businessName": "Curepipe Auto Garage",
        "businessType": "garage",
        "yearsInOperation": 8,
        "location": "Curepipe",
        "address": "45 Royal Road, Curepipe",
        "contactName": "Ravi Ramdin",
        "contactPhone": "+230 5765 4321",
        "contactEmail": "ravi@garage.mu",
        "specialization": ["Japanese"],
        "termsAccepted": True,
    }


class TestPartnersApi:

    @pytest.mark.asyncio
    async def test_submit_conflict_and_review(self, api, customer, admin):
        submitted = await api.post("/api/partners", headers=as_user(customer), json=partner_payload())
        duplicate = await api.post("/api/partners", headers=as_user(customer), json=partner_payload())
        application_id = submitted.json()["application"]["id"]
        customer_review = await api.patch(f"/api/partners/{application_id}", headers=as_user(customer),
                                          json={"status": "approved"})
        reviewed = await api.patch(f"/api/partners/{application_id}", headers=as_user(admin), json={
            "status": "approved", "partnerLevel": "gold", "discountRate": 15, "creditLimit": 100000,
        })
        listing = await api.get("/api/partners", headers=as_user(admin))
        locked = await api.delete(f"/api/partners/{application_id}", headers=as_user(admin))

        assert submitted.status_code == 201
        assert submitted.json()["application"]["status"] == "pending"
        assert duplicate.status_code == 409
        assert customer_review.status_code == 403
        assert reviewed.json()["application"]["creditLimit"] == 100000.0
        assert reviewed.json()["application"]["partnerLevel"] == "gold"
        assert listing.json()["statistics"]["approved"] == 1
        assert locked.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_email_is_schema_error(self, api, customer):
        payload = partner_payload()
        payload["contactEmail"] = "not-an-email"

        response = await api.post("/api/partners", headers=as_user(customer), json=payload)

        assert response.status_code == 422


class TestUsersApi:

    @pytest.mark.asyncio
    async def test_admin_lists_users(self, api, customer, admin):
        response = await api.get("/api/users", headers=as_user(admin), params={"role": "customer"})

        body = response.json()
        assert response.status_code == 200
        assert [user["email"] for user in body["users"]] == ["jean@example.mu"]
        assert body["statistics"]["total"] == 2

    @pytest.mark.asyncio
    async def test_customer_cannot_list_users(self, api, customer):
        response = await api.get("/api/users", headers=as_user(customer))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_detail_and_self_demotion(self, api, customer, admin):
        detail = await api.get(f"/api/users/{customer.id}", headers=as_user(admin))
        demote = await api.patch(f"/api/users/{admin.id}", headers=as_user(admin), json={"role": "customer"})

        assert detail.json()["user"]["orderCount"] == 0
        assert detail.json()["user"]["hasPartnerApplication"] is False
        assert detail.json()["recentOrders"] == []
        assert demote.status_code == 403
        assert demote.json() == {"error": "You cannot change your own role"}

    @pytest.mark.asyncio
    async def test_unknown_identity(self, api):
        response = await api.get("/api/users", headers={"X-User-Id": "9999"})

        assert response.status_code == 401


def quote_payload(**overrides):
    payload = {
        "customer": {"name": "Jean Dupont", "email": "jean@example.mu", "phone": "+230 5712 3456"},
        "vehicle": {"make": "Toyota", "model": "Hilux", "year": 2017},
        "items": [{"name": "Front shock absorbers", "quantity": 2}],
        "urgency": "high",
        "preferredContact": "whatsapp",
    }
    payload.update(overrides)
    return payload


class TestQuotesApi:

    @pytest.mark.asyncio
    async def test_guest_submits_admin_answers(self, api, admin):
        submitted = await api.post("/api/quotes", json=quote_payload())
        quote_id = submitted.json()["quote"]["id"]
        answered = await api.put(f"/api/quotes/{quote_id}", headers=as_user(admin), json={
            "quotedPrice": "12500.00", "quotationNotes": "Genuine Toyota parts",
        })
        listing = await api.get("/api/quotes", headers=as_user(admin), params={"status": "quoted"})

        assert submitted.status_code == 201
        quote = submitted.json()["quote"]
        assert quote["userId"] is None
        assert quote["status"] == "pending"
        assert quote["preferredContact"] == "whatsapp"
        assert quote["vehicle"]["model"] == "Hilux"
        assert quote["quoteNumber"] in submitted.json()["message"]
        assert answered.status_code == 200
        assert answered.json()["quote"]["status"] == "quoted"
        assert answered.json()["quote"]["quotedPrice"] == 12500.0
        assert answered.json()["quote"]["validUntil"] is not None
        assert [q["id"] for q in listing.json()["quotes"]] == [quote_id]
        assert listing.json()["pagination"]["total"] == 1

    @pytest.mark.asyncio
    async def test_customer_sees_own_quotes_only(self, api, customer, admin):
        own = await api.post("/api/quotes", headers=as_user(customer), json=quote_payload())
        guest = await api.post("/api/quotes", json=quote_payload())
        guest_id = guest.json()["quote"]["id"]

        listing = await api.get("/api/quotes", headers=as_user(customer))
        other = await api.get(f"/api/quotes/{guest_id}", headers=as_user(customer))
        anonymous = await api.get("/api/quotes")

        assert own.json()["quote"]["userId"] == customer.id
        assert [q["id"] for q in listing.json()["quotes"]] == [own.json()["quote"]["id"]]
        assert other.status_code == 403
        assert anonymous.status_code == 401

    @pytest.mark.asyncio
    async def test_customer_cannot_answer_or_delete(self, api, customer):
        submitted = await api.post("/api/quotes", headers=as_user(customer), json=quote_payload())
        quote_id = submitted.json()["quote"]["id"]

        answered = await api.put(f"/api/quotes/{quote_id}", headers=as_user(customer), json={"quotedPrice": 1})
        deleted = await api.delete(f"/api/quotes/{quote_id}", headers=as_user(customer))

        assert answered.status_code == 403
        assert deleted.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_deletes(self, api, admin):
        submitted = await api.post("/api/quotes", json=quote_payload())
        quote_id = submitted.json()["quote"]["id"]

        deleted = await api.delete(f"/api/quotes/{quote_id}", headers=as_user(admin))
        missing = await api.get(f"/api/quotes/{quote_id}", headers=as_user(admin))

        assert deleted.json() == {"success": True}
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_requests(self, api):
        no_items = await api.post("/api/quotes", json=quote_payload(items=[]))
        bad_quantity = await api.post("/api/quotes", json=quote_payload(items=[{"name": "Belt", "quantity": 0}]))
        bad_year = await api.post("/api/quotes", json=quote_payload(
            vehicle={"make": "Toyota", "model": "Hilux", "year": 1850}
        ))

        assert no_items.status_code == 422
        assert bad_quantity.status_code == 422
        assert bad_year.status_code == 400

    @pytest.mark.asyncio
    async def test_past_validity_rejected(self, api, admin):
        submitted = await api.post("/api/quotes", json=quote_payload())
        quote_id = submitted.json()["quote"]["id"]

        response = await api.put(f"/api/quotes/{quote_id}", headers=as_user(admin), json={
            "quotedPrice": 100, "validUntil": "2020-01-01T00:00:00",
        })

        assert response.status_code == 400


class TestDashboardApi:

    @pytest.mark.asyncio
    async def test_admin_dashboard(self, api, customer, admin, make_part):
        part = await make_part(price_cents=4500, stock=4)
        await api.post("/api/orders", headers=as_user(customer), json=order_payload((part.id, 2)))
        await api.post("/api/quotes", json=quote_payload())

        response = await api.get("/api/admin/dashboard", headers=as_user(admin))

        assert response.status_code == 200
        body = response.json()
        assert body["statistics"]["orders"]["total"] == 1
        assert body["statistics"]["orders"]["pending"] == 1
        assert body["statistics"]["revenue"]["total"] == 0.0
        assert body["statistics"]["parts"] == {"total": 1, "lowStock": 1}
        assert body["statistics"]["quotes"] == {"pending": 1}
        assert body["recentOrders"][0]["customerName"] == "Jean Dupont"
        assert body["topSellingParts"] == [{
            "id": part.id,
            "name": part.name,
            "partNumber": part.part_number,
            "totalQuantity": 2,
            "totalRevenue": 90.0,
        }]
        assert response.headers["Cache-Control"] == "no-store"

    @pytest.mark.asyncio
    async def test_admin_dashboard_requires_admin(self, api, customer):
        response = await api.get("/api/admin/dashboard", headers=as_user(customer))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_customer_dashboard(self, api, customer, admin, make_part):
        part = await make_part(stock=10)
        await api.post("/api/orders", headers=as_user(customer), json=order_payload((part.id, 1)))
        await api.post("/api/orders", headers=as_user(admin), json=order_payload((part.id, 1)))
        await api.post("/api/quotes", headers=as_user(customer), json=quote_payload())

        response = await api.get("/api/user/dashboard", headers=as_user(customer))

        body = response.json()
        assert response.status_code == 200
        assert body["statistics"]["orders"]["total"] == 1
        assert body["statistics"]["quotes"] == {"total": 1, "pending": 1}
        assert len(body["recentOrders"]) == 1
        assert body["recentQuotes"][0]["vehicle"] == {"make": "Toyota", "model": "Hilux", "year": 2017}

    @pytest.mark.asyncio
    async def test_customer_dashboard_requires_identity(self, api):
        response = await api.get("/api/user/dashboard")

        assert response.status_code == 401
