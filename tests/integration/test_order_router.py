"""Integration tests for the order, review and analytics API router."""

import pytest

from ophelia_market.catalog.schemas import ProductDraft

ADDRESS = {"line1": "4 Harbour Road", "city": "Galway", "country": "IE"}


@pytest.fixture
async def shop(services, make_artisan, make_buyer, user_headers):
    me = await make_artisan()
    buyer_id = await make_buyer()
    draft = ProductDraft(
        title="Aran Sweater", description="Hand-knit merino", price=120, stock_quantity=2,
        category="Knitwear",
    )
    async with services.db.get_session() as session:
        product = await services.catalog.create_product(session, me["artisan_id"], draft)
    return {
        "product_id": product.id,
        "artisan_headers": user_headers(me["user_id"]),
        "buyer_headers": user_headers(buyer_id),
    }


async def order(client, shop, quantity=1):
    return await client.post(
        "/orders", headers=shop["buyer_headers"],
        json={"product_id": shop["product_id"], "quantity": quantity, "shipping_address": ADDRESS},
    )


class TestOrderEndpoints:
    async def test_place_and_list(self, client, shop):
        resp = await order(client, shop, quantity=2)
        assert resp.status_code == 201
        assert resp.json()["total_amount"] == 240.0

        mine = await client.get("/orders/mine", headers=shop["buyer_headers"])
        assert len(mine.json()) == 1

        sold = await client.get("/artisans/me/orders", headers=shop["artisan_headers"])
        assert len(sold.json()) == 1

        detail = await client.get(f"/products/{shop['product_id']}")
        assert detail.json()["stock_quantity"] == 0

    async def test_insufficient_stock(self, client, shop):
        resp = await order(client, shop, quantity=3)
        assert resp.status_code == 409
        assert resp.json()["detail"]["code"] == "INSUFFICIENT_STOCK"

    async def test_zero_quantity_rejected_by_schema(self, client, shop):
        resp = await order(client, shop, quantity=0)
        assert resp.status_code == 422

    async def test_unknown_product(self, client, shop):
        resp = await client.post(
            "/orders", headers=shop["buyer_headers"],
            json={"product_id": "nope", "shipping_address": ADDRESS},
        )
        assert resp.status_code == 404

    async def test_status_update(self, client, shop):
        order_id = (await order(client, shop)).json()["id"]
        resp = await client.patch(
            f"/orders/{order_id}/status", headers=shop["artisan_headers"],
            json={"status": "shipped", "tracking_number": "IE123"},
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "shipped"
        assert resp.json()["tracking_number"] == "IE123"

    async def test_status_update_by_buyer_forbidden(self, client, shop):
        order_id = (await order(client, shop)).json()["id"]
        resp = await client.patch(
            f"/orders/{order_id}/status", headers=shop["buyer_headers"], json={"status": "paid"},
        )
        assert resp.status_code == 403

    async def test_unknown_status_value(self, client, shop):
        order_id = (await order(client, shop)).json()["id"]
        resp = await client.patch(
            f"/orders/{order_id}/status", headers=shop["artisan_headers"], json={"status": "lost"},
        )
        assert resp.status_code == 422


class TestReviewEndpoints:
    async def test_add_and_list(self, client, shop):
        resp = await client.post(
            f"/products/{shop['product_id']}/reviews", headers=shop["buyer_headers"],
            json={"rating": 5, "comment": "Warm and beautiful"},
        )
        assert resp.status_code == 201

        resp = await client.get(f"/products/{shop['product_id']}/reviews")
        assert [r["rating"] for r in resp.json()] == [5]

        dashboard = await client.get("/artisans/me", headers=shop["artisan_headers"])
        assert dashboard.json()["rating"] == 5.0
        assert dashboard.json()["total_reviews"] == 1

    async def test_rating_out_of_range(self, client, shop):
        resp = await client.post(
            f"/products/{shop['product_id']}/reviews", headers=shop["buyer_headers"], json={"rating": 9},
        )
        assert resp.status_code == 400


class TestAnalyticsEndpoint:
    async def test_requires_admin_key(self, client):
        resp = await client.get("/analytics")
        assert resp.status_code in (401, 403, 422)

        resp = await client.get("/analytics", headers={"X-Ophelia-Api-Key": "wrong"})
        assert resp.status_code == 403

    async def test_analytics(self, client, shop, admin_headers):
        await order(client, shop)
        resp = await client.get("/analytics", headers=admin_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["total_revenue"] == 120.0
        assert data["total_orders"] == 1
        assert data["total_products"] == 1
        assert data["total_artisans"] == 1
        assert data["categories"] == [{"name": "Knitwear", "value": 1}]
        assert data["trending"][0]["name"] == "Aran Sweater"
