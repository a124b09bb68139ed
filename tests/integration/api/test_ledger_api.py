"""Integration tests for the ledger HTTP API"""

import pytest
from httpx import AsyncClient

from src.domain.actor import ActorRole


def as_actor(actor_id: str) -> dict:
    return {"X-Actor-Id": actor_id}


class TestLedgerAPIIntegration:
    """Integration test suite for the HTTP surface"""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_missing_actor_header_is_forbidden(self, client: AsyncClient):
        response = await client.post("/api/points/pool", json={"amount": 10})

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_unknown_actor_is_forbidden(self, client: AsyncClient):
        response = await client.post("/api/points/pool", json={"amount": 10}, headers=as_actor("ghost"))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_fund_pool_and_read_balance(self, client: AsyncClient, ledger):
        await ledger.add_actor("org_admin", ActorRole.ORGANIZER)

        response = await client.post(
            "/api/points/pool",
            json={"amount": 500, "correlation_id": "pool:api:1"},
            headers=as_actor("org_admin"),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["entry_type"] == "issuance"
        assert data["amount"] == 500
        assert data["target_actor_id"] == "org_admin"

        balance = await client.get("/api/balances/org_admin/organizer", headers=as_actor("org_admin"))
        assert balance.status_code == 200
        assert balance.json()["available_points"] == 500

    @pytest.mark.asyncio
    async def test_reading_someone_elses_balance_is_forbidden(self, client: AsyncClient, chain):
        response = await client.get("/api/balances/seller_1/seller", headers=as_actor("customer_1"))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_sale(self, client: AsyncClient, chain):
        response = await client.post(
            "/api/sales",
            json={"customer_id": "customer_1", "amount": 25, "cash_received": 25},
            headers=as_actor("seller_1"),
        )

        assert response.status_code == 201
        assert response.json()["entry_type"] == "sale"

        balance = await client.get("/api/balances/customer_1/customer", headers=as_actor("customer_1"))
        assert balance.json()["available_points"] == 25

    @pytest.mark.asyncio
    async def test_sale_beyond_inventory_returns_402(self, client: AsyncClient, chain):
        response = await client.post(
            "/api/sales",
            json={"customer_id": "customer_1", "amount": 101, "cash_received": 101},
            headers=as_actor("seller_1"),
        )

        assert response.status_code == 402
        data = response.json()
        assert "error" in data
        assert data["error"]["code"] == "INSUFFICIENT_INVENTORY"
        assert "message" in data["error"]

    @pytest.mark.asyncio
    async def test_invalid_amount_returns_400(self, client: AsyncClient, chain):
        response = await client.post(
            "/api/sales",
            json={"customer_id": "customer_1", "amount": 0, "cash_received": 0},
            headers=as_actor("seller_1"),
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "VALIDATION_ERROR"
        assert data["error"]["details"]

    @pytest.mark.asyncio
    async def test_merchant_payment_round_trip(self, client: AsyncClient, chain):
        await client.post(
            "/api/sales",
            json={"customer_id": "customer_1", "amount": 40, "cash_received": 40},
            headers=as_actor("seller_1"),
        )

        initiated = await client.post(
            "/api/merchant-payments",
            json={"merchant_id": "stall_1", "amount": 15},
            headers=as_actor("customer_1"),
        )
        assert initiated.status_code == 201
        transaction_id = initiated.json()["transaction_id"]
        assert initiated.json()["status"] == "pending"

        confirmed = await client.post(
            f"/api/merchant-payments/{transaction_id}/confirm",
            headers=as_actor("assistant_1"),
        )
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "completed"
        assert confirmed.json()["collected_by"] == "assistant_1"

        again = await client.post(
            f"/api/merchant-payments/{transaction_id}/confirm",
            headers=as_actor("assistant_1"),
        )
        assert again.status_code == 409
        assert again.json()["error"]["code"] == "INVALID_STATE"

        merchant = await client.get("/api/balances/stall_1/merchant", headers=as_actor("owner_1"))
        assert merchant.json()["available_points"] == 15

    @pytest.mark.asyncio
    async def test_card_balance_needs_no_identity(self, client: AsyncClient, chain):
        issued = await client.post(
            "/api/point-cards",
            json={"amount": 20, "cash_received": 20},
            headers=as_actor("seller_1"),
        )
        assert issued.status_code == 201

        response = await client.get(f"/api/point-cards/{issued.json()['card_number']}/balance")

        assert response.status_code == 200
        assert response.json()["current_balance"] == 20

    @pytest.mark.asyncio
    async def test_seller_manager_sells_directly(self, client: AsyncClient, chain):
        response = await client.post(
            "/api/sales",
            json={"customer_id": "customer_1", "seller_role": "seller_manager", "amount": 30, "cash_received": 30},
            headers=as_actor("manager_1"),
        )

        assert response.status_code == 201
        assert response.json()["source_role"] == "seller_manager"

        documented = (await client.get("/openapi.json")).json()["paths"]["/api/sales"]["post"]["description"]
        assert "`seller_manager`" in documented
        assert "`organizer`" not in documented
