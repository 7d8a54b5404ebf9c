"""Integration tests for the charge and purchase flows (requires running PG + Redis).

Pre-condition: PostgreSQL + Redis running, then `alembic upgrade head`

Uses the session-scoped client fixture from tests/integration/conftest.py.
All tests share one event loop to avoid asyncpg pool cross-loop errors.
"""

import asyncio
import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio(loop_scope="session")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _unique_phone() -> str:
    return "09" + str(uuid.uuid4().int)[:9]


async def _charge(client: AsyncClient, phone: str, amount: int) -> int:
    """Create and approve a charge request; return the request id."""
    resp = await client.post("/api/charge-requests", json={"phone": phone, "amount": amount})
    assert resp.status_code == 201
    request_id = resp.json()["id"]
    resp = await client.put("/api/charge-requests", json={"id": request_id})
    assert resp.status_code == 200
    return int(request_id)


async def _balance(client: AsyncClient, phone: str) -> int:
    resp = await client.get("/api/balance", params={"phone": phone})
    return int(resp.json()["balance"])


async def _product(client: AsyncClient, name: str) -> dict:
    resp = await client.get("/api/products", params={"q": name})
    return resp.json()["items"][0]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestChargeFlow:
    async def test_new_phone_has_no_account(self, client: AsyncClient) -> None:
        resp = await client.get("/api/balance", params={"phone": _unique_phone()})

        assert resp.status_code == 200
        assert resp.json()["exists"] is False

    async def test_scenario_a_approve_twice(self, client: AsyncClient) -> None:
        phone = _unique_phone()
        request_id = await _charge(client, phone, 5000)

        assert await _balance(client, phone) == 5000
        replay = await client.put("/api/charge-requests", json={"id": request_id})
        assert replay.json() == {"success": True, "already": True}
        assert await _balance(client, phone) == 5000

    async def test_concurrent_approvals_credit_once(self, client: AsyncClient) -> None:
        phone = _unique_phone()
        resp = await client.post("/api/charge-requests", json={"phone": phone, "amount": 3000})
        request_id = resp.json()["id"]

        results = await asyncio.gather(*(
            client.put("/api/charge-requests", json={"id": request_id}) for _ in range(5)
        ))

        bodies = [r.json() for r in results]
        assert sum(1 for b in bodies if "balance" in b) == 1
        assert sum(1 for b in bodies if b.get("already")) == 4
        assert await _balance(client, phone) == 3000

    async def test_unknown_id_never_created(self, client: AsyncClient) -> None:
        for _ in range(2):
            resp = await client.put("/api/charge-requests", json={"id": 9_000_000_000})
            assert resp.status_code == 404

    async def test_listing_filters_by_status(self, client: AsyncClient) -> None:
        phone = _unique_phone()
        approved_id = await _charge(client, phone, 1000)
        resp = await client.post("/api/charge-requests", json={"phone": phone, "amount": 2000})
        pending_id = resp.json()["id"]

        pending = (await client.get("/api/charge-requests", params={"status": "pending"})).json()
        approved = (await client.get("/api/charge-requests", params={"status": "approved"})).json()

        pending_ids = {item["id"] for item in pending["items"]}
        approved_ids = {item["id"] for item in approved["items"]}
        assert pending_id in pending_ids and pending_id not in approved_ids
        assert approved_id in approved_ids and approved_id not in pending_ids


class TestPurchaseFlow:
    async def test_scenario_b_then_c(self, client: AsyncClient) -> None:
        phone = _unique_phone()
        await _charge(client, phone, 5000)
        coffee = await _product(client, "coffee")
        qty = 5000 // coffee["price"]

        ok = await client.post("/api/purchase", json={
            "phone": phone,
            "items": [{"product_id": coffee["id"], "qty": qty, "price": coffee["price"]}],
        })
        assert ok.status_code == 200
        remaining = 5000 - qty * coffee["price"]
        assert ok.json()["balance_after"] == remaining
        assert ok.json()["receipt"]["remaining_balance"] == remaining
        assert await _balance(client, phone) == remaining

        too_much = await client.post("/api/purchase", json={
            "phone": phone,
            "items": [{"product_id": coffee["id"], "qty": qty + 1, "price": coffee["price"]}],
        })
        assert too_much.status_code == 422
        assert await _balance(client, phone) == remaining

    async def test_idempotent_retry_debits_once(self, client: AsyncClient) -> None:
        phone = _unique_phone()
        await _charge(client, phone, 5000)
        water = await _product(client, "water")
        body = {
            "phone": phone,
            "items": [{"product_id": water["id"], "qty": 1, "price": water["price"]}],
            "idempotency_key": uuid.uuid4().hex,
        }

        first = await client.post("/api/purchase", json=body)
        second = await client.post("/api/purchase", json=body)

        assert first.json()["receipt"]["purchase_id"] == second.json()["receipt"]["purchase_id"]
        assert second.json()["receipt"]["replayed"] is True
        assert await _balance(client, phone) == 5000 - water["price"]

    async def test_tampered_price_rejected(self, client: AsyncClient) -> None:
        phone = _unique_phone()
        await _charge(client, phone, 5000)
        coffee = await _product(client, "coffee")

        resp = await client.post("/api/purchase", json={
            "phone": phone,
            "items": [{"product_id": coffee["id"], "qty": 1, "price": 1}],
        })

        assert resp.status_code == 409
        assert await _balance(client, phone) == 5000
