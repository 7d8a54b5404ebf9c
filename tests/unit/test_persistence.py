# tests/unit/test_persistence.py
"""Unit tests for the raw-SQL repositories using MagicMock AsyncSession."""
import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.shop_account.infrastructure.persistence import UserRepository
from src.shop_charge.infrastructure.persistence import ChargeRequestRepository
from src.shop_purchase.domain.models import LineItem
from src.shop_purchase.infrastructure.persistence import PurchaseRepository


def _make_user_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", 1)
    row.phone_number = kwargs.get("phone_number", "0912345")
    row.balance = kwargs.get("balance", 0)
    row.last_charge_date = kwargs.get("last_charge_date")
    row.version = kwargs.get("version", 0)
    row.created_at = datetime.now(UTC)
    row.updated_at = datetime.now(UTC)
    return row


def _make_request_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", 10)
    row.user_id = kwargs.get("user_id", 1)
    row.amount = kwargs.get("amount", 5000)
    row.approved = kwargs.get("approved", False)
    row.requested_at = datetime.now(UTC)
    row.approved_at = None
    row.phone_number = kwargs.get("phone_number", "0912345")
    row.balance = kwargs.get("balance", 0)
    row.last_charge_date = None
    return row


def _make_purchase_row(items):
    row = MagicMock()
    row.id = 3
    row.user_id = 1
    row.phone_number = "0912345"
    row.items = items
    row.total = 2000
    row.balance_after = 3000
    row.idempotency_key = "k-1"
    row.created_at = datetime.now(UTC)
    return row


def _result(fetchone=None, fetchall=None):
    result_mock = MagicMock()
    result_mock.fetchone.return_value = fetchone
    result_mock.fetchall.return_value = fetchall or []
    return result_mock


@pytest.fixture
def db():
    return MagicMock()


class TestUserRepository:
    async def test_debit_returns_updated_user(self, db):
        db.execute = AsyncMock(return_value=_result(_make_user_row(balance=1000)))

        user = await UserRepository().debit(db, "0912345", 4000)

        assert user is not None
        assert user.balance == 1000
        params = db.execute.await_args.args[1]
        assert params == {"phone": "0912345", "amount": 4000}

    async def test_debit_insufficient_returns_none(self, db):
        db.execute = AsyncMock(return_value=_result(None))

        assert await UserRepository().debit(db, "0912345", 4000) is None

    async def test_credit_statement_sets_last_charge_date(self, db):
        db.execute = AsyncMock(return_value=_result(_make_user_row(balance=5000)))

        user = await UserRepository().credit(db, 1, 5000)

        assert user.balance == 5000
        sql = str(db.execute.await_args.args[0])
        assert "balance = balance + :amount" in sql
        assert "last_charge_date = NOW()" in sql

    async def test_get_or_create_inserts(self, db):
        db.execute = AsyncMock(return_value=_result(_make_user_row(id=9)))

        user = await UserRepository().get_or_create(db, "0999")

        assert user.id == 9
        assert db.execute.await_count == 1

    async def test_get_or_create_falls_back_to_existing(self, db):
        db.execute = AsyncMock(side_effect=[_result(None), _result(_make_user_row(id=4))])

        user = await UserRepository().get_or_create(db, "0912345")

        assert user.id == 4
        assert db.execute.await_count == 2


class TestChargeRequestRepository:
    async def test_mark_approved_guards_on_pending(self, db):
        db.execute = AsyncMock(return_value=_result(_make_request_row(approved=True)))

        request = await ChargeRequestRepository().mark_approved(db, 10)

        assert request.approved is True
        assert "approved = FALSE" in str(db.execute.await_args.args[0])

    async def test_mark_approved_returns_none_when_not_pending(self, db):
        db.execute = AsyncMock(return_value=_result(None))

        assert await ChargeRequestRepository().mark_approved(db, 10) is None

    async def test_list_maps_joined_rows(self, db):
        rows = [_make_request_row(id=2, balance=700), _make_request_row(id=1, phone_number=None)]
        db.execute = AsyncMock(return_value=_result(fetchall=rows))

        views = await ChargeRequestRepository().list_with_users(db, None)

        assert [v.request.id for v in views] == [2, 1]
        assert views[0].current_balance == 700
        assert views[1].phone is None
        assert db.execute.await_args.args[1] == {"approved": None}


class TestPurchaseRepository:
    async def test_insert_serializes_items(self, db):
        stored = [{"product_id": 2, "name": "Coffee", "price": 2000, "qty": 1, "total": 2000}]
        db.execute = AsyncMock(return_value=_result(_make_purchase_row(stored)))
        items = [LineItem(product_id=2, qty=1, unit_price=2000, name="Coffee")]

        record = await PurchaseRepository().insert(db, 1, "0912345", items, 2000, 3000, "k-1")

        params = db.execute.await_args.args[1]
        assert json.loads(params["items"]) == stored
        assert record.items[0].name == "Coffee"
        assert record.balance_after == 3000

    async def test_insert_conflict_returns_none(self, db):
        db.execute = AsyncMock(return_value=_result(None))

        assert await PurchaseRepository().insert(db, 1, "0912345", [], 0, 0, "k-1") is None

    async def test_items_decoded_from_text(self, db):
        stored = json.dumps([{"product_id": 1, "name": None, "price": 500, "qty": 4, "total": 2000}])
        db.execute = AsyncMock(return_value=_result(_make_purchase_row(stored)))

        record = await PurchaseRepository().get_by_idempotency_key(db, "k-1")

        assert record.items[0].total == 2000
