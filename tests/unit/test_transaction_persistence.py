# tests/unit/test_transaction_persistence.py
"""Unit tests for SqlTransactionLog using MagicMock AsyncSession."""
import uuid
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.sp_common.errors import InternalError
from src.sp_transaction.infrastructure.persistence import SqlTransactionLog


def _make_tx_row(**kwargs):
    row = MagicMock()
    row.transaction_id = kwargs.get("transaction_id", uuid.uuid4())
    row.from_user = kwargs.get("from_user", "alice")
    row.to_user = kwargs.get("to_user", "bobby")
    row.amount = kwargs.get("amount", 25)
    row.created_at = kwargs.get("created_at", datetime.now(UTC))
    return row


@pytest.fixture
def db():
    return MagicMock()


class TestAppend:
    async def test_inserts_with_generated_id(self, db):
        result_mock = MagicMock()
        db.execute = AsyncMock(return_value=result_mock)

        def _echo(*args, **kwargs):
            params = db.execute.call_args.args[1]
            return _make_tx_row(transaction_id=params["transaction_id"])

        result_mock.fetchone.side_effect = _echo

        record = await SqlTransactionLog(db).append("alice", "bobby", 25)

        params = db.execute.call_args.args[1]
        assert isinstance(params["transaction_id"], uuid.UUID)
        assert params["transaction_id"].version == 4
        assert params["from_user"] == "alice"
        assert params["to_user"] == "bobby"
        assert params["amount"] == 25
        assert record.transaction_id == params["transaction_id"]

    async def test_ids_are_unique(self, db):
        result_mock = MagicMock()
        result_mock.fetchone.return_value = _make_tx_row()
        db.execute = AsyncMock(return_value=result_mock)
        log = SqlTransactionLog(db)

        await log.append("alice", "bobby", 1)
        await log.append("alice", "bobby", 1)

        first, second = (c.args[1]["transaction_id"] for c in db.execute.call_args_list)
        assert first != second

    async def test_empty_returning_raises(self, db):
        result_mock = MagicMock()
        result_mock.fetchone.return_value = None
        db.execute = AsyncMock(return_value=result_mock)

        with pytest.raises(InternalError):
            await SqlTransactionLog(db).append("alice", "bobby", 1)


class TestGet:
    async def test_found(self, db):
        tx_id = uuid.uuid4()
        result_mock = MagicMock()
        result_mock.fetchone.return_value = _make_tx_row(transaction_id=tx_id)
        db.execute = AsyncMock(return_value=result_mock)

        record = await SqlTransactionLog(db).get(tx_id)

        assert record is not None
        assert record.transaction_id == tx_id

    async def test_missing(self, db):
        result_mock = MagicMock()
        result_mock.fetchone.return_value = None
        db.execute = AsyncMock(return_value=result_mock)

        assert await SqlTransactionLog(db).get(uuid.uuid4()) is None


class TestListForUser:
    async def test_maps_rows_in_db_order(self, db):
        rows = [_make_tx_row(amount=i) for i in (3, 2, 1)]
        result_mock = MagicMock()
        result_mock.fetchall.return_value = rows
        db.execute = AsyncMock(return_value=result_mock)

        records = await SqlTransactionLog(db).list_for_user("alice")

        assert [r.amount for r in records] == [3, 2, 1]
        sql = str(db.execute.call_args.args[0])
        assert "from_user = :username OR to_user = :username" in sql
        assert "ORDER BY created_at DESC" in sql
