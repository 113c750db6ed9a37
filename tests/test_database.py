"""Tests for the accounts store: duplicate check and signup IP record."""

import logging
from unittest.mock import AsyncMock, patch

import pytest

from database.db import DataBase
from models.db.accounts_dbo import AccountsDbo

ADDR = "203.0.113.10"
OTHER_ADDR = "198.51.100.7"


async def add_accounts(database, *ids):
    for account_id in ids:
        assert await database.add_account(id=account_id, full_name=f"User {account_id}") is not None


class TestCountAccountsByAddress:
    async def test_no_records(self, database):
        result = await database.count_accounts_by_address(ADDR)

        assert result.exists is False
        assert result.count == 0
        assert result.failed is False
        assert result.accounts == []

    @pytest.mark.parametrize("n", [1, 3])
    async def test_n_records(self, database, n):
        ids = [f"acc-{i}" for i in range(n)]
        await add_accounts(database, *ids, "acc-other")
        for account_id in ids:
            assert await database.record_address(account_id, ADDR)
        assert await database.record_address("acc-other", OTHER_ADDR)

        result = await database.count_accounts_by_address(ADDR)

        assert result.exists is True
        assert result.count == n
        assert sorted(a.id for a in result.accounts) == ids
        assert all(a.full_name.startswith("User ") for a in result.accounts)
        assert all(a.created_at is not None for a in result.accounts)

    async def test_query_is_read_only(self, database):
        await add_accounts(database, "acc-1")
        await database.record_address("acc-1", ADDR)

        first = await database.count_accounts_by_address(ADDR)
        second = await database.count_accounts_by_address(ADDR)
        account = await database.get_account_on_id("acc-1")

        assert first.count == second.count == 1
        assert account.signup_ip == ADDR

    async def test_query_failure_gives_zero(self, database, caplog):
        caplog.set_level(logging.ERROR)
        failing = AsyncMock(side_effect=RuntimeError("store unavailable"))
        with patch.object(AccountsDbo, "get_all_on_signup_ip", failing):
            result = await database.count_accounts_by_address(ADDR)

        assert (result.exists, result.count, result.failed) == (False, 0, True)
        assert "store unavailable" in caplog.text

    async def test_store_not_ready_gives_zero(self, db_url):
        store = DataBase(db_url)
        result = await store.count_accounts_by_address(ADDR)
        assert (result.exists, result.count, result.failed) == (False, 0, True)

    async def test_empty_address(self, database):
        result = await database.count_accounts_by_address("")
        assert (result.exists, result.count, result.failed) == (False, 0, True)


class TestRecordAddress:
    async def test_record_then_count_increases_by_one(self, database):
        await add_accounts(database, "acc-1", "acc-2")
        await database.record_address("acc-1", ADDR)
        before = await database.count_accounts_by_address(ADDR)

        assert await database.record_address("acc-2", ADDR) is True

        after = await database.count_accounts_by_address(ADDR)
        assert after.count == before.count + 1

    async def test_last_write_wins(self, database):
        await add_accounts(database, "acc-1")
        assert await database.record_address("acc-1", ADDR)
        assert await database.record_address("acc-1", OTHER_ADDR)

        assert (await database.count_accounts_by_address(ADDR)).count == 0
        assert (await database.count_accounts_by_address(OTHER_ADDR)).count == 1
        assert (await database.get_account_on_id("acc-1")).signup_ip == OTHER_ADDR

    async def test_only_one_account_updated(self, database):
        await add_accounts(database, "acc-1", "acc-2")
        await database.record_address("acc-1", ADDR)

        assert (await database.get_account_on_id("acc-2")).signup_ip is None

    async def test_missing_account(self, database, caplog):
        caplog.set_level(logging.WARNING)
        assert await database.record_address("nobody", ADDR) is False
        assert "not found" in caplog.text
        assert (await database.count_accounts_by_address(ADDR)).count == 0

    async def test_write_failure_gives_false(self, database):
        await add_accounts(database, "acc-1")
        failing = AsyncMock(side_effect=RuntimeError("disk I/O error"))
        with patch.object(AccountsDbo, "update_signup_ip", failing):
            assert await database.record_address("acc-1", ADDR) is False
        assert (await database.get_account_on_id("acc-1")).signup_ip is None

    async def test_store_not_ready_gives_false(self, db_url):
        store = DataBase(db_url)
        assert await store.record_address("acc-1", ADDR) is False

    @pytest.mark.parametrize("account_id, addr", [("", ADDR), ("acc-1", ""), ("acc-1", "   ")])
    async def test_empty_arguments(self, database, account_id, addr):
        await add_accounts(database, "acc-1")
        assert await database.record_address(account_id, addr) is False

    async def test_surrounding_whitespace_is_ignored(self, database):
        await add_accounts(database, "acc-1", "acc-2")
        assert await database.record_address("acc-1", f"  {ADDR}\n")
        assert await database.record_address("acc-2", ADDR)

        result = await database.count_accounts_by_address(f" {ADDR} ")
        assert (result.count, result.address) == (2, ADDR)
        assert (await database.get_account_on_id("acc-1")).signup_ip == ADDR


class TestAccounts:
    async def test_add_and_get(self, database):
        account = await database.add_account(id="acc-1", full_name="Jane Doe")

        assert account.id == "acc-1"
        assert account.full_name == "Jane Doe"
        assert account.signup_ip is None
        assert account.created_at is not None

    async def test_duplicate_id(self, database):
        await add_accounts(database, "acc-1")
        assert await database.add_account(id="acc-1") is None

    async def test_unknown_id(self, database):
        assert await database.get_account_on_id("nobody") is None

    async def test_ready_flag(self, db_url):
        store = DataBase(db_url)
        assert store.ready is False
        await store.setup()
        assert store.ready is True
        await store.close()
        assert store.ready is False
