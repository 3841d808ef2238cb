"""
Integration tests for the account endpoints and cache invalidation.

These tests verify:
1. POST /account/new-account, /account/get, /account/delete
2. Account reads go through the cache
3. Every balance change invalidates the cached account
"""

import pytest
from httpx import AsyncClient

from tests.fakes import InMemoryCacheClient


# =============================================================================
# Account Lifecycle Tests
# =============================================================================

class TestAccountLifecycle:
    """Tests for opening, reading and closing accounts."""

    @pytest.mark.asyncio
    async def test_open_account(self, client: AsyncClient):
        response = await client.post("/account/new-account", json={
            "accountNumber": 7,
            "money": "250.75",
            "investor": "inv-7",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Account added successfully"
        assert data["account"]["accountNumber"] == 7
        assert data["account"]["money"] == 250.75
        assert data["account"]["investor"] == "inv-7"

    @pytest.mark.asyncio
    async def test_duplicate_account_number_returns_409(self, client: AsyncClient, funded_account: dict):
        response = await client.post("/account/new-account", json={
            "accountNumber": 1,
            "money": 5,
            "investor": "inv-2",
        })

        assert response.status_code == 409
        assert response.json()["error"] == "ACCOUNT_ALREADY_EXISTS"

    @pytest.mark.asyncio
    async def test_negative_opening_balance_is_rejected(self, client: AsyncClient):
        response = await client.post("/account/new-account", json={
            "accountNumber": 8,
            "money": -1,
            "investor": "inv-8",
        })

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_AMOUNT"

    @pytest.mark.asyncio
    async def test_open_account_missing_fields(self, client: AsyncClient):
        response = await client.post("/account/new-account", json={"accountNumber": 9})

        assert response.status_code == 400
        assert response.json()["error"] == "MISSING_FIELDS"

    @pytest.mark.asyncio
    async def test_get_unknown_account(self, client: AsyncClient):
        response = await client.post("/account/get", json={"accountNumber": 404})

        assert response.status_code == 404
        assert response.json()["error"] == "ACCOUNT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_get_without_account_number(self, client: AsyncClient):
        response = await client.post("/account/get", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "MISSING_FIELDS"

    @pytest.mark.asyncio
    async def test_delete_account(self, client: AsyncClient, funded_account: dict):
        response = await client.post("/account/delete", json={"accountNumber": 1})

        assert response.status_code == 200
        assert response.json()["message"] == "Account deleted successfully"

        lookup = await client.post("/account/get", json={"accountNumber": 1})
        assert lookup.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown_account(self, client: AsyncClient):
        response = await client.post("/account/delete", json={"accountNumber": 404})

        assert response.status_code == 404


# =============================================================================
# Cache Behaviour Tests
# =============================================================================

class TestAccountCache:
    """Tests for cache-aside reads and invalidation on mutation."""

    @pytest.mark.asyncio
    async def test_second_read_is_cached(
        self,
        client: AsyncClient,
        funded_account: dict,
        cache: InMemoryCacheClient,
    ):
        first = await client.post("/account/get", json={"accountNumber": 1})
        second = await client.post("/account/get", json={"accountNumber": "1"})

        assert first.json()["cached"] is False
        assert second.json()["cached"] is True
        assert second.json()["account"] == first.json()["account"]
        assert "account:1" in cache.store

    @pytest.mark.asyncio
    async def test_transaction_invalidates_cached_balance(
        self,
        client: AsyncClient,
        funded_account: dict,
        cache: InMemoryCacheClient,
    ):
        await client.post("/account/get", json={"accountNumber": 1})
        assert "account:1" in cache.store

        await client.post("/transaction/new", json={
            "idempotencyKey": "inv1",
            "accountNumber": 1,
            "amount": 30,
            "type": "debit",
        })

        assert "account:1" not in cache.store
        assert "account:1" in cache.deleted

        response = await client.post("/account/get", json={"accountNumber": 1})
        assert response.json()["cached"] is False
        assert response.json()["account"]["money"] == 70

    @pytest.mark.asyncio
    async def test_rejected_transaction_leaves_cache_alone(
        self,
        client: AsyncClient,
        funded_account: dict,
        cache: InMemoryCacheClient,
    ):
        await client.post("/account/get", json={"accountNumber": 1})
        cache.deleted.clear()

        response = await client.post("/transaction/new", json={
            "idempotencyKey": "inv2",
            "accountNumber": 1,
            "amount": 1000,
            "type": "debit",
        })

        assert response.status_code == 400
        assert cache.deleted == []
        assert "account:1" in cache.store

    @pytest.mark.asyncio
    async def test_bulk_upload_invalidates_cached_balance(
        self,
        client: AsyncClient,
        funded_account: dict,
        cache: InMemoryCacheClient,
    ):
        await client.post("/account/get", json={"accountNumber": 1})

        await client.post(
            "/transaction/new-bulk",
            files={"file": ("t.csv", b"idempotencyKey,amount,account,type\nbk,5,1,credit\n", "text/csv")},
        )

        response = await client.post("/account/get", json={"accountNumber": 1})
        assert response.json()["cached"] is False
        assert response.json()["account"]["money"] == 105

    @pytest.mark.asyncio
    async def test_delete_invalidates_cached_account(
        self,
        client: AsyncClient,
        funded_account: dict,
        cache: InMemoryCacheClient,
    ):
        await client.post("/account/get", json={"accountNumber": 1})

        await client.post("/account/delete", json={"accountNumber": 1})

        assert "account:1" not in cache.store
        response = await client.post("/account/get", json={"accountNumber": 1})
        assert response.status_code == 404
