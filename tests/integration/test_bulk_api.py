"""
Integration tests for CSV bulk uploads.

These tests verify:
1. POST /transaction/new-bulk - every row is accounted for
2. Rows are independent: a bad row never aborts the rest
3. Keys repeated in the file or already stored are skipped, not re-applied
"""

import pytest
from httpx import AsyncClient


def upload(content: str, filename: str = "transactions.csv") -> dict:
    return {"file": (filename, content.encode("utf-8"), "text/csv")}


async def get_balance(client: AsyncClient, account_number: int) -> float:
    response = await client.post("/account/get", json={"accountNumber": account_number})
    return response.json()["account"]["money"]


# =============================================================================
# POST /transaction/new-bulk Tests
# =============================================================================

class TestBulkUpload:
    """Tests for POST /transaction/new-bulk endpoint."""

    @pytest.mark.asyncio
    async def test_mixed_file_is_fully_reported(self, client: AsyncClient, funded_account: dict):
        """
        One file exercising every outcome.

        Rows: valid credit, valid debit, in-file duplicate, unknown account,
        overdraft, row with a blank amount.
        """
        csv_content = (
            "idempotencyKey,amount,account,type\n"
            "b1,10,1,credit\n"
            "b2,30,1,debit\n"
            "b1,10,1,credit\n"
            "b3,5,999,debit\n"
            "b4,1000,1,debit\n"
            "b5,,1,credit\n"
        )

        response = await client.post("/transaction/new-bulk", files=upload(csv_content))

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Bulk transaction processing completed"
        assert data["inserted"] == 2
        assert data["skipped"] == 1
        assert data["failed"] == 3

        skipped = data["details"]["skippedTransactions"]
        assert skipped[0]["rowNumber"] == 3
        assert skipped[0]["reason"] == "DUPLICATE_IN_BATCH"
        assert skipped[0]["row"]["idempotencyKey"] == "b1"

        reasons = {row["rowNumber"]: row["reason"] for row in data["details"]["failedTransactions"]}
        assert reasons == {
            4: "ACCOUNT_NOT_FOUND",
            5: "INSUFFICIENT_FUNDS",
            6: "MISSING_FIELDS",
        }

        assert await get_balance(client, 1) == 80

    @pytest.mark.asyncio
    async def test_reupload_skips_everything(self, client: AsyncClient, funded_account: dict):
        csv_content = "idempotencyKey,amount,account,type\nr1,10,1,credit\nr2,20,1,credit\n"

        first = await client.post("/transaction/new-bulk", files=upload(csv_content))
        assert first.json()["inserted"] == 2

        second = await client.post("/transaction/new-bulk", files=upload(csv_content))

        data = second.json()
        assert data["inserted"] == 0
        assert data["skipped"] == 2
        for row in data["details"]["skippedTransactions"]:
            assert row["reason"] == "ALREADY_EXISTS"
            assert row["existingTransaction"]["idempotencyKey"] == row["row"]["idempotencyKey"]
        assert await get_balance(client, 1) == 130

    @pytest.mark.asyncio
    async def test_key_applied_by_single_endpoint_is_skipped(
        self,
        client: AsyncClient,
        funded_account: dict,
    ):
        await client.post("/transaction/new", json={
            "idempotencyKey": "shared",
            "accountNumber": 1,
            "amount": 10,
            "type": "debit",
        })

        response = await client.post(
            "/transaction/new-bulk",
            files=upload("idempotencyKey,amount,account,type\nshared,10,1,debit\n"),
        )

        assert response.json()["skipped"] == 1
        assert await get_balance(client, 1) == 90

    @pytest.mark.asyncio
    async def test_rows_apply_in_file_order(self, client: AsyncClient, funded_account: dict):
        """A debit only covered by an earlier credit in the same file succeeds."""
        csv_content = (
            "idempotencyKey,amount,account,type\n"
            "o1,50,1,credit\n"
            "o2,150,1,debit\n"
        )

        response = await client.post("/transaction/new-bulk", files=upload(csv_content))

        assert response.json()["inserted"] == 2
        assert await get_balance(client, 1) == 0

    @pytest.mark.asyncio
    async def test_header_whitespace_and_case_are_tolerated(
        self,
        client: AsyncClient,
        funded_account: dict,
    ):
        csv_content = "idempotencyKey, amount, account, type\n w1 , 5 , 1 , Credit \n"

        response = await client.post("/transaction/new-bulk", files=upload(csv_content))

        assert response.json()["inserted"] == 1
        assert await get_balance(client, 1) == 105

    @pytest.mark.asyncio
    async def test_no_file_returns_400(self, client: AsyncClient):
        response = await client.post("/transaction/new-bulk")

        assert response.status_code == 400
        assert response.json()["error"] == "NO_FILE"

    @pytest.mark.asyncio
    async def test_missing_column_returns_400(self, client: AsyncClient):
        response = await client.post(
            "/transaction/new-bulk",
            files=upload("idempotencyKey,amount,type\nx,1,credit\n"),
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "INVALID_CSV"
        assert "account" in data["message"]

    @pytest.mark.asyncio
    async def test_empty_file_returns_400(self, client: AsyncClient):
        response = await client.post("/transaction/new-bulk", files=upload(""))

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_CSV"

    @pytest.mark.asyncio
    async def test_header_only_file_reports_nothing(self, client: AsyncClient):
        response = await client.post(
            "/transaction/new-bulk",
            files=upload("idempotencyKey,amount,account,type\n"),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["inserted"] == data["skipped"] == data["failed"] == 0
