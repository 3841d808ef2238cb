"""Pydantic schema for API error responses."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .transaction import TransactionSchema


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "error": "DUPLICATE_TRANSACTION",
                    "message": "Transaction with this idempotencyKey already exists: k1",
                    "request_id": "abc123",
                }
            ]
        },
    )

    error: str = Field(
        ...,
        description="Machine-readable error code",
        examples=["INSUFFICIENT_FUNDS"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Insufficient funds in account 1: balance 10, requested 40"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )
    existing_transaction: Optional[TransactionSchema] = Field(
        None,
        alias="existingTransaction",
        description="The already stored record, for conflicts",
    )
