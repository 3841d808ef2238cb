"""Transaction-related Pydantic schemas."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import BatchReport, RowOutcome, Transaction
from src.domain.entities.transaction import format_timestamp


class TransactionCreateSchema(BaseModel):
    """
    Schema for POST /transaction/new request body.

    Fields are optional here on purpose: the engine validates them and
    answers with a 400 carrying a specific error code.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "idempotencyKey": "k1",
                    "accountNumber": 1,
                    "amount": 40,
                    "type": "debit",
                }
            ]
        },
    )

    idempotency_key: Optional[str] = Field(
        None,
        alias="idempotencyKey",
        description="Client token that makes the request safe to retry",
    )
    account_number: Optional[Union[int, str]] = Field(
        None,
        alias="accountNumber",
        description="Number of the account to credit or debit",
    )
    amount: Optional[Union[int, float, str]] = Field(
        None,
        description="Positive amount with at most four decimal places",
    )
    type: Optional[str] = Field(
        None,
        description="credit or debit",
        examples=["debit"],
    )


class TransactionReverseSchema(BaseModel):
    """Schema for PUT /transaction/reverse request body."""

    model_config = ConfigDict(populate_by_name=True)

    transaction_id: Optional[str] = Field(
        None,
        alias="transactionId",
        description="Id of the transaction to reverse",
    )


class TransactionSchema(BaseModel):
    """Wire shape of a persisted transaction."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    idempotency_key: str = Field(..., alias="idempotencyKey")
    account_number: int = Field(..., alias="accountNumber")
    amount: float = Field(..., gt=0)
    type: str = Field(..., examples=["credit"])
    date: str = Field(..., description="ISO 8601 apply time")
    reversal_of: Optional[str] = Field(
        None,
        alias="reversalOf",
        description="Id of the reversed transaction, for reversals",
    )

    @classmethod
    def from_entity(cls, transaction: Transaction) -> "TransactionSchema":
        return cls(
            id=str(transaction.id),
            idempotency_key=transaction.idempotency_key,
            account_number=transaction.account_number,
            amount=float(transaction.amount),
            type=transaction.type.value,
            date=format_timestamp(transaction.date),
            reversal_of=str(transaction.reversal_of) if transaction.reversal_of else None,
        )


class TransactionResponseSchema(BaseModel):
    """Schema for a created transaction or reversal."""

    message: str = Field(..., examples=["Transaction added successfully"])
    transaction: TransactionSchema


class TransactionLookupResponseSchema(BaseModel):
    """Schema for GET /transaction/get response."""

    transaction: TransactionSchema
    cached: bool = Field(
        False,
        description="True when served from the cache",
    )


class RowOutcomeSchema(BaseModel):
    """A skipped or failed bulk row."""

    model_config = ConfigDict(populate_by_name=True)

    row_number: int = Field(..., alias="rowNumber", ge=1)
    row: dict[str, Optional[str]]
    reason: str = Field(..., examples=["DUPLICATE_IN_BATCH"])
    message: str
    existing_transaction: Optional[TransactionSchema] = Field(
        None,
        alias="existingTransaction",
    )

    @classmethod
    def from_entity(cls, outcome: RowOutcome) -> "RowOutcomeSchema":
        existing = outcome.existing_transaction
        return cls(
            row_number=outcome.row_number,
            row=outcome.row,
            reason=outcome.reason.value,
            message=outcome.message,
            existing_transaction=TransactionSchema.from_entity(existing) if existing else None,
        )


class BulkDetailsSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    skipped_transactions: list[RowOutcomeSchema] = Field(..., alias="skippedTransactions")
    failed_transactions: list[RowOutcomeSchema] = Field(..., alias="failedTransactions")


class BulkUploadResponseSchema(BaseModel):
    """Schema for POST /transaction/new-bulk response."""

    message: str
    inserted: int = Field(..., ge=0)
    skipped: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    details: BulkDetailsSchema

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "message": "Bulk transaction processing completed",
                    "inserted": 2,
                    "skipped": 1,
                    "failed": 1,
                    "details": {
                        "skippedTransactions": [
                            {
                                "rowNumber": 3,
                                "row": {
                                    "idempotencyKey": "k1",
                                    "amount": "10",
                                    "account": "1",
                                    "type": "credit",
                                },
                                "reason": "DUPLICATE_IN_BATCH",
                                "message": "Duplicate idempotencyKey in current batch",
                            }
                        ],
                        "failedTransactions": [
                            {
                                "rowNumber": 4,
                                "row": {
                                    "idempotencyKey": "k9",
                                    "amount": "10",
                                    "account": "999",
                                    "type": "debit",
                                },
                                "reason": "ACCOUNT_NOT_FOUND",
                                "message": "Account not found: 999",
                            }
                        ],
                    },
                }
            ]
        }
    )

    @classmethod
    def from_report(cls, report: BatchReport) -> "BulkUploadResponseSchema":
        return cls(
            message="Bulk transaction processing completed",
            inserted=report.inserted_count,
            skipped=report.skipped_count,
            failed=report.failed_count,
            details=BulkDetailsSchema(
                skipped_transactions=[RowOutcomeSchema.from_entity(o) for o in report.skipped],
                failed_transactions=[RowOutcomeSchema.from_entity(o) for o in report.failed],
            ),
        )
