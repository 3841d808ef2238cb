"""Transaction API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from src.application.dto import TransactionRequest
from src.application.services import BatchIngestionService, TransactionEngine
from src.core.dependencies import get_batch_ingestion_service, get_transaction_engine
from src.domain.exceptions import MissingFieldsException, NoFileUploadedException
from src.presentation.schemas import (
    BulkUploadResponseSchema,
    ErrorResponseSchema,
    TransactionCreateSchema,
    TransactionLookupResponseSchema,
    TransactionResponseSchema,
    TransactionReverseSchema,
    TransactionSchema,
)

transaction_router = APIRouter(
    prefix="/transaction",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        500: {"model": ErrorResponseSchema, "description": "Write needs reconciliation"},
        503: {"model": ErrorResponseSchema, "description": "Store unavailable"},
    },
)


@transaction_router.post(
    "/new",
    response_model=TransactionResponseSchema,
    status_code=201,
    summary="Apply Transaction",
    description="""
    Credit or debit an account.

    The idempotencyKey makes the request safe to retry: a second request
    with the same key is rejected with 409 and the stored transaction.
    """,
    responses={
        404: {"model": ErrorResponseSchema, "description": "Account not found"},
        409: {"model": ErrorResponseSchema, "description": "Duplicate idempotencyKey"},
    },
)
async def create_transaction(
    request: TransactionCreateSchema,
    engine: Annotated[TransactionEngine, Depends(get_transaction_engine)],
) -> TransactionResponseSchema:
    dto = TransactionRequest(
        idempotency_key=request.idempotency_key,
        account_number=request.account_number,
        amount=request.amount,
        type=request.type,
    )

    transaction = await engine.apply_transaction(dto)

    return TransactionResponseSchema(
        message="Transaction added successfully",
        transaction=TransactionSchema.from_entity(transaction),
    )


@transaction_router.post(
    "/new-bulk",
    response_model=BulkUploadResponseSchema,
    status_code=201,
    summary="Apply Transactions From CSV",
    description="""
    Apply every row of an uploaded CSV independently.

    Required columns: idempotencyKey, amount, account, type. A bad row
    is reported in the response and never aborts the rest of the file.
    """,
)
async def create_bulk_transactions(
    ingestion: Annotated[BatchIngestionService, Depends(get_batch_ingestion_service)],
    file: Optional[UploadFile] = File(None),
) -> BulkUploadResponseSchema:
    if file is None:
        raise NoFileUploadedException()

    try:
        content = await file.read()
    finally:
        await file.close()

    report = await ingestion.ingest_csv(content)

    return BulkUploadResponseSchema.from_report(report)


@transaction_router.get(
    "/get",
    response_model=TransactionLookupResponseSchema,
    summary="Get Transaction",
    description="Retrieve a transaction by id, served from the cache when possible.",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Transaction not found"},
    },
)
async def get_transaction(
    engine: Annotated[TransactionEngine, Depends(get_transaction_engine)],
    transaction_id: Annotated[
        Optional[str],
        Query(alias="transactionId", description="Transaction id"),
    ] = None,
) -> TransactionLookupResponseSchema:
    if not transaction_id or not transaction_id.strip():
        raise MissingFieldsException(["transactionId"])

    transaction, cached = await engine.get_transaction(transaction_id.strip())

    return TransactionLookupResponseSchema(
        transaction=TransactionSchema.from_entity(transaction),
        cached=cached,
    )


@transaction_router.put(
    "/reverse",
    response_model=TransactionResponseSchema,
    status_code=201,
    summary="Reverse Transaction",
    description="""
    Apply the inverse of an existing transaction.

    A transaction can be reversed once. Reversing a credit debits the
    account and fails if the balance no longer covers it.
    """,
    responses={
        404: {"model": ErrorResponseSchema, "description": "Transaction not found"},
        409: {"model": ErrorResponseSchema, "description": "Already reversed"},
    },
)
async def reverse_transaction(
    request: TransactionReverseSchema,
    engine: Annotated[TransactionEngine, Depends(get_transaction_engine)],
) -> TransactionResponseSchema:
    if not request.transaction_id or not request.transaction_id.strip():
        raise MissingFieldsException(["transactionId"])

    reversal = await engine.reverse_transaction(request.transaction_id.strip())

    return TransactionResponseSchema(
        message="Transaction reversed successfully",
        transaction=TransactionSchema.from_entity(reversal),
    )
