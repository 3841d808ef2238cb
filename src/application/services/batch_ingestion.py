"""Batch ingestion service - applies bulk transaction uploads row by row."""

from typing import Iterable, Mapping, Set

import structlog

from src.core.config import settings
from src.core.metrics import record_bulk_upload
from src.domain.entities import BatchReport, RowOutcome, RowOutcomeReason
from src.domain.exceptions import (
    DomainException,
    DuplicateTransactionException,
)
from src.domain.interfaces import LedgerStore
from src.application.dto import TransactionRequest
from src.service.ingestion import REQUIRED_COLUMNS, parse_transaction_csv

from .transaction_engine import TransactionEngine

logger = structlog.get_logger(__name__)


# Engine error codes recorded as row failures; anything else propagates.
FAILURE_REASONS = {
    "ACCOUNT_NOT_FOUND": RowOutcomeReason.ACCOUNT_NOT_FOUND,
    "INSUFFICIENT_FUNDS": RowOutcomeReason.INSUFFICIENT_FUNDS,
    "INVALID_AMOUNT": RowOutcomeReason.INVALID_AMOUNT,
    "INVALID_TRANSACTION_TYPE": RowOutcomeReason.INVALID_TRANSACTION_TYPE,
    "INVALID_ACCOUNT_NUMBER": RowOutcomeReason.INVALID_ACCOUNT_NUMBER,
    "MISSING_FIELDS": RowOutcomeReason.MISSING_FIELDS,
    "MISSING_IDEMPOTENCY_KEY": RowOutcomeReason.MISSING_FIELDS,
    "STORE_UNAVAILABLE": RowOutcomeReason.STORE_UNAVAILABLE,
    "PARTIAL_APPLY_FAILURE": RowOutcomeReason.PARTIAL_APPLY_FAILURE,
}


class BatchIngestionService:
    """
    Application service for bulk uploads.

    Lenient by row, strict by idempotency: one row's failure never aborts
    the batch, and a key is applied at most once whether it repeats across
    uploads or within one.
    """

    def __init__(
        self,
        transaction_engine: TransactionEngine,
        ledger_store: LedgerStore,
        max_rows: int | None = None,
    ):
        self._engine = transaction_engine
        self._ledger = ledger_store
        self._max_rows = max_rows or settings.bulk_max_rows

    async def ingest_csv(self, content: bytes) -> BatchReport:
        """
        Parse an uploaded CSV and ingest its rows.

        Raises:
            InvalidCsvException: If the file itself cannot be read
        """
        rows = parse_transaction_csv(content, max_rows=self._max_rows)
        return await self.ingest(rows)

    async def ingest(self, rows: Iterable[Mapping[str, str]]) -> BatchReport:
        """
        Apply rows in input order and report what happened to each.

        Args:
            rows: Mappings with idempotencyKey, amount, account and type

        Returns:
            BatchReport where inserted + skipped + failed equals the row count
        """
        report = BatchReport()
        seen_keys: Set[str] = set()

        for row_number, raw_row in enumerate(rows, start=1):
            row = dict(raw_row)
            await self._ingest_row(row_number, row, seen_keys, report)

        record_bulk_upload(report.inserted_count, report.skipped_count, report.failed_count)
        logger.info(
            "bulk_ingestion_completed",
            total=report.total,
            inserted=report.inserted_count,
            skipped=report.skipped_count,
            failed=report.failed_count,
        )

        return report

    async def _ingest_row(
        self,
        row_number: int,
        row: dict,
        seen_keys: Set[str],
        report: BatchReport,
    ) -> None:
        missing = [column for column in REQUIRED_COLUMNS if not str(row.get(column) or "").strip()]
        if missing:
            report.failed.append(
                RowOutcome(
                    row_number=row_number,
                    row=row,
                    reason=RowOutcomeReason.MISSING_FIELDS,
                    message=f"Missing required fields: {', '.join(missing)}",
                )
            )
            return

        idempotency_key = row["idempotencyKey"].strip()

        if idempotency_key in seen_keys:
            report.skipped.append(
                RowOutcome(
                    row_number=row_number,
                    row=row,
                    reason=RowOutcomeReason.DUPLICATE_IN_BATCH,
                    message="Duplicate idempotencyKey in current batch",
                )
            )
            return

        # First occurrence wins, even if it is skipped or fails.
        seen_keys.add(idempotency_key)

        try:
            existing = await self._ledger.get_transaction_by_idempotency_key(idempotency_key)
        except DomainException as e:
            self._fail(report, row_number, row, e)
            return

        if existing is not None:
            report.skipped.append(
                RowOutcome(
                    row_number=row_number,
                    row=row,
                    reason=RowOutcomeReason.ALREADY_EXISTS,
                    message="IdempotencyKey already exists in database",
                    existing_transaction=existing,
                )
            )
            return

        request = TransactionRequest(
            idempotency_key=idempotency_key,
            account_number=row["account"],
            amount=row["amount"],
            type=row["type"],
        )

        try:
            transaction = await self._engine.apply_transaction(request)
        except DuplicateTransactionException as e:
            # Another writer stored the key after our lookup.
            report.skipped.append(
                RowOutcome(
                    row_number=row_number,
                    row=row,
                    reason=RowOutcomeReason.ALREADY_EXISTS,
                    message="IdempotencyKey already exists in database",
                    existing_transaction=e.existing,
                )
            )
            return
        except DomainException as e:
            self._fail(report, row_number, row, e)
            return

        report.inserted.append(transaction)

    def _fail(
        self,
        report: BatchReport,
        row_number: int,
        row: dict,
        error: DomainException,
    ) -> None:
        reason = FAILURE_REASONS.get(error.code)
        if reason is None:
            raise error

        logger.info(
            "bulk_row_failed",
            row_number=row_number,
            reason=reason.value,
            message=error.message,
        )
        report.failed.append(
            RowOutcome(
                row_number=row_number,
                row=row,
                reason=reason,
                message=error.message,
            )
        )
