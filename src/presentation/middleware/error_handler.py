"""Error handling middleware and exception handlers."""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from src.domain.exceptions import (
    ConflictException,
    DomainException,
    InsufficientFundsException,
    NotFoundException,
    PartialApplyFailureException,
    StoreUnavailableException,
    ValidationException,
)
from src.presentation.schemas import TransactionSchema
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_response(
    status_code: int,
    code: str,
    message: str,
    extra: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    content = {
        "error": code,
        "message": message,
        "request_id": get_request_id(),
    }
    if extra:
        content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses. Handlers are
    resolved by the exception's MRO, so the most specific one wins.
    """

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle malformed bodies and parameters."""
        fields = [
            ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            for error in exc.errors()
        ]
        return _error_response(
            400,
            "VALIDATION_ERROR",
            f"Invalid request: {', '.join(f for f in fields if f) or 'body'}",
        )

    @app.exception_handler(ValidationException)
    async def validation_handler(
        request: Request,
        exc: ValidationException,
    ) -> JSONResponse:
        """Handle request field validation errors."""
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(InsufficientFundsException)
    async def insufficient_funds_handler(
        request: Request,
        exc: InsufficientFundsException,
    ) -> JSONResponse:
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(NotFoundException)
    async def not_found_handler(
        request: Request,
        exc: NotFoundException,
    ) -> JSONResponse:
        """Handle missing accounts and transactions."""
        return _error_response(404, exc.code, exc.message)

    @app.exception_handler(ConflictException)
    async def conflict_handler(
        request: Request,
        exc: ConflictException,
    ) -> JSONResponse:
        """Handle duplicates, returning the stored record when there is one."""
        extra = None
        existing = getattr(exc, "existing", None)
        if existing is not None:
            extra = {
                "existingTransaction": TransactionSchema.from_entity(existing).model_dump(
                    by_alias=True
                )
            }
        return _error_response(409, exc.code, exc.message, extra)

    @app.exception_handler(StoreUnavailableException)
    async def store_unavailable_handler(
        request: Request,
        exc: StoreUnavailableException,
    ) -> JSONResponse:
        """Handle datastore outages; nothing was committed."""
        logger.error(
            "store_unavailable",
            request_id=get_request_id(),
            operation=exc.operation,
            message=exc.message,
        )
        return _error_response(
            503,
            exc.code,
            "Ledger store temporarily unavailable. Please try again.",
        )

    @app.exception_handler(PartialApplyFailureException)
    async def partial_apply_handler(
        request: Request,
        exc: PartialApplyFailureException,
    ) -> JSONResponse:
        """Handle writes whose outcome is unknown."""
        logger.critical(
            "partial_apply_failure",
            request_id=get_request_id(),
            transaction_id=str(exc.transaction.id),
            idempotency_key=exc.transaction.idempotency_key,
            reason=exc.reason,
        )
        return _error_response(
            500,
            exc.code,
            "Transaction outcome unknown and flagged for reconciliation. Do not retry.",
            {"transactionId": str(exc.transaction.id)},
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred.")
