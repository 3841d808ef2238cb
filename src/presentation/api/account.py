"""Account API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.application.dto import OpenAccountRequest
from src.application.dto.transaction import is_blank
from src.application.services import AccountService
from src.core.dependencies import get_account_service
from src.domain.exceptions import MissingFieldsException
from src.presentation.schemas import (
    AccountCreateSchema,
    AccountLookupResponseSchema,
    AccountLookupSchema,
    AccountResponseSchema,
    AccountSchema,
    ErrorResponseSchema,
    MessageResponseSchema,
)

account_router = APIRouter(
    prefix="/account",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        404: {"model": ErrorResponseSchema, "description": "Account not found"},
        503: {"model": ErrorResponseSchema, "description": "Store unavailable"},
    },
)


def _require_account_number(request: AccountLookupSchema):
    if is_blank(request.account_number):
        raise MissingFieldsException(["accountNumber"])
    return request.account_number


@account_router.post(
    "/new-account",
    response_model=AccountResponseSchema,
    status_code=201,
    summary="Open Account",
    responses={
        409: {"model": ErrorResponseSchema, "description": "Account number taken"},
    },
)
async def create_account(
    request: AccountCreateSchema,
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponseSchema:
    account = await account_service.open_account(
        OpenAccountRequest(
            account_number=request.account_number,
            money=request.money,
            investor_id=request.investor,
        )
    )

    return AccountResponseSchema(
        message="Account added successfully",
        account=AccountSchema.from_entity(account),
    )


@account_router.post(
    "/get",
    response_model=AccountLookupResponseSchema,
    summary="Get Account",
    description="Retrieve an account by number, served from the cache when possible.",
)
async def get_account(
    request: AccountLookupSchema,
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountLookupResponseSchema:
    account, cached = await account_service.get_account(_require_account_number(request))

    return AccountLookupResponseSchema(
        account=AccountSchema.from_entity(account),
        cached=cached,
    )


@account_router.post(
    "/delete",
    response_model=MessageResponseSchema,
    summary="Close Account",
)
async def delete_account(
    request: AccountLookupSchema,
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponseSchema:
    await account_service.close_account(_require_account_number(request))

    return MessageResponseSchema(message="Account deleted successfully")
