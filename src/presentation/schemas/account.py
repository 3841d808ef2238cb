"""Account-related Pydantic schemas."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import Account
from src.domain.entities.transaction import format_timestamp


class AccountCreateSchema(BaseModel):
    """Schema for POST /account/new-account request body."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "accountNumber": 1,
                    "money": 100,
                    "investor": "inv-42",
                }
            ]
        },
    )

    account_number: Optional[Union[int, str]] = Field(None, alias="accountNumber")
    money: Optional[Union[int, float, str]] = Field(
        None,
        description="Opening balance, must not be negative",
    )
    investor: Optional[str] = Field(
        None,
        description="Reference to the owning investor",
    )


class AccountLookupSchema(BaseModel):
    """Schema for POST /account/get and /account/delete request bodies."""

    model_config = ConfigDict(populate_by_name=True)

    account_number: Optional[Union[int, str]] = Field(None, alias="accountNumber")


class AccountSchema(BaseModel):
    """Wire shape of an account."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    account_number: int = Field(..., alias="accountNumber")
    money: float
    investor: str
    created_at: str = Field(..., alias="createdAt")

    @classmethod
    def from_entity(cls, account: Account) -> "AccountSchema":
        return cls(
            id=str(account.id),
            account_number=account.account_number,
            money=float(account.money),
            investor=account.investor_id,
            created_at=format_timestamp(account.created_at),
        )


class AccountResponseSchema(BaseModel):
    message: str = Field(..., examples=["Account added successfully"])
    account: AccountSchema


class AccountLookupResponseSchema(BaseModel):
    account: AccountSchema
    cached: bool = False


class MessageResponseSchema(BaseModel):
    message: str
