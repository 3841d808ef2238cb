"""SQL implementation of AccountRepository."""

from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from src.domain.entities import Account
from src.domain.exceptions import AccountAlreadyExistsException
from src.domain.interfaces import AccountRepository
from src.infrastructure.database.models import AccountModel

from .base import SqlRepository


class SqlAccountRepository(SqlRepository, AccountRepository):
    """
    SQL implementation of the Account repository.

    Uses SQLAlchemy async session for database operations.
    """

    async def get_by_number(self, account_number: int) -> Optional[Account]:
        """Retrieve an account by number, always reading the stored balance."""
        stmt = (
            select(AccountModel)
            .where(AccountModel.account_number == account_number)
            .execution_options(populate_existing=True)
        )
        async with self._store_call("get_account"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        if model is None:
            return None

        return to_account(model)

    async def save(self, account: Account) -> Account:
        """Persist a newly opened account."""
        model = AccountModel(
            id=str(account.id),
            account_number=account.account_number,
            money=account.money,
            investor_id=account.investor_id,
            created_at=account.created_at,
        )

        async with self._store_call("save_account"):
            try:
                self._session.add(model)
                await self._session.flush()
            except IntegrityError:
                await self._session.rollback()
                raise AccountAlreadyExistsException(account.account_number)
            await self._session.commit()

        return account

    async def delete_by_number(self, account_number: int) -> bool:
        stmt = delete(AccountModel).where(AccountModel.account_number == account_number)

        async with self._store_call("delete_account"):
            result = await self._session.execute(stmt)
            await self._session.commit()

        return result.rowcount > 0


def to_account(model: AccountModel) -> Account:
    """Convert database model to domain entity."""
    return Account(
        id=UUID(str(model.id)),
        account_number=model.account_number,
        money=model.money,
        investor_id=model.investor_id,
        created_at=model.created_at,
    )
