"""Account service - opens, reads and closes accounts."""

from typing import Tuple

import structlog

from src.core.config import settings
from src.domain.entities import Account
from src.domain.exceptions import AccountNotFoundException
from src.domain.interfaces import AccountRepository, CacheClient, account_cache_key
from src.application.dto import OpenAccountRequest
from src.application.dto.transaction import parse_account_number

logger = structlog.get_logger(__name__)


class AccountService:
    """
    Application service for account lookups.

    Reads go through the cache; closing an account invalidates its entry.
    Balances are never written here.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        cache: CacheClient,
        cache_ttl_seconds: int | None = None,
    ):
        self._account_repo = account_repository
        self._cache = cache
        self._cache_ttl = cache_ttl_seconds or settings.cache_ttl_seconds

    async def open_account(self, request: OpenAccountRequest) -> Account:
        """
        Open a new account.

        Raises:
            ValidationException: If fields are missing or malformed
            AccountAlreadyExistsException: If the number is already taken
        """
        account = request.to_entity()
        await self._account_repo.save(account)

        # A closed account with the same number may still be cached.
        await self._cache.delete(account_cache_key(account.account_number))

        logger.info(
            "account_opened",
            account_number=account.account_number,
            investor_id=account.investor_id,
        )
        return account

    async def get_account(self, account_number) -> Tuple[Account, bool]:
        """
        Retrieve an account, serving from the cache when possible.

        Returns:
            The account and whether it was served from the cache

        Raises:
            AccountNotFoundException: If no account has this number
        """
        number = parse_account_number(account_number)
        key = account_cache_key(number)

        cached = await self._cache.get(key)
        if cached is not None:
            try:
                return Account.from_dict(cached), True
            except (KeyError, ValueError, TypeError):
                logger.warning("cache_snapshot_invalid", key=key)
                await self._cache.delete(key)

        account = await self._account_repo.get_by_number(number)
        if account is None:
            raise AccountNotFoundException(number)

        await self._cache.set(key, account.to_dict(), self._cache_ttl)
        return account, False

    async def close_account(self, account_number) -> None:
        """
        Delete an account and invalidate its cache entry.

        Raises:
            AccountNotFoundException: If no account has this number
        """
        number = parse_account_number(account_number)

        deleted = await self._account_repo.delete_by_number(number)
        await self._cache.delete(account_cache_key(number))

        if not deleted:
            raise AccountNotFoundException(number)

        logger.info("account_closed", account_number=number)
