from fastapi import APIRouter

from .transaction import transaction_router
from .account import account_router
from .health import health_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(transaction_router, tags=["Transactions"])
router.include_router(account_router, tags=["Accounts"])
