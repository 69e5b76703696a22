"""API routes."""

from fastapi import APIRouter

from rolegate.api import auth, roles, transactions, users

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(roles.router, prefix="/roles", tags=["roles"])
router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
