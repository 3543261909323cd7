"""
Main API router.
"""

from fastapi import APIRouter
from capital.api import accounts, budgets, dashboard, transactions

api_router = APIRouter()

api_router.include_router(accounts.router)
api_router.include_router(budgets.router)
api_router.include_router(transactions.router)
api_router.include_router(dashboard.router)
