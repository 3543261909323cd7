"""
Database models package.
"""

from capital.models.account import Account, AccountHistory, AccountType, LIABILITY_TYPES, is_liability
from capital.models.transaction import Transaction, TransactionType
from capital.models.budget import BudgetCategory, BudgetGoal

__all__ = [
    "Account",
    "AccountHistory",
    "AccountType",
    "LIABILITY_TYPES",
    "is_liability",
    "Transaction",
    "TransactionType",
    "BudgetCategory",
    "BudgetGoal",
]
