"""
Pydantic schemas package.
"""

from capital.schemas.account import (
    AccountHistoryEntry,
    AccountBase,
    AccountCreate,
    AccountUpdate,
    AccountOrdering,
    AccountResponse,
)
from capital.schemas.budget import (
    BudgetGoalUpsert,
    BudgetGoalResponse,
    BudgetCategoryCreate,
    BudgetCategoryUpdate,
    BudgetCategoryResponse,
    CategoryOrdering,
    OrganizedBudget,
    OrganizedBudgets,
)
from capital.schemas.transaction import (
    TransactionBase,
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
    TransactionListResponse,
    BulkDeleteRequest,
)
from capital.schemas.trends import TrendSeries, TrendResponse

__all__ = [
    "AccountHistoryEntry",
    "AccountBase",
    "AccountCreate",
    "AccountUpdate",
    "AccountOrdering",
    "AccountResponse",
    "BudgetGoalUpsert",
    "BudgetGoalResponse",
    "BudgetCategoryCreate",
    "BudgetCategoryUpdate",
    "BudgetCategoryResponse",
    "CategoryOrdering",
    "OrganizedBudget",
    "OrganizedBudgets",
    "TransactionBase",
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionResponse",
    "TransactionListResponse",
    "BulkDeleteRequest",
    "TrendSeries",
    "TrendResponse",
]
