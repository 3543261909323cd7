"""
Budget Pydantic schemas for API validation.
"""

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from decimal import Decimal
from typing import Annotated, Optional

from capital.models.transaction import TransactionType

GOAL_LIMIT = Decimal("999999999999.99")
RESERVED_NAMES = {"income", "expenses", "null"}


def _check_name(value: str) -> str:
    value = value.strip()
    if not 1 <= len(value) <= 30:
        raise ValueError("Name must be between 1 and 30 characters")
    if value.lower() in RESERVED_NAMES:
        raise ValueError("Category name cannot be 'Income', 'Expenses', or 'null'")
    return value


CategoryName = Annotated[str, AfterValidator(_check_name)]


class BudgetGoalBase(BaseModel):
    """Goal amount for one month."""
    goal: Decimal = Field(..., ge=0, le=GOAL_LIMIT)
    year: int = Field(..., ge=1800)
    month: int = Field(..., ge=1, le=12)


class BudgetGoalUpsert(BudgetGoalBase):
    budget_category_id: str


class BudgetGoalResponse(BudgetGoalBase):
    model_config = ConfigDict(from_attributes=True)


class BudgetCategoryCreate(BudgetGoalBase):
    """Create a subcategory together with its first goal."""
    type: TransactionType
    name: CategoryName
    category_order: Optional[int] = Field(None, ge=0)


class BudgetCategoryUpdate(BaseModel):
    name: Optional[CategoryName] = None
    category_order: Optional[int] = Field(None, ge=0)


class CategoryOrdering(BaseModel):
    categories: list[str] = Field(..., min_length=1)


class BudgetCategoryResponse(BaseModel):
    id: str
    type: TransactionType
    name: Optional[str]
    category_order: Optional[int]
    goals: list[BudgetGoalResponse] = []

    model_config = ConfigDict(from_attributes=True)


class OrganizedBudget(BaseModel):
    """Main category of one type with its goals and subcategories."""
    budget_category_id: str
    goals: list[BudgetGoalResponse]
    categories: list[BudgetCategoryResponse]


class OrganizedBudgets(BaseModel):
    Income: OrganizedBudget
    Expenses: OrganizedBudget
