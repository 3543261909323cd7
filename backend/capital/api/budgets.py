"""
Budget API endpoints.
"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Path, Response
from sqlalchemy.orm import Session

from capital.cache import Cache
from capital.dependencies import get_cache, get_db, get_today, get_user_id
from capital.schemas.budget import (
    BudgetCategoryCreate,
    BudgetCategoryResponse,
    BudgetCategoryUpdate,
    BudgetGoalResponse,
    BudgetGoalUpsert,
    CategoryOrdering,
    OrganizedBudgets,
)
from capital.services import budgets_service

router = APIRouter(prefix="/budgets", tags=["budgets"])


def _get_category_or_404(db: Session, user_id: str, category_id: str):
    category = budgets_service.get_category(db, user_id, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Budget category not found")
    return category


def _reject_future_month(year: int, month: int, today: date) -> None:
    if (year, month) > (today.year, today.month):
        raise HTTPException(status_code=422, detail="Budget goals cannot be set for future months")


@router.get("", response_model=OrganizedBudgets)
def get_budgets(
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id)
):
    """Income and Expenses budgets with their subcategories and goals."""
    return budgets_service.fetch_budgets(db, cache, user_id)


@router.post("/categories", response_model=BudgetCategoryResponse, status_code=201)
def create_category(
    category: BudgetCategoryCreate,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today)
):
    """Create a budget subcategory with its first goal."""
    _reject_future_month(category.year, category.month, today)
    return budgets_service.create_category(db, cache, user_id, category)


@router.put("/categories/ordering", status_code=204)
def reorder_categories(
    ordering: CategoryOrdering,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id)
):
    """Reorder subcategories using their ids."""
    updated = budgets_service.reorder_categories(db, cache, user_id, ordering.categories)
    if not updated:
        raise HTTPException(status_code=404, detail="No budget categories match the provided ids")
    return Response(status_code=204)


@router.patch("/categories/{category_id}", response_model=BudgetCategoryResponse)
def update_category(
    category_id: str,
    update: BudgetCategoryUpdate,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id)
):
    """Rename or reorder a subcategory."""
    category = _get_category_or_404(db, user_id, category_id)
    if category.is_main:
        raise HTTPException(status_code=409, detail="Main budget categories cannot be modified")
    return budgets_service.update_category(db, cache, category, update)


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id)
):
    """Delete a subcategory and its goals."""
    category = _get_category_or_404(db, user_id, category_id)
    if category.is_main:
        raise HTTPException(status_code=409, detail="Main budget categories cannot be deleted")
    budgets_service.delete_category(db, cache, category)
    return Response(status_code=204)


@router.put("/goals", response_model=BudgetGoalResponse)
def upsert_goal(
    goal: BudgetGoalUpsert,
    response: Response,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today)
):
    """Set the goal of a category for one month."""
    _reject_future_month(goal.year, goal.month, today)
    category = _get_category_or_404(db, user_id, goal.budget_category_id)
    saved, created = budgets_service.upsert_goal(db, cache, category, goal.year, goal.month, goal.goal)
    response.status_code = 201 if created else 200
    return saved


@router.delete("/goals/{category_id}/{year}/{month}", status_code=204)
def delete_goal(
    category_id: str,
    year: int,
    month: int = Path(..., ge=1, le=12),
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id)
):
    """Remove the goal of a category for one month."""
    category = _get_category_or_404(db, user_id, category_id)
    if not budgets_service.delete_goal(db, cache, category, year, month):
        raise HTTPException(status_code=404, detail="Budget goal not found")
    return Response(status_code=204)
