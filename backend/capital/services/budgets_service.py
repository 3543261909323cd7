"""Service for budget categories and their monthly goals."""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy.orm import Session

from capital.cache import Cache, budgets_key, transactions_key
from capital.config import settings
from capital.models.budget import BudgetCategory, BudgetGoal
from capital.models.transaction import TransactionType
from capital.schemas.budget import (
    BudgetCategoryCreate,
    BudgetCategoryResponse,
    BudgetCategoryUpdate,
    BudgetGoalResponse,
    OrganizedBudget,
    OrganizedBudgets,
)

logger = logging.getLogger(__name__)


def ensure_main_categories(db: Session, user_id: str) -> Dict[TransactionType, BudgetCategory]:
    """Get the user's main Income and Expenses categories, creating any missing one."""
    mains = {
        c.type: c for c in db.query(BudgetCategory).filter(
            BudgetCategory.user_id == user_id,
            BudgetCategory.name.is_(None)
        ).all()
    }
    created = False
    for budget_type in TransactionType:
        if budget_type not in mains:
            category = BudgetCategory(user_id=user_id, type=budget_type, name=None)
            db.add(category)
            mains[budget_type] = category
            created = True

    if created:
        db.commit()
        for category in mains.values():
            db.refresh(category)
    return mains


def fetch_budgets(db: Session, cache: Cache, user_id: str) -> OrganizedBudgets:
    """Return the budget hierarchy for both types, read through the cache."""
    key = budgets_key(user_id)
    cached = cache.get(key)
    if cached:
        try:
            return OrganizedBudgets.model_validate_json(cached)
        except ValidationError as e:
            logger.warning(f"Discarding malformed cache entry {key}: {e}")

    mains = ensure_main_categories(db, user_id)
    subcategories = db.query(BudgetCategory).filter(
        BudgetCategory.user_id == user_id,
        BudgetCategory.name.isnot(None)
    ).all()
    # Ordered categories first, then unordered ones by creation
    subcategories.sort(key=lambda c: (c.category_order is None, c.category_order or 0, c.created_at))

    organized = {}
    for budget_type, main in mains.items():
        organized[budget_type.value] = OrganizedBudget(
            budget_category_id=main.id,
            goals=[BudgetGoalResponse.model_validate(g) for g in main.goals],
            categories=[
                BudgetCategoryResponse.model_validate(c)
                for c in subcategories if c.type == budget_type
            ],
        )

    result = OrganizedBudgets(**organized)
    cache.set(key, settings.budgets_cache_ttl, result.model_dump_json())
    return result


def get_category(db: Session, user_id: str, category_id: str) -> Optional[BudgetCategory]:
    return db.query(BudgetCategory).filter(
        BudgetCategory.id == category_id,
        BudgetCategory.user_id == user_id
    ).first()


def create_category(db: Session, cache: Cache, user_id: str, data: BudgetCategoryCreate) -> BudgetCategory:
    """Create a subcategory together with its first monthly goal."""
    ensure_main_categories(db, user_id)

    order = data.category_order
    if order is None:
        order = db.query(BudgetCategory).filter(
            BudgetCategory.user_id == user_id,
            BudgetCategory.type == data.type,
            BudgetCategory.name.isnot(None)
        ).count()

    category = BudgetCategory(
        user_id=user_id,
        type=data.type,
        name=data.name,
        category_order=order,
    )
    category.goals.append(BudgetGoal(year=data.year, month=data.month, goal=data.goal))
    db.add(category)
    db.commit()
    db.refresh(category)

    cache.delete(budgets_key(user_id))
    return category


def update_category(db: Session, cache: Cache, category: BudgetCategory, update: BudgetCategoryUpdate) -> BudgetCategory:
    update_data = update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if field == "name" and value is None:
            continue
        setattr(category, field, value)

    db.commit()
    db.refresh(category)

    cache.delete(budgets_key(category.user_id))
    return category


def reorder_categories(db: Session, cache: Cache, user_id: str, category_ids: List[str]) -> int:
    """Apply a new subcategory order; returns how many categories were moved."""
    categories = {
        c.id: c for c in db.query(BudgetCategory).filter(
            BudgetCategory.user_id == user_id,
            BudgetCategory.id.in_(category_ids),
            BudgetCategory.name.isnot(None)
        ).all()
    }
    updated = 0
    for position, category_id in enumerate(category_ids):
        category = categories.get(category_id)
        if category:
            category.category_order = position
            updated += 1

    if updated:
        db.commit()
        cache.delete(budgets_key(user_id))
    return updated


def delete_category(db: Session, cache: Cache, category: BudgetCategory) -> None:
    """Delete a subcategory; its transactions stay uncategorized."""
    user_id = category.user_id
    db.delete(category)
    db.commit()

    cache.delete(budgets_key(user_id), transactions_key(user_id))


def upsert_goal(
    db: Session,
    cache: Cache,
    category: BudgetCategory,
    year: int,
    month: int,
    goal: Decimal,
) -> Tuple[BudgetGoal, bool]:
    """Set the goal for a month. Returns the goal and whether it was created."""
    existing = db.get(BudgetGoal, (category.id, year, month))
    created = existing is None
    if created:
        existing = BudgetGoal(budget_category_id=category.id, year=year, month=month, goal=goal)
        db.add(existing)
    else:
        existing.goal = goal

    db.commit()
    db.refresh(existing)

    cache.delete(budgets_key(category.user_id))
    return existing, created


def delete_goal(db: Session, cache: Cache, category: BudgetCategory, year: int, month: int) -> bool:
    goal = db.get(BudgetGoal, (category.id, year, month))
    if not goal:
        return False

    db.delete(goal)
    db.commit()

    cache.delete(budgets_key(category.user_id))
    return True
