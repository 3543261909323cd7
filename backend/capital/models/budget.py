"""
Budget category and goal database models.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Enum, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from capital.database import Base
from capital.models.transaction import TransactionType


class BudgetCategory(Base):
    """
    Budget category. Main categories have no name and exist once per
    user and type; every other category is a named subcategory.
    """

    __tablename__ = "budget_categories"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    type = Column(Enum(TransactionType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    name = Column(String(30), nullable=True)
    category_order = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    goals = relationship(
        "BudgetGoal",
        back_populates="category",
        order_by=lambda: [BudgetGoal.year.desc(), BudgetGoal.month.desc()],
        cascade="all, delete-orphan",
    )
    transactions = relationship("Transaction", back_populates="budget_category")

    @property
    def is_main(self) -> bool:
        return self.name is None


class BudgetGoal(Base):
    """Monthly goal for a budget category."""

    __tablename__ = "budget_goals"

    budget_category_id = Column(
        String(36), ForeignKey("budget_categories.id", ondelete="CASCADE"), primary_key=True
    )
    year = Column(Integer, primary_key=True)
    month = Column(Integer, primary_key=True)
    goal = Column(Numeric(13, 2), nullable=False)

    category = relationship("BudgetCategory", back_populates="goals")
