"""
Account database models.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Date, DateTime, Enum, Numeric, ForeignKey
from sqlalchemy.orm import relationship
import enum
from capital.database import Base


class AccountType(str, enum.Enum):
    """Account type enumeration."""
    checking = "Checking"
    savings = "Savings"
    credit_card = "Credit Card"
    debt = "Debt"
    retirement = "Retirement"
    investment = "Investment"
    loan = "Loan"
    property = "Property"
    other = "Other"


LIABILITY_TYPES = frozenset({AccountType.credit_card, AccountType.debt, AccountType.loan})

# Generic tags callers may use instead of a concrete account type
_LIABILITY_TAGS = frozenset({t.value.lower() for t in LIABILITY_TYPES} | {"credit", "liability"})


def is_liability(account_type) -> bool:
    """Return True when the account type reduces net worth."""
    if account_type is None:
        return False
    if isinstance(account_type, AccountType):
        return account_type in LIABILITY_TYPES
    return str(account_type).strip().lower() in _LIABILITY_TAGS


class Account(Base):
    """Account model."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    name = Column(String(30), nullable=False)
    account_type = Column(Enum(AccountType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    image = Column(String(255), nullable=True)
    account_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    history = relationship(
        "AccountHistory",
        back_populates="account",
        order_by="AccountHistory.last_updated.desc()",
        cascade="all, delete-orphan",
    )
    transactions = relationship("Transaction", back_populates="account")

    @property
    def balance(self):
        """Current balance, taken from the most recent history snapshot."""
        return self.history[0].balance if self.history else None

    @property
    def liability(self) -> bool:
        return is_liability(self.account_type)


class AccountHistory(Base):
    """Balance snapshot of an account on a given date."""

    __tablename__ = "accounts_history"

    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True)
    last_updated = Column(Date, primary_key=True)
    balance = Column(Numeric(13, 2), nullable=False)

    account = relationship("Account", back_populates="history")
