"""Service for the transaction ledger."""

import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from capital.cache import Cache, transactions_key
from capital.config import settings
from capital.models.account import Account
from capital.models.budget import BudgetCategory
from capital.models.transaction import Transaction
from capital.schemas.transaction import TransactionCreate, TransactionResponse, TransactionUpdate

logger = logging.getLogger(__name__)

_transaction_list = TypeAdapter(List[TransactionResponse])


def fetch_transactions(db: Session, cache: Cache, user_id: str) -> List[TransactionResponse]:
    """Return the user's whole ledger, newest first, read through the cache."""
    key = transactions_key(user_id)
    cached = cache.get(key)
    if cached:
        try:
            return _transaction_list.validate_json(cached)
        except ValidationError as e:
            logger.warning(f"Discarding malformed cache entry {key}: {e}")

    transactions = db.query(Transaction).filter(
        Transaction.user_id == user_id
    ).order_by(Transaction.date.desc(), Transaction.created_at.desc()).all()

    result = [TransactionResponse.model_validate(t) for t in transactions]
    cache.set(key, settings.transactions_cache_ttl, _transaction_list.dump_json(result).decode("utf-8"))
    return result


def get_transaction(db: Session, user_id: str, transaction_id: str) -> Optional[Transaction]:
    return db.query(Transaction).filter(
        Transaction.id == transaction_id,
        Transaction.user_id == user_id
    ).first()


def find_missing_reference(
    db: Session,
    user_id: str,
    account_id: Optional[str] = None,
    budget_category_id: Optional[str] = None,
) -> Optional[str]:
    """Name the first referenced record the user does not own, if any."""
    if account_id:
        exists = db.query(Account.id).filter(
            Account.id == account_id,
            Account.user_id == user_id
        ).first()
        if not exists:
            return "Account not found"
    if budget_category_id:
        exists = db.query(BudgetCategory.id).filter(
            BudgetCategory.id == budget_category_id,
            BudgetCategory.user_id == user_id
        ).first()
        if not exists:
            return "Budget category not found"
    return None


def create_transaction(db: Session, cache: Cache, user_id: str, data: TransactionCreate) -> Transaction:
    transaction = Transaction(
        user_id=user_id,
        date=data.date,
        amount=data.amount,
        type=data.type,
        description=data.description.strip(),
        account_id=data.account_id or None,
        budget_category_id=data.budget_category_id or None,
    )
    db.add(transaction)
    db.commit()
    db.refresh(transaction)

    cache.delete(transactions_key(user_id))
    return transaction


def update_transaction(db: Session, cache: Cache, transaction: Transaction, update: TransactionUpdate) -> Transaction:
    update_data = update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if field in ("account_id", "budget_category_id"):
            # Empty string or null detaches the reference
            setattr(transaction, field, value or None)
        elif value is not None:
            setattr(transaction, field, value.strip() if field == "description" else value)

    db.commit()
    db.refresh(transaction)

    cache.delete(transactions_key(transaction.user_id))
    return transaction


def delete_transactions(db: Session, cache: Cache, user_id: str, transaction_ids: List[str]) -> int:
    """Delete the given transactions owned by the user; returns the count."""
    deleted = db.query(Transaction).filter(
        Transaction.user_id == user_id,
        Transaction.id.in_(transaction_ids)
    ).delete(synchronize_session=False)
    db.commit()

    if deleted:
        cache.delete(transactions_key(user_id))
    return deleted
