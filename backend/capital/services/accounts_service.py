"""Service for accounts and their balance history."""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from capital.cache import Cache, accounts_key, transactions_key
from capital.config import settings
from capital.models.account import Account, AccountHistory
from capital.schemas.account import AccountCreate, AccountResponse, AccountUpdate

logger = logging.getLogger(__name__)

_account_list = TypeAdapter(List[AccountResponse])


def fetch_accounts(db: Session, cache: Cache, user_id: str) -> List[AccountResponse]:
    """Return the user's accounts in display order, read through the cache."""
    key = accounts_key(user_id)
    cached = cache.get(key)
    if cached:
        try:
            return _account_list.validate_json(cached)
        except ValidationError as e:
            logger.warning(f"Discarding malformed cache entry {key}: {e}")

    accounts = db.query(Account).filter(
        Account.user_id == user_id
    ).order_by(Account.account_order, Account.created_at).all()

    result = [AccountResponse.model_validate(a) for a in accounts]
    cache.set(key, settings.accounts_cache_ttl, _account_list.dump_json(result).decode("utf-8"))
    return result


def get_account(db: Session, user_id: str, account_id: str) -> Optional[Account]:
    return db.query(Account).filter(
        Account.id == account_id,
        Account.user_id == user_id
    ).first()


def create_account(db: Session, cache: Cache, user_id: str, data: AccountCreate, today: date) -> Account:
    """Create an account along with its opening balance snapshot."""
    order = data.account_order
    if order is None:
        order = db.query(Account).filter(Account.user_id == user_id).count()

    account = Account(
        user_id=user_id,
        name=data.name,
        account_type=data.account_type,
        image=data.image,
        account_order=order,
    )
    account.history.append(AccountHistory(balance=data.balance, last_updated=today))
    db.add(account)
    db.commit()
    db.refresh(account)

    cache.delete(accounts_key(user_id))
    return account


def update_account(db: Session, cache: Cache, account: Account, update: AccountUpdate, today: date) -> Account:
    """Update account details; a new balance becomes today's snapshot."""
    update_data = update.model_dump(exclude_unset=True)
    balance = update_data.pop("balance", None)

    for field, value in update_data.items():
        if value is not None:
            setattr(account, field, value)

    if balance is not None:
        _upsert_snapshot(db, account, balance, today)

    db.commit()
    db.refresh(account)

    cache.delete(accounts_key(account.user_id))
    return account


def record_history(db: Session, cache: Cache, account: Account, balance: Decimal, last_updated: date) -> Account:
    """Insert or overwrite the balance snapshot for a date."""
    _upsert_snapshot(db, account, balance, last_updated)
    db.commit()
    db.refresh(account)

    cache.delete(accounts_key(account.user_id))
    return account


def get_snapshot(db: Session, account: Account, last_updated: date) -> Optional[AccountHistory]:
    return db.get(AccountHistory, (account.id, last_updated))


def delete_history(db: Session, cache: Cache, snapshot: AccountHistory) -> None:
    user_id = snapshot.account.user_id
    db.delete(snapshot)
    db.commit()

    cache.delete(accounts_key(user_id))


def reorder_accounts(db: Session, cache: Cache, user_id: str, account_ids: List[str]) -> int:
    """Apply a new display order; returns how many accounts were moved."""
    accounts = {
        a.id: a for a in db.query(Account).filter(
            Account.user_id == user_id,
            Account.id.in_(account_ids)
        ).all()
    }
    updated = 0
    for position, account_id in enumerate(account_ids):
        account = accounts.get(account_id)
        if account:
            account.account_order = position
            updated += 1

    if updated:
        db.commit()
        cache.delete(accounts_key(user_id))
    return updated


def delete_account(db: Session, cache: Cache, account: Account) -> None:
    """Delete an account; its transactions stay but lose the reference."""
    user_id = account.user_id
    db.delete(account)
    db.commit()

    # Detached transactions are cached too
    cache.delete(accounts_key(user_id), transactions_key(user_id))


def _upsert_snapshot(db: Session, account: Account, balance: Decimal, last_updated: date) -> None:
    snapshot = db.get(AccountHistory, (account.id, last_updated))
    if snapshot:
        snapshot.balance = balance
    else:
        db.add(AccountHistory(account_id=account.id, balance=balance, last_updated=last_updated))
