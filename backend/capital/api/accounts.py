"""
Account API endpoints.
"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from typing import List

from capital.cache import Cache
from capital.dependencies import get_cache, get_db, get_today, get_user_id
from capital.schemas.account import (
    AccountCreate,
    AccountHistoryEntry,
    AccountOrdering,
    AccountResponse,
    AccountUpdate,
)
from capital.services import accounts_service

router = APIRouter(prefix="/accounts", tags=["accounts"])


def _get_account_or_404(db: Session, user_id: str, account_id: str):
    account = accounts_service.get_account(db, user_id, account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return account


@router.get("", response_model=List[AccountResponse])
def list_accounts(
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id)
):
    """List the user's accounts in display order."""
    return accounts_service.fetch_accounts(db, cache, user_id)


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    account: AccountCreate,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today)
):
    """Create a new account with its opening balance."""
    return accounts_service.create_account(db, cache, user_id, account, today)


@router.put("/ordering", status_code=204)
def reorder_accounts(
    ordering: AccountOrdering,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id)
):
    """Reorder accounts using the full list of account ids."""
    updated = accounts_service.reorder_accounts(db, cache, user_id, ordering.accounts)
    if not updated:
        raise HTTPException(status_code=404, detail="No accounts match the provided ids")
    return Response(status_code=204)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id)
):
    """Get a specific account."""
    return _get_account_or_404(db, user_id, account_id)


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    account_update: AccountUpdate,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today)
):
    """Update an account. A new balance is recorded as today's snapshot."""
    account = _get_account_or_404(db, user_id, account_id)
    return accounts_service.update_account(db, cache, account, account_update, today)


@router.put("/{account_id}/history", response_model=AccountResponse)
def record_history(
    account_id: str,
    entry: AccountHistoryEntry,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today)
):
    """Insert or overwrite the balance snapshot for a date."""
    if entry.last_updated > today:
        raise HTTPException(status_code=422, detail="History date cannot be in the future")
    account = _get_account_or_404(db, user_id, account_id)
    return accounts_service.record_history(db, cache, account, entry.balance, entry.last_updated)


@router.delete("/{account_id}/history/{last_updated}", status_code=204)
def delete_history(
    account_id: str,
    last_updated: date,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id)
):
    """Delete a balance snapshot. The last remaining one cannot be deleted."""
    account = _get_account_or_404(db, user_id, account_id)
    snapshot = accounts_service.get_snapshot(db, account, last_updated)
    if not snapshot:
        raise HTTPException(status_code=404, detail="Account history record not found")
    if len(account.history) <= 1:
        raise HTTPException(status_code=409, detail="At least one history record must remain for this account")

    accounts_service.delete_history(db, cache, snapshot)
    return Response(status_code=204)


@router.delete("/{account_id}", status_code=204)
def delete_account(
    account_id: str,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id)
):
    """Delete an account and its history. Its transactions are kept."""
    account = _get_account_or_404(db, user_id, account_id)
    accounts_service.delete_account(db, cache, account)
    return Response(status_code=204)
