"""
Transaction API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from capital.cache import Cache
from capital.dependencies import get_cache, get_db, get_today, get_user_id
from capital.models.transaction import Transaction, TransactionType
from capital.schemas.transaction import (
    BulkDeleteRequest,
    TransactionCreate,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdate,
)
from capital.services import transactions_service

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _reject_future_date(value: Optional[date], today: date) -> None:
    if value is not None and value > today:
        raise HTTPException(status_code=422, detail="Transaction date cannot be in the future")


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    account_id: Optional[str] = None,
    budget_category_id: Optional[str] = None,
    type: Optional[TransactionType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id)
):
    """List transactions with filtering and pagination"""
    query = db.query(Transaction).filter(Transaction.user_id == user_id)

    if account_id:
        query = query.filter(Transaction.account_id == account_id)
    if budget_category_id:
        query = query.filter(Transaction.budget_category_id == budget_category_id)
    if type:
        query = query.filter(Transaction.type == type)
    if start_date:
        query = query.filter(Transaction.date >= start_date)
    if end_date:
        query = query.filter(Transaction.date <= end_date)
    if search:
        query = query.filter(Transaction.description.ilike(f"%{_escape_like(search)}%", escape="\\"))

    total = query.count()

    query = query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
    query = query.offset((page - 1) * per_page).limit(per_page)

    transactions = query.all()
    pages = (total + per_page - 1) // per_page

    return TransactionListResponse(
        items=[TransactionResponse.model_validate(t) for t in transactions],
        total=total,
        page=page,
        pages=pages
    )


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    transaction: TransactionCreate,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today)
):
    """Record a new transaction"""
    _reject_future_date(transaction.date, today)
    missing = transactions_service.find_missing_reference(
        db, user_id, transaction.account_id, transaction.budget_category_id
    )
    if missing:
        raise HTTPException(status_code=404, detail=missing)
    created = transactions_service.create_transaction(db, cache, user_id, transaction)
    return TransactionResponse.model_validate(created)


@router.post("/bulk-delete")
def bulk_delete(
    request: BulkDeleteRequest,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id)
):
    """Delete several transactions at once"""
    deleted = transactions_service.delete_transactions(db, cache, user_id, request.transaction_ids)
    return {"deleted": deleted}


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id)
):
    """Get a single transaction"""
    transaction = transactions_service.get_transaction(db, user_id, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionResponse.model_validate(transaction)


@router.patch("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    update: TransactionUpdate,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today)
):
    """Update a transaction"""
    _reject_future_date(update.date, today)
    transaction = transactions_service.get_transaction(db, user_id, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")

    missing = transactions_service.find_missing_reference(
        db, user_id, update.account_id, update.budget_category_id
    )
    if missing:
        raise HTTPException(status_code=404, detail=missing)

    updated = transactions_service.update_transaction(db, cache, transaction, update)
    return TransactionResponse.model_validate(updated)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: str,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id)
):
    """Delete a transaction"""
    deleted = transactions_service.delete_transactions(db, cache, user_id, [transaction_id])
    if not deleted:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return Response(status_code=204)
