"""
Dashboard API endpoints.
"""

from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from capital.cache import Cache
from capital.dependencies import get_cache, get_db, get_today, get_user_id
from capital.schemas.trends import TrendResponse, TrendSeries
from capital.services import accounts_service, transactions_service
from capital.services.trends_service import (
    TrendAccount,
    TrendKind,
    TrendTransaction,
    aggregate_trends,
)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/trends", response_model=TrendResponse)
def get_trends(
    kind: TrendKind = Query(TrendKind.accounts),
    year: Optional[int] = Query(None, ge=1800, le=9999),
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today)
):
    """
    Monthly chart series for a year.
    accounts: reconstructed balance per account plus net worth.
    budgets: Income and Expenses totals per month.
    """
    year = year or today.year
    accounts = accounts_service.fetch_accounts(db, cache, user_id)
    transactions = transactions_service.fetch_transactions(db, cache, user_id)

    report = aggregate_trends(
        [TrendAccount(id=a.id, type=a.account_type, balance=a.balance) for a in accounts],
        [
            TrendTransaction(
                amount=t.amount,
                type=t.type,
                date=t.date,
                account_id=t.account_id,
                budget_category_id=t.budget_category_id,
            )
            for t in transactions
        ],
        year,
        kind,
        today,
    )

    labels = {a.id: a.name for a in accounts}
    series = [
        TrendSeries(
            id=series_id,
            label=labels.get(series_id, series_id),
            data=[float(p) if p is not None else None for p in points],
            liability=series_id in report.liabilities,
        )
        for series_id, points in report.series.items()
    ]

    message = None
    if report.empty:
        message = f"No available {'accounts' if kind is TrendKind.accounts else 'transactions'}"

    return TrendResponse(
        kind=report.kind,
        year=report.year,
        series=series,
        net_worth=float(report.net_worth) if report.net_worth is not None else None,
        empty=report.empty,
        message=message,
    )
