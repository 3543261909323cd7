"""
Monthly trend aggregation for the dashboard charts.

Given a user's accounts and transaction ledger, builds 12-point series for
one calendar year:

* ``accounts``: each account's balance per month, reconstructed backwards
  from its live balance by undoing every transaction recorded after that
  month. Income is undone by subtracting, expenses by adding back.
* ``budgets``: absolute Income and Expenses totals per month.

Everything here is pure: no I/O, no clock reads (``today`` is passed in) and
no exceptions for bad input. Malformed ledger entries are skipped so the
chart can still render whatever is usable.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Optional, Sequence, Union

from capital.models.account import is_liability
from capital.models.transaction import TransactionType

logger = logging.getLogger(__name__)

MONTHS = 12
ZERO = Decimal("0")
INCOME = TransactionType.income.value
EXPENSES = TransactionType.expenses.value

MonthSeries = List[Optional[Decimal]]


class TrendKind(str, enum.Enum):
    """Series family requested by the chart."""
    accounts = "accounts"
    budgets = "budgets"


class CalendarMonth(NamedTuple):
    """A (year, month) label. Dates are calendar labels, never instants."""

    year: int
    month: int

    @classmethod
    def parse(cls, value) -> Optional["CalendarMonth"]:
        """Read the month from a date or an ISO string's ``YYYY-MM`` prefix."""
        if isinstance(value, date):
            return cls(value.year, value.month)
        if not isinstance(value, str):
            return None
        head = value.strip()[:7]
        if len(head) != 7 or head[4] != "-" or not (head[:4] + head[5:]).isdigit():
            return None
        year, month = int(head[:4]), int(head[5:])
        if not 1 <= month <= MONTHS:
            return None
        return cls(year, month)

    @property
    def index(self) -> int:
        return self.month - 1


@dataclass(frozen=True)
class TrendAccount:
    id: str
    type: str
    balance: Decimal


@dataclass(frozen=True)
class TrendTransaction:
    amount: Decimal
    type: str
    date: Union[date, str]
    account_id: Optional[str] = None
    budget_category_id: Optional[str] = None


@dataclass(frozen=True)
class TrendReport:
    """
    Chart-ready output.

    ``series`` preserves account order (or Income, Expenses). ``net_worth`` is
    None for budgets. An empty ``series`` means there is nothing to display,
    which is not the same thing as a series of zeros.
    """

    kind: TrendKind
    year: int
    series: Dict[str, MonthSeries]
    net_worth: Optional[Decimal]
    liabilities: FrozenSet[str] = frozenset()

    @property
    def empty(self) -> bool:
        return not self.series


def aggregate_trends(
    accounts: Sequence[TrendAccount],
    transactions: Iterable[TrendTransaction],
    year: int,
    kind: Union[TrendKind, str],
    today: date,
) -> TrendReport:
    """Build the requested series family for ``year`` as seen on ``today``."""
    kind = TrendKind(kind)
    if kind is TrendKind.budgets:
        return budget_trends(transactions, year)
    return account_trends(accounts, transactions, year, today)


def account_trends(
    accounts: Sequence[TrendAccount],
    transactions: Iterable[TrendTransaction],
    year: int,
    today: date,
) -> TrendReport:
    """Reconstruct month-end balances for every account in ``year``."""
    if not accounts:
        return TrendReport(kind=TrendKind.accounts, year=year, series={}, net_worth=ZERO)

    now = CalendarMonth(today.year, today.month)
    live: Dict[str, Decimal] = {}
    for account in accounts:
        balance = _coerce_amount(account.balance)
        live[account.id] = balance if balance is not None else ZERO

    # Net balance change per account and month, for everything up to now
    changes: Dict[str, Dict[CalendarMonth, Decimal]] = {account_id: {} for account_id in live}
    skipped = 0
    for txn in transactions:
        entry = _ledger_entry(txn)
        if entry is None or txn.account_id not in live:
            skipped += 1
            continue
        when, change = entry
        if when > now:
            skipped += 1
            continue
        by_month = changes[txn.account_id]
        by_month[when] = by_month.get(when, ZERO) + change

    if skipped:
        logger.debug(f"Skipped {skipped} ledger entries while building account trends for {year}")

    has_evidence = any(
        when.year == year for by_month in changes.values() for when in by_month
    )

    series: Dict[str, MonthSeries] = {}
    for account_id, balance in live.items():
        by_month = changes[account_id]
        # Balance in force at the end of ``year``: undo every later change
        carried = balance - sum(
            (change for when, change in by_month.items() if when.year > year), ZERO
        )
        if not has_evidence:
            series[account_id] = [carried] * MONTHS
            continue

        monthly = [ZERO] * MONTHS
        for when, change in by_month.items():
            if when.year == year:
                monthly[when.index] += change
        points: MonthSeries = _walk_backwards(carried, monthly)
        if year == now.year:
            for index in range(now.index + 1, MONTHS):
                points[index] = None
        series[account_id] = points

    liabilities = frozenset(account.id for account in accounts if is_liability(account.type))
    reference = now.index if year == now.year else MONTHS - 1
    net_worth = ZERO
    for account_id, points in series.items():
        value = points[reference] if points[reference] is not None else ZERO
        net_worth += -value if account_id in liabilities else value

    return TrendReport(
        kind=TrendKind.accounts,
        year=year,
        series=series,
        net_worth=net_worth,
        liabilities=liabilities,
    )


def budget_trends(transactions: Iterable[TrendTransaction], year: int) -> TrendReport:
    """Accumulate absolute Income and Expenses amounts per month of ``year``."""
    totals: Dict[str, MonthSeries] = {
        INCOME: [ZERO] * MONTHS,
        EXPENSES: [ZERO] * MONTHS,
    }
    found = False
    for txn in transactions:
        entry = _ledger_entry(txn)
        if entry is None:
            continue
        when, change = entry
        if when.year != year:
            continue
        key = INCOME if change > 0 else EXPENSES
        totals[key][when.index] += abs(change)
        found = True

    if not found:
        return TrendReport(kind=TrendKind.budgets, year=year, series={}, net_worth=None)
    return TrendReport(kind=TrendKind.budgets, year=year, series=totals, net_worth=None)


def _walk_backwards(carried: Decimal, monthly: List[Decimal]) -> MonthSeries:
    # Month i holds the carried balance minus every change after month i
    points: MonthSeries = [ZERO] * MONTHS
    running = carried
    for index in range(MONTHS - 1, -1, -1):
        points[index] = running
        running -= monthly[index]
    return points


def _ledger_entry(txn: TrendTransaction):
    """
    Return ``(month, change)`` where change is how the transaction moved the
    balance: +abs(amount) for income, -abs(amount) for expenses. None when
    the entry cannot be used.
    """
    when = CalendarMonth.parse(txn.date)
    amount = _coerce_amount(txn.amount)
    txn_type = _normalize_type(txn.type)
    if when is None or amount is None or txn_type is None or amount == ZERO:
        return None
    return when, abs(amount) if txn_type == INCOME else -abs(amount)


def _normalize_type(value) -> Optional[str]:
    if isinstance(value, enum.Enum):
        value = value.value
    if not isinstance(value, str):
        return None
    normalized = value.strip().lower()
    if normalized == "income":
        return INCOME
    if normalized in ("expenses", "expense"):
        return EXPENSES
    return None


def _coerce_amount(amount) -> Optional[Decimal]:
    if isinstance(amount, bool) or amount is None:
        return None
    if not isinstance(amount, Decimal):
        try:
            amount = Decimal(str(amount))
        except InvalidOperation:
            return None
    return amount if amount.is_finite() else None
