"""Framework-agnostic business services for the expense tracker."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional

from .exceptions import ValidationError
from .models import Expense, ExpensePatch, isoformat_utc, parse_datetime
from .storage import ExpenseStore
from .validators import (
    parse_amount,
    parse_id,
    parse_month,
    parse_year,
    validate_datetime,
    validate_optional_str,
    validate_required_str,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Summary:
    total: int
    year: Optional[int] = None
    month: Optional[int] = None

    @property
    def label(self) -> str:
        if self.year is None:
            return f"Total expenses: ${self.total}"
        if self.month is None:
            return f"Total expenses for {self.year}: ${self.total}"
        return f"Total expenses for {calendar.month_name[self.month]} of {self.year}: ${self.total}"


def summarize(
    expenses: Iterable[Expense], year: Optional[int] = None, month: Optional[int] = None
) -> Summary:
    """Sum expense amounts, optionally restricted to a calendar year and month.

    ``month`` is only honoured together with ``year``; callers resolve a
    missing year before getting here.
    """
    if year is None:
        return Summary(total=sum(expense.amount for expense in expenses))

    total = 0
    for expense in expenses:
        try:
            incurred = parse_datetime(expense.date)
        except ValueError:
            logger.warning("skipping expense %s with unreadable date %r", expense.id, expense.date)
            continue
        if incurred.year != year:
            continue
        if month is not None and incurred.month != month:
            continue
        total += expense.amount
    return Summary(total=total, year=year, month=month)


class ExpenseService:
    """Validates command input and mediates the expense store."""

    def __init__(self, store: ExpenseStore) -> None:
        self._store = store

    # Public API -----------------------------------------------------------
    def add(self, description: object, amount: object, date: Optional[object] = None) -> Expense:
        expense = Expense(
            description=validate_required_str(description, "description"),
            amount=parse_amount(amount, "amount"),
            date=_expense_date(date),
        )
        return self._store.insert(expense)

    def update(self, expense_id: object, changes: Dict[str, object]) -> Expense:
        expense_id = parse_id(expense_id, "id")
        patch = ExpensePatch(
            description=validate_optional_str(changes.get("description"), "description"),
            amount=(
                parse_amount(changes["amount"], "amount")
                if changes.get("amount") is not None
                else None
            ),
            date=(
                validate_datetime(changes["date"], "date")
                if changes.get("date") is not None
                else None
            ),
        )
        if patch.is_empty():
            raise ValidationError("no field to update")
        return self._store.update(expense_id, patch)

    def delete(self, expense_id: object) -> None:
        self._store.delete(parse_id(expense_id, "id"))

    def list(self) -> List[Expense]:
        return self._store.find_all()

    def summary(
        self,
        year: Optional[object] = None,
        month: Optional[object] = None,
        today: Optional[date] = None,
    ) -> Summary:
        resolved_month = parse_month(month, "month") if month is not None else None
        resolved_year = parse_year(year, "year") if year is not None else None
        if resolved_month is not None and resolved_year is None:
            resolved_year = (today or datetime.now(timezone.utc).date()).year
        return summarize(self._store.find_all(), resolved_year, resolved_month)


def _expense_date(candidate: Optional[object]) -> str:
    if candidate is None:
        # Stamp new expenses at validation time.
        return isoformat_utc(datetime.now(timezone.utc))
    return validate_datetime(candidate, "date")
