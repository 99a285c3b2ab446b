"""Persistence utilities for the expense tracker core services."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping

from sqlalchemy import create_engine, text

from .exceptions import RecordNotFoundError, ValidationError
from .models import Expense, ExpensePatch, isoformat_utc
from .validators import parse_amount, parse_id, validate_required_str, validate_table_name

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "expensetable"


class ExpenseStore:
    """Relational expense table behind a single owned connection pool.

    Store failures (``sqlalchemy.exc.SQLAlchemyError``) are not caught here;
    they reach the caller exactly as the driver raised them.
    """

    def __init__(self, url: str, table: str = DEFAULT_TABLE) -> None:
        self._table = validate_table_name(table)
        self._engine = create_engine(url)
        self._stopped = False

    def __enter__(self) -> "ExpenseStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # Public API -----------------------------------------------------------
    def insert(self, expense: Expense) -> Expense:
        statement = text(
            f"INSERT INTO {self._table} (description, amount, date) "
            "VALUES (:description, :amount, :date) RETURNING *;"
        )
        params = {
            "description": expense.description,
            "amount": expense.amount,
            "date": expense.date,
        }
        with self._engine.begin() as conn:
            row = conn.execute(statement, params).mappings().one()
        stored = _expense_from_row(row)
        logger.debug("inserted expense %s", stored.id)
        return stored

    def delete(self, expense_id: int) -> bool:
        if expense_id <= 0:
            raise ValidationError(
                "Expense could not be deleted: valid expense ID required."
            )
        statement = text(f"DELETE FROM {self._table} WHERE id=:id RETURNING *;")
        with self._engine.begin() as conn:
            rows = conn.execute(statement, {"id": expense_id}).mappings().all()
        if not rows:
            raise RecordNotFoundError("Expense could not be deleted.")
        logger.debug("deleted expense %s", expense_id)
        return True

    def update(self, expense_id: int, patch: ExpensePatch) -> Expense:
        if expense_id <= 0:
            raise ValidationError(
                "Expense could not be updated: valid expense ID required."
            )
        # Blank text fields count as absent.
        changes = patch.changes()
        if patch.is_empty() or not changes:
            raise ValidationError("Expense could not be updated: no field to update.")

        params: Dict[str, Any] = {"id": expense_id}
        assignments: List[str] = []
        for column, value in changes:
            assignments.append(f"{column}=:{column}")
            params[column] = value

        statement = text(
            f"UPDATE {self._table} SET {', '.join(assignments)} WHERE id=:id RETURNING *;"
        )
        with self._engine.begin() as conn:
            row = conn.execute(statement, params).mappings().first()
        if row is None:
            raise RecordNotFoundError("Expense could not be updated.")
        logger.debug("updated expense %s (%s)", expense_id, ", ".join(c for c, _ in changes))
        return _expense_from_row(row)

    def find_all(self) -> List[Expense]:
        statement = text(f"SELECT id, description, amount, date FROM {self._table};")
        with self._engine.connect() as conn:
            rows = conn.execute(statement).mappings().all()
        return [_expense_from_row(row) for row in rows]

    def stop(self) -> None:
        """Release the connection pool; only the first call has any effect."""
        if self._stopped:
            return
        self._stopped = True
        self._engine.dispose()
        logger.debug("released database connection pool")


def _expense_from_row(row: Mapping[str, Any]) -> Expense:
    """Build a validated Expense from a result row.

    A timestamp column comes back as ``datetime`` and is rendered in the
    same ISO 8601 UTC form new expenses are stamped with.
    """
    raw_date = row["date"]
    return Expense(
        id=parse_id(row["id"], "id"),
        description=validate_required_str(row["description"], "description"),
        amount=parse_amount(row["amount"], "amount"),
        date=isoformat_utc(raw_date) if isinstance(raw_date, datetime) else str(raw_date),
    )
