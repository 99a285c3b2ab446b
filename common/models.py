"""Data models for the expense tracker domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple

__all__ = ["Expense", "ExpensePatch", "isoformat_utc", "parse_datetime"]


def isoformat_utc(dt: datetime) -> str:
    """Return an ISO 8601 string with trailing Z for UTC-aware datetimes."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    iso = dt.isoformat(timespec="milliseconds")
    # datetime.isoformat renders +00:00 for UTC; replace with the shorter Z form.
    return iso.replace("+00:00", "Z")


def parse_datetime(value: str) -> datetime:
    """Parse ISO 8601 datetime strings with optional trailing Z into UTC-aware datetime."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        # Treat naive datetimes as UTC to avoid accidental timezone drift.
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class Expense:
    description: str
    amount: int
    date: str
    id: Optional[int] = None


@dataclass(frozen=True)
class ExpensePatch:
    """Fields to change on an existing expense; ``None`` means untouched."""

    description: Optional[str] = None
    amount: Optional[int] = None
    date: Optional[str] = None

    def is_empty(self) -> bool:
        return self.description is None and self.amount is None and self.date is None

    def changes(self) -> List[Tuple[str, Any]]:
        """Return ``(column, value)`` pairs in canonical order.

        Blank descriptions and dates are dropped. A zero amount is a real
        change and is kept.
        """
        pairs: List[Tuple[str, Any]] = []
        if self.description is not None and self.description.strip():
            pairs.append(("description", self.description.strip()))
        if self.amount is not None:
            pairs.append(("amount", self.amount))
        if self.date is not None and self.date.strip():
            pairs.append(("date", self.date.strip()))
        return pairs
