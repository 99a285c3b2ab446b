"""Console interface for the expense tracker."""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from pydantic import ValidationError as SettingsError

from common.config import Settings, get_settings
from common.exceptions import RecordNotFoundError, StorageError, ValidationError
from common.log import init_logging
from common.models import Expense, parse_datetime
from common.services import ExpenseService
from common.storage import ExpenseStore
from common.validators import (
    parse_amount,
    parse_id,
    parse_month,
    parse_year,
    validate_datetime,
    validate_required_str,
)

from . import __version__

logger = logging.getLogger(__name__)


def _argument(validator: Callable[[str], object], value: str) -> object:
    try:
        return validator(value)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _parse_amount(value: str) -> int:
    return _argument(parse_amount, value)


def _parse_id(value: str) -> int:
    return _argument(parse_id, value)


def _parse_month(value: str) -> int:
    return _argument(parse_month, value)


def _parse_year(value: str) -> int:
    return _argument(parse_year, value)


def _parse_description(value: str) -> str:
    return _argument(lambda raw: validate_required_str(raw, "description"), value)


def _parse_datetime(value: str) -> str:
    return _argument(validate_datetime, value)


def _display_date(value: str) -> str:
    try:
        return parse_datetime(value).date().isoformat()
    except ValueError:
        return value


def _format_expense(expense: Expense) -> str:
    return f"# {expense.id}  {_display_date(expense.date)}  {expense.description}  ${expense.amount}"


@contextmanager
def _open_store(settings: Settings) -> Iterator[ExpenseStore]:
    store = ExpenseStore(settings.db_url, table=settings.db_table)
    try:
        yield store
    finally:
        try:
            store.stop()
        except StorageError as exc:
            logger.debug("teardown failed", exc_info=True)
            print(f"Could not release database connection: {exc}", file=sys.stderr)


def handle_command(args: argparse.Namespace, service: ExpenseService) -> int:
    try:
        if args.command == "add":
            expense = service.add(args.description, args.amount, args.date)
            print(f"Expense added successfully (ID: {expense.id})")
        elif args.command == "list":
            expenses = service.list()
            if not expenses:
                print("No expenses found.")
                return 0
            print("# ID  Date        Description  Amount")
            for expense in expenses:
                print(_format_expense(expense))
        elif args.command == "update":
            changes = {
                "amount": args.amount,
                "description": args.description,
                "date": args.date,
            }
            expense = service.update(args.id, {k: v for k, v in changes.items() if v is not None})
            print(f"Expense updated successfully (ID: {expense.id}, amount: ${expense.amount})")
        elif args.command == "delete":
            service.delete(args.id)
            print(f"Expense deleted successfully (ID: {args.id})")
        elif args.command == "summary":
            print(service.summary(year=args.year, month=args.month).label)
        else:  # pragma: no cover - argparse should prevent this
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 2
    except ValidationError as exc:
        logger.debug("%s rejected", args.command, exc_info=True)
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        logger.debug("%s found nothing", args.command, exc_info=True)
        print(f"Not found: {exc}", file=sys.stderr)
        return 1
    except StorageError as exc:
        logger.debug("%s failed in the store", args.command, exc_info=True)
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="expense-tracker",
        description="Expense Tracker CLI App to Manage Your Finances",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug details to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Add an expense")
    add.add_argument("--description", required=True, type=_parse_description, help="Expense description")
    add.add_argument("--amount", required=True, type=_parse_amount, help="Amount that is spent for the expense")
    add.add_argument("--date", type=_parse_datetime, help="When the expense happened (ISO 8601, default: now)")

    delete = subparsers.add_parser("delete", help="Delete an expense")
    delete.add_argument("--id", required=True, type=_parse_id, help="Delete the expense with the given id")

    subparsers.add_parser("list", help="View all expenses")

    update = subparsers.add_parser("update", help="Update an expense")
    update.add_argument("--id", required=True, type=_parse_id, help="Expense id")
    update.add_argument("--amount", required=True, type=_parse_amount, help="Amount that is spent for the expense")
    update.add_argument("--description", type=_parse_description, help="New description")
    update.add_argument("--date", type=_parse_datetime, help="New expense date (ISO 8601)")

    summary = subparsers.add_parser("summary", help="Show the total of expenses")
    summary.add_argument("--month", type=_parse_month, help="Month number (1-12); defaults the year to the current one")
    summary.add_argument("--year", type=_parse_year, help="Calendar year")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except SettingsError:
        print("Could not connect to database. DB_URL is not configured.", file=sys.stderr)
        return 1

    init_logging(args.verbose or settings.debug)

    try:
        with _open_store(settings) as store:
            return handle_command(args, ExpenseService(store))
    except StorageError as exc:
        logger.debug("could not open the store", exc_info=True)
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
