import math
from datetime import date
from typing import Iterable

from salon.models.core import EXPENSES
from salon.schemas.finance import Expense, ExpenseIn
from salon.store.base import DocumentStore
from salon.util.audit import audit
from salon.util.errors import InvalidInput, NotFound

# expenses in these categories pay staff; everything else is a general expense
PAYROLL_CATEGORIES = ("Comisiones", "Sueldos")


def is_staff_payment(e: Expense) -> bool:
    return e.category in PAYROLL_CATEGORIES


async def add_expense(store: DocumentStore, body: ExpenseIn, actor: str | None = None) -> str:
    if not body.date or not body.description.strip() or not body.category.strip():
        raise InvalidInput("date, description and category are required")
    if not math.isfinite(body.amount) or body.amount <= 0:
        raise InvalidInput("amount must be a positive number")
    try:
        date.fromisoformat(body.date[:10])
    except ValueError:
        raise InvalidInput(f"bad date: {body.date!r}")
    fields = {
        "date": body.date,
        "description": body.description.strip(),
        "category": body.category.strip(),
        "amount": body.amount,
        "staff_id": body.staff_id or None,
        "user_id": actor,
    }
    doc_id = await store.create(EXPENSES, fields)
    await audit(store, actor, EXPENSES, doc_id, "CREATE", after=fields)
    return doc_id


async def delete_expense(store: DocumentStore, expense_id: str, actor: str | None = None) -> None:
    before = await store.get(EXPENSES, expense_id)
    if before is None:
        raise NotFound(EXPENSES, expense_id)
    await store.delete(EXPENSES, expense_id)
    await audit(store, actor, EXPENSES, expense_id, "DELETE",
                before={"amount": before.get("amount"), "category": before.get("category")})


async def all_expenses(store: DocumentStore) -> list[Expense]:
    return [Expense.model_validate(d) for d in await store.query(EXPENSES)]


def filter_expenses(expenses: Iterable[Expense], date_from: date | None = None, date_to: date | None = None,
                    payroll: bool | None = None) -> list[Expense]:
    """Live expenses in the date window, newest first. `payroll` picks entries tied to a staff member."""
    out = []
    for e in expenses:
        if e.deleted:
            continue
        if date_from is not None and e.date < date_from.isoformat():
            continue
        if date_to is not None and e.date[:10] > date_to.isoformat():
            continue
        if payroll is not None and bool(e.staff_id) != payroll:
            continue
        out.append(e)
    out.sort(key=lambda e: e.date, reverse=True)
    return out
