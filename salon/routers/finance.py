from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import List, Literal, Optional

from salon.deps import get_store, require_auth, require_owner
from salon.models.core import SERVICES
from salon.schemas.common import Created, Ok
from salon.schemas.finance import BalanceOut, Expense, ExpenseIn
from salon.schemas.ledger import SaleRecord
from salon.services import expenses as svc
from salon.services.analytics import balance
from salon.store.base import DocumentStore

router = APIRouter(prefix="/finance", tags=["finance"])


@router.get("/expenses", response_model=List[Expense])
async def list_expenses(date_from: Optional[date] = None, date_to: Optional[date] = None,
                        kind: Optional[Literal["general", "payroll"]] = Query(None),
                        store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    payroll = None if kind is None else kind == "payroll"
    return svc.filter_expenses(await svc.all_expenses(store), date_from, date_to, payroll)


@router.post("/expenses", response_model=Created)
async def add_expense(body: ExpenseIn, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return Created(id=await svc.add_expense(store, body, sub))


@router.delete("/expenses/{expense_id}", response_model=Ok)
async def delete_expense(expense_id: str, store: DocumentStore = Depends(get_store), sub: str = Depends(require_owner)):
    await svc.delete_expense(store, expense_id, sub)
    return Ok()


@router.get("/balance", response_model=BalanceOut)
async def get_balance(store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    sales = [SaleRecord.model_validate(d) for d in await store.query(SERVICES)]
    return balance(sales, await svc.all_expenses(store))
