from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import List

from salon.deps import get_store, require_auth, require_owner
from salon.models.core import SERVICES, USERS
from salon.schemas.common import Created, Ok
from salon.schemas.ledger import SaleRecord
from salon.schemas.reports import CommissionOut
from salon.schemas.staff import CommissionPatch, StaffIn, StaffMember, StaffPatch
from salon.services import staff as svc
from salon.services.analytics import in_range
from salon.services.expenses import all_expenses, filter_expenses
from salon.store.base import DocumentStore
from salon.util.errors import NotFound

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get("", response_model=List[StaffMember])
async def list_staff(store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return await svc.list_staff(store)


@router.post("", response_model=Created)
async def create_staff(body: StaffIn, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return Created(id=await svc.create_staff(store, body, sub))


@router.patch("/{user_id}", response_model=Ok)
async def update_staff(user_id: str, body: StaffPatch, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    await svc.update_staff(store, user_id, body.model_dump(exclude_unset=True), sub)
    return Ok()


@router.put("/{user_id}/commission", response_model=Ok)
async def update_commission(user_id: str, body: CommissionPatch,
                            store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    await svc.update_commission(store, user_id, body.commission_pct, sub)
    return Ok()


@router.post("/{user_id}/deactivate", response_model=Ok)
async def deactivate_staff(user_id: str, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    await svc.deactivate_staff(store, user_id, sub)
    return Ok()


@router.delete("/{user_id}", response_model=Ok)
async def delete_staff(user_id: str, store: DocumentStore = Depends(get_store), sub: str = Depends(require_owner)):
    await svc.delete_staff(store, user_id, sub)
    return Ok()


@router.get("/{user_id}/commission", response_model=CommissionOut)
async def commission_report(user_id: str, date_from: date = Query(...), date_to: date = Query(...),
                            store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    staff = await svc.list_staff(store)
    member = next((u for u in staff if u.id == user_id), None)
    if member is None:
        raise NotFound(USERS, user_id)
    sales = [SaleRecord.model_validate(d) for d in await store.query(SERVICES)]
    expenses = filter_expenses(await all_expenses(store), date_from, date_to, payroll=True)
    return svc.earnings(member, in_range(sales, date_from, date_to), expenses, staff)
