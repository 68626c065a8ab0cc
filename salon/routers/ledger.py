from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from salon.config import settings
from salon.deps import get_store, require_auth, require_owner
from salon.models.core import SERVICES
from salon.schemas.common import Ok
from salon.schemas.ledger import HistoryPageOut, SaleCostPatch, SaleRecord
from salon.services import ledger as svc
from salon.services.catalog import load_snapshot
from salon.services.staff import list_staff
from salon.store.base import DocumentStore

router = APIRouter(prefix="/ledger", tags=["ledger"])


@router.get("/recent", response_model=HistoryPageOut)
async def recent(limit: int = Query(settings.HISTORY_PAGE_SIZE, ge=1, le=500),
                 store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return await svc.page(store, None, limit)


@router.get("/history", response_model=HistoryPageOut)
async def history(cursor: Optional[str] = None, limit: int = Query(settings.HISTORY_PAGE_SIZE, ge=1, le=500),
                  store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    """Next page strictly older than ``cursor``. Pass back ``next_cursor`` to keep paging."""
    return await svc.page(store, cursor, limit)


@router.get("", response_model=List[SaleRecord])
async def browse(day: Optional[date] = None, staff_id: List[str] = Query(default=[]), text: str = "",
                 show_deleted: bool = False,
                 store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    sales = [SaleRecord.model_validate(d) for d in await store.query(SERVICES)]
    catalog = (await load_snapshot(store)).services
    staff = await list_staff(store)
    return svc.search(svc.visible(sales, catalog, show_deleted), staff, day, staff_id, text)


@router.put("/{sale_id}/cost", response_model=Ok)
async def update_cost(sale_id: str, body: SaleCostPatch, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    await svc.update_cost(store, sale_id, body.cost, sub)
    return Ok()


@router.post("/{sale_id}/delete", response_model=Ok)
async def soft_delete(sale_id: str, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    await svc.soft_delete(store, sale_id, sub)
    return Ok()


@router.post("/{sale_id}/restore", response_model=Ok)
async def restore(sale_id: str, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    await svc.restore(store, sale_id, sub)
    return Ok()


@router.delete("/{sale_id}", response_model=Ok)
async def permanently_delete(sale_id: str, store: DocumentStore = Depends(get_store), sub: str = Depends(require_owner)):
    await svc.permanently_delete(store, sale_id, sub)
    return Ok()
