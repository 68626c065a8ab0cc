from datetime import date, datetime
from fastapi import APIRouter, Depends, Query
from typing import Optional
from zoneinfo import ZoneInfo

from salon.config import settings
from salon.deps import get_store, require_auth
from salon.models.core import SERVICES
from salon.schemas.ledger import SaleRecord
from salon.schemas.reports import AnalyticsOut, RangeLiteral
from salon.services.analytics import date_range, summarize
from salon.store.base import DocumentStore

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/analytics", response_model=AnalyticsOut)
async def analytics(preset: RangeLiteral = Query("week", alias="range"), date_from: Optional[date] = None, date_to: Optional[date] = None,
                    store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    today = datetime.now(ZoneInfo(settings.TZ)).date()
    start, end = date_range(preset, today, date_from, date_to)
    sales = [SaleRecord.model_validate(d) for d in await store.query(SERVICES)]
    return summarize(sales, start, end)
