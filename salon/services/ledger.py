import math
from datetime import date as date_type
from typing import Iterable

from salon.models.common import utcnow
from salon.models.core import SERVICES
from salon.schemas.catalog import CatalogService
from salon.schemas.ledger import HistoryPageOut, SaleRecord
from salon.schemas.staff import StaffMember
from salon.store.base import TIMESTAMP, Cursor, DocumentStore, parse_ts
from salon.util.audit import audit
from salon.util.errors import InvalidInput, NotFound


async def _require_sale(store: DocumentStore, sale_id: str) -> dict:
    doc = await store.get(SERVICES, sale_id)
    if doc is None:
        raise NotFound(SERVICES, sale_id)
    return doc


# ── Paging (stateless HTTP counterpart of LedgerView) ───────────────────────

async def page(store: DocumentStore, cursor: str | None, limit: int) -> HistoryPageOut:
    try:
        after = Cursor.decode(cursor) if cursor else None
    except ValueError as e:
        raise InvalidInput(str(e))
    docs = await store.fetch_page(SERVICES, TIMESTAMP, after, limit)
    next_cursor = Cursor.from_doc(docs[-1]).encode() if docs else cursor
    return HistoryPageOut(
        items=[SaleRecord.model_validate(d) for d in docs],
        next_cursor=next_cursor,
        exhausted=len(docs) < limit,
    )


# ── Administrative corrections ──────────────────────────────────────────────

async def update_cost(store: DocumentStore, sale_id: str, cost: float, actor: str | None = None) -> None:
    if cost is None or not math.isfinite(cost) or cost <= 0:
        raise InvalidInput("cost must be a positive number")
    before = await _require_sale(store, sale_id)
    await store.update(SERVICES, sale_id, {"cost": cost})
    await audit(store, actor, SERVICES, sale_id, "COST", before={"cost": before.get("cost")}, after={"cost": cost})


async def soft_delete(store: DocumentStore, sale_id: str, actor: str | None = None) -> None:
    await _require_sale(store, sale_id)
    await store.update(SERVICES, sale_id, {"deleted": True, "deleted_at": utcnow().isoformat(), "deleted_by": actor})
    await audit(store, actor, SERVICES, sale_id, "SOFT_DELETE")


async def restore(store: DocumentStore, sale_id: str, actor: str | None = None) -> None:
    await _require_sale(store, sale_id)
    await store.update(SERVICES, sale_id, {"deleted": False, "deleted_at": None, "deleted_by": None})
    await audit(store, actor, SERVICES, sale_id, "RESTORE")


async def permanently_delete(store: DocumentStore, sale_id: str, actor: str | None = None) -> None:
    await _require_sale(store, sale_id)
    await store.delete(SERVICES, sale_id)
    await audit(store, actor, SERVICES, sale_id, "DELETE")


# ── Browsing filters ────────────────────────────────────────────────────────

def visible(sales: Iterable[SaleRecord], catalog: Iterable[CatalogService], show_deleted: bool = False) -> list[SaleRecord]:
    """Deleted-only when `show_deleted`, otherwise live sales whose services are all still active."""
    active = [cs for cs in catalog if cs.active]
    active_ids = {cs.id for cs in active}
    active_names = {cs.name for cs in active}
    out = []
    for s in sales:
        if bool(s.deleted) != show_deleted:
            continue
        if not show_deleted:
            if s.services:
                if not all(line.service_id in active_ids for line in s.services):
                    continue
            elif s.service and s.service not in active_names:
                continue
        out.append(s)
    return out


def sale_day(s: SaleRecord) -> str:
    if s.timestamp:
        return parse_ts(s.timestamp).date().isoformat()
    return s.date


def search(sales: Iterable[SaleRecord], staff: Iterable[StaffMember] = (), day: date_type | None = None,
           staff_ids: Iterable[str] = (), text: str = "") -> list[SaleRecord]:
    names = {u.id: u.name.lower() for u in staff}
    wanted_ids = set(staff_ids)
    needle = text.lower().strip().replace("@", "")
    out = []
    for s in sales:
        if day is not None and sale_day(s) != day.isoformat():
            continue
        if wanted_ids and s.user_id not in wanted_ids:
            continue
        if needle:
            service_names = s.service or ", ".join(line.service_name for line in s.services or [])
            haystack = (service_names.lower(), s.client.lower().replace("@", ""), names.get(s.user_id, ""))
            if not any(needle in h for h in haystack):
                continue
        out.append(s)
    out.sort(key=lambda s: parse_ts(s.timestamp) if s.timestamp else parse_ts(s.date), reverse=True)
    return out
