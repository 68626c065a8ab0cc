import logging
from datetime import datetime, timezone

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from salon.models.core import Document
from salon.models.common import utcnow
from salon.store.base import Cursor, Doc, DocumentStore, TIMESTAMP, parse_ts
from salon.util.errors import NotFound

log = logging.getLogger(__name__)


def _aware(dt: datetime) -> datetime:
    # sqlite hands back naive datetimes; everything is stored in UTC
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


def _to_doc(row: Document) -> Doc:
    out = dict(row.body or {})
    out["id"] = row.id
    out[TIMESTAMP] = _aware(row.sort_ts).isoformat()
    return out


def _sort_value(doc: Doc, key: str):
    v = doc.get(key)
    if isinstance(v, str):
        return (0, v.lower())
    if v is None:
        return (1, "")
    return (0, v)


class SqlDocumentStore(DocumentStore):
    """Document store over the ``document`` table, scoped to one tenant."""

    def __init__(self, session_factory: sessionmaker, tenant_id: str):
        super().__init__()
        self.session_factory = session_factory
        self.tenant_id = tenant_id

    def _base(self, db: Session, collection: str):
        return db.query(Document).filter(Document.tenant_id == self.tenant_id,
                                         Document.collection == collection)

    # ── reads ──
    def _get_sync(self, collection: str, doc_id: str) -> Doc | None:
        with self.session_factory() as db:
            row = self._base(db, collection).filter(Document.id == doc_id).first()
            return _to_doc(row) if row else None

    async def get(self, collection, doc_id):
        return await run_in_threadpool(self._get_sync, collection, doc_id)

    def _query_sync(self, collection: str, order_key: str, limit: int | None, descending: bool) -> list[Doc]:
        with self.session_factory() as db:
            q = self._base(db, collection)
            if order_key == TIMESTAMP:
                if descending:
                    q = q.order_by(Document.sort_ts.desc(), Document.id.desc())
                else:
                    q = q.order_by(Document.sort_ts.asc(), Document.id.asc())
                if limit:
                    q = q.limit(limit)
                return [_to_doc(r) for r in q.all()]
            # body keys have no column; sort in memory
            docs = [_to_doc(r) for r in q.all()]
            docs.sort(key=lambda d: _sort_value(d, order_key), reverse=descending)
            return docs[:limit] if limit else docs

    async def query(self, collection, order_key=TIMESTAMP, limit=None, descending=True):
        return await run_in_threadpool(self._query_sync, collection, order_key, limit, descending)

    def _fetch_page_sync(self, collection: str, cursor: Cursor | None, limit: int) -> list[Doc]:
        with self.session_factory() as db:
            q = self._base(db, collection)
            if cursor is not None:
                q = q.filter(or_(
                    Document.sort_ts < cursor.timestamp,
                    and_(Document.sort_ts == cursor.timestamp, Document.id < cursor.id),
                ))
            q = q.order_by(Document.sort_ts.desc(), Document.id.desc()).limit(limit)
            return [_to_doc(r) for r in q.all()]

    async def fetch_page(self, collection, order_key, cursor, limit):
        if order_key != TIMESTAMP:
            raise ValueError(f"pages are only ordered by {TIMESTAMP!r}, got {order_key!r}")
        return await run_in_threadpool(self._fetch_page_sync, collection, cursor, limit)

    # ── writes ──
    def _create_sync(self, collection: str, fields: Doc) -> str:
        body = {k: v for k, v in fields.items() if k not in ("id", TIMESTAMP)}
        ts = parse_ts(fields[TIMESTAMP]) if fields.get(TIMESTAMP) else utcnow()
        with self.session_factory() as db:
            row = Document(collection=collection, tenant_id=self.tenant_id, sort_ts=ts, body=body)
            if fields.get("id"):
                row.id = fields["id"]
            db.add(row); db.commit(); db.refresh(row)
            log.debug("created %s/%s", collection, row.id)
            return row.id

    async def _create(self, collection, fields):
        return await run_in_threadpool(self._create_sync, collection, fields)

    def _update_sync(self, collection: str, doc_id: str, fields: Doc) -> None:
        with self.session_factory() as db:
            row = self._base(db, collection).filter(Document.id == doc_id).first()
            if not row:
                raise NotFound(collection, doc_id)
            body = dict(row.body or {})
            for k, v in fields.items():
                if k == "id":
                    continue
                if k == TIMESTAMP:
                    row.sort_ts = parse_ts(v)
                    continue
                body[k] = v
            row.body = body  # reassign so the JSON column is flagged dirty
            row.version = (row.version or 0) + 1
            db.commit()

    async def _update(self, collection, doc_id, fields):
        await run_in_threadpool(self._update_sync, collection, doc_id, fields)

    def _delete_sync(self, collection: str, doc_id: str) -> None:
        with self.session_factory() as db:
            n = self._base(db, collection).filter(Document.id == doc_id).delete()
            if not n:
                raise NotFound(collection, doc_id)
            db.commit()

    async def _delete(self, collection, doc_id):
        await run_in_threadpool(self._delete_sync, collection, doc_id)
