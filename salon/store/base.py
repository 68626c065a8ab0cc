from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

Doc = dict[str, Any]
SnapshotCallback = Callable[[list[Doc]], None]

TIMESTAMP = "timestamp"


def parse_ts(value) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class Cursor:
    """Position of the last record already fetched, in (timestamp desc, id desc) order."""
    timestamp: datetime
    id: str

    @classmethod
    def from_doc(cls, doc: Doc) -> "Cursor":
        return cls(timestamp=parse_ts(doc[TIMESTAMP]), id=doc["id"])

    def encode(self) -> str:
        return f"{self.timestamp.isoformat()}|{self.id}"

    @classmethod
    def decode(cls, token: str) -> "Cursor":
        ts, _, doc_id = token.rpartition("|")
        if not ts or not doc_id:
            raise ValueError(f"bad cursor: {token!r}")
        return cls(timestamp=parse_ts(ts), id=doc_id)

    def is_after(self, doc: Doc) -> bool:
        """True when `doc` sorts strictly after (older than) this cursor."""
        ts = parse_ts(doc[TIMESTAMP])
        return ts < self.timestamp or (ts == self.timestamp and doc["id"] < self.id)


class Subscription:
    def __init__(self, store: "DocumentStore", collection: str, order_key: str,
                 limit: int | None, callback: SnapshotCallback, descending: bool):
        self.store = store
        self.collection = collection
        self.order_key = order_key
        self.limit = limit
        self.callback = callback
        self.descending = descending
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self.store._detach(self)


class DocumentStore(ABC):
    """Collection-oriented store. Every record is returned as a dict with an ``id`` key
    and a ``timestamp`` (assigned by the store when the writer does not supply one)."""

    def __init__(self):
        self._subs: dict[str, list[Subscription]] = {}

    # ── reads ──
    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Doc | None: ...

    @abstractmethod
    async def query(self, collection: str, order_key: str = TIMESTAMP,
                    limit: int | None = None, descending: bool = True) -> list[Doc]: ...

    @abstractmethod
    async def fetch_page(self, collection: str, order_key: str, cursor: Cursor | None,
                         limit: int) -> list[Doc]:
        """One-shot page of records strictly after `cursor` (newest first)."""

    # ── writes ──
    @abstractmethod
    async def _create(self, collection: str, fields: Doc) -> str: ...

    @abstractmethod
    async def _update(self, collection: str, doc_id: str, fields: Doc) -> None: ...

    @abstractmethod
    async def _delete(self, collection: str, doc_id: str) -> None: ...

    async def create(self, collection: str, fields: Doc) -> str:
        doc_id = await self._create(collection, fields)
        await self._publish(collection)
        return doc_id

    async def update(self, collection: str, doc_id: str, fields: Doc) -> None:
        await self._update(collection, doc_id, fields)
        await self._publish(collection)

    async def delete(self, collection: str, doc_id: str) -> None:
        await self._delete(collection, doc_id)
        await self._publish(collection)

    # ── live queries ──
    async def subscribe(self, collection: str, order_key: str, limit: int | None,
                        callback: SnapshotCallback, descending: bool = True) -> Subscription:
        """Register `callback` for full snapshots of the query. The first snapshot is
        delivered before this returns; later ones follow every write to the collection."""
        sub = Subscription(self, collection, order_key, limit, callback, descending)
        self._subs.setdefault(collection, []).append(sub)
        await self._deliver(sub)
        return sub

    def _detach(self, sub: Subscription) -> None:
        subs = self._subs.get(sub.collection, [])
        if sub in subs:
            subs.remove(sub)

    async def _publish(self, collection: str) -> None:
        for sub in list(self._subs.get(collection, [])):
            await self._deliver(sub)

    async def _deliver(self, sub: Subscription) -> None:
        docs = await self.query(sub.collection, sub.order_key, sub.limit, sub.descending)
        if sub.active:
            sub.callback(docs)
