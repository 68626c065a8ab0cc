"""Incremental loading of the sales ledger.

The newest ``page_size`` records are kept current by a live subscription; older
records are pulled on demand, one page at a time, strictly after a cursor. The
cursor follows the tail of the live window until the first history fetch and is
frozen from then on, so pages never overlap and never skip records.
"""
import asyncio
import logging
from enum import Enum

from salon.models.core import SERVICES
from salon.store.base import TIMESTAMP, Cursor, Doc, DocumentStore, Subscription
from salon.util.errors import HistoryFetchError

log = logging.getLogger(__name__)


def _order_key(doc: Doc):
    return Cursor.from_doc(doc).timestamp, doc["id"]


class LoaderState(Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    EXHAUSTED = "EXHAUSTED"


class HistoryLoader:
    def __init__(self, store: DocumentStore, collection: str = SERVICES, page_size: int = 50):
        self.store = store
        self.collection = collection
        self.page_size = page_size
        self.state = LoaderState.IDLE
        self.cursor: Cursor | None = None
        self.frozen = False
        self.items: list[Doc] = []
        self._ids: set[str] = set()

    def anchor(self, cursor: Cursor | None) -> bool:
        """Move the starting cursor. Ignored once history loading has begun."""
        if self.frozen:
            return False
        self.cursor = cursor
        return True

    async def load_more(self) -> list[Doc]:
        if self.state is not LoaderState.IDLE:
            return []
        self.state = LoaderState.LOADING
        self.frozen = True
        try:
            page = await self.store.fetch_page(self.collection, TIMESTAMP, self.cursor, self.page_size)
        except asyncio.CancelledError:
            self.state = LoaderState.IDLE
            raise
        except Exception as e:
            self.state = LoaderState.IDLE
            log.warning("history page after %s failed: %s", self.cursor, e)
            raise HistoryFetchError(str(e)) from e

        fresh = [d for d in page if d["id"] not in self._ids]
        self.items.extend(fresh)
        self._ids.update(d["id"] for d in fresh)
        if page:
            self.cursor = Cursor.from_doc(page[-1])
        self.state = LoaderState.EXHAUSTED if len(page) < self.page_size else LoaderState.IDLE
        log.debug("history page: %d records, state=%s", len(page), self.state.value)
        return fresh

    @property
    def exhausted(self) -> bool:
        return self.state is LoaderState.EXHAUSTED

    @property
    def loading(self) -> bool:
        return self.state is LoaderState.LOADING


class LedgerView:
    """Live window plus history tail, exposed as one newest-first list."""

    def __init__(self, store: DocumentStore, collection: str = SERVICES, page_size: int = 50):
        self.store = store
        self.collection = collection
        self.page_size = page_size
        self.live: list[Doc] = []
        self.history = HistoryLoader(store, collection, page_size)
        # records pushed out of the live window after the cursor froze
        self.rolled_off: list[Doc] = []
        self._sub: Subscription | None = None

    async def start(self) -> "LedgerView":
        if self._sub is None:
            self._sub = await self.store.subscribe(self.collection, TIMESTAMP, self.page_size, self._on_snapshot)
        return self

    def close(self) -> None:
        if self._sub is not None:
            self._sub.unsubscribe()
            self._sub = None

    def _on_snapshot(self, docs: list[Doc]) -> None:
        previous, self.live = self.live, list(docs)
        if not self.history.frozen:
            self.history.anchor(Cursor.from_doc(docs[-1]) if docs else None)
            return
        if not docs:
            return
        tail = Cursor.from_doc(docs[-1])
        current = {d["id"] for d in docs}
        # a rolled-off record the window reaches again is either back in it or deleted
        self.rolled_off = [d for d in self.rolled_off if tail.is_after(d)]
        if len(docs) < self.page_size:
            return
        # a full window whose tail moved up: whatever fell below it is kept, deletions are not
        kept = {d["id"] for d in self.rolled_off}
        for d in previous:
            if d["id"] not in current and d["id"] not in kept and tail.is_after(d):
                self.rolled_off.append(d)
        self.rolled_off.sort(key=_order_key, reverse=True)

    async def load_more(self) -> list[Doc]:
        return await self.history.load_more()

    @property
    def state(self) -> LoaderState:
        return self.history.state

    @property
    def records(self) -> list[Doc]:
        seen = set()
        out = []
        for d in [*self.live, *self.rolled_off, *self.history.items]:
            if d["id"] in seen:
                continue
            seen.add(d["id"])
            out.append(d)
        # deletes can pull older records into the live window
        out.sort(key=_order_key, reverse=True)
        return out
