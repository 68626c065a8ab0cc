from salon.models.core import CLIENTS
from salon.schemas.clients import Client, ClientIn, VisitIn
from salon.services.costing import _money
from salon.store.base import DocumentStore
from salon.util.audit import audit
from salon.util.errors import InvalidInput, NotFound
from salon.util.validation import reject_nulls


async def list_clients(store: DocumentStore) -> list[Client]:
    return [Client.model_validate(d) for d in await store.query(CLIENTS, "name", descending=False)]


async def add_client(store: DocumentStore, body: ClientIn, actor: str | None = None) -> str:
    name = body.name.strip()
    if not name:
        raise InvalidInput("name is required")
    fields = {**body.model_dump(), "name": name, "total_spent": 0.0, "total_services": 0,
              "first_visit": None, "last_visit": None, "active": True}
    doc_id = await store.create(CLIENTS, fields)
    await audit(store, actor, CLIENTS, doc_id, "CREATE", after={"name": name})
    return doc_id


async def update_client(store: DocumentStore, client_id: str, fields: dict, actor: str | None = None) -> None:
    reject_nulls(fields, nullable=("phone", "preferred_staff_id"))
    if await store.get(CLIENTS, client_id) is None:
        raise NotFound(CLIENTS, client_id)
    if "name" in fields and not (fields["name"] or "").strip():
        raise InvalidInput("name is required")
    await store.update(CLIENTS, client_id, fields)
    await audit(store, actor, CLIENTS, client_id, "UPDATE", after=fields)


async def delete_client(store: DocumentStore, client_id: str, actor: str | None = None) -> None:
    if await store.get(CLIENTS, client_id) is None:
        raise NotFound(CLIENTS, client_id)
    await store.delete(CLIENTS, client_id)
    await audit(store, actor, CLIENTS, client_id, "DELETE")


async def record_visit(store: DocumentStore, visit: VisitIn) -> str:
    """Create the client on first visit, otherwise bump last visit and totals. Matches by exact name."""
    name = visit.client.strip()
    if not name:
        raise InvalidInput("client is required")
    amount = _money(visit.amount)
    for d in await store.query(CLIENTS, "name", descending=False):
        if d.get("name") == name:
            await store.update(CLIENTS, d["id"], {
                "last_visit": visit.date,
                "total_spent": _money(float(d.get("total_spent") or 0) + amount),
                "total_services": int(d.get("total_services") or 0) + 1,
            })
            return d["id"]
    return await store.create(CLIENTS, {
        "name": name, "phone": "", "first_visit": visit.date, "last_visit": visit.date,
        "total_spent": amount, "total_services": 1, "active": True,
    })
