from fastapi import APIRouter, Depends
from typing import List

from salon.deps import get_store, require_auth, require_owner
from salon.schemas.clients import Client, ClientIn, ClientPatch, VisitIn
from salon.schemas.common import Created, Ok
from salon.services import clients as svc
from salon.store.base import DocumentStore

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("", response_model=List[Client])
async def list_clients(store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return await svc.list_clients(store)


@router.post("", response_model=Created)
async def add_client(body: ClientIn, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return Created(id=await svc.add_client(store, body, sub))


@router.patch("/{client_id}", response_model=Ok)
async def update_client(client_id: str, body: ClientPatch, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    await svc.update_client(store, client_id, body.model_dump(exclude_unset=True), sub)
    return Ok()


@router.delete("/{client_id}", response_model=Ok)
async def delete_client(client_id: str, store: DocumentStore = Depends(get_store), sub: str = Depends(require_owner)):
    await svc.delete_client(store, client_id, sub)
    return Ok()


@router.post("/visits", response_model=Created)
async def record_visit(body: VisitIn, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return Created(id=await svc.record_visit(store, body))
