from fastapi import APIRouter, Depends
from typing import List

from salon.deps import get_store, require_auth, require_owner
from salon.schemas.catalog import (
    CatalogExtra, CatalogExtraIn, CatalogExtraPatch, CatalogService, CatalogServiceIn,
    CatalogServicePatch, ChemicalProduct, ChemicalProductIn, ChemicalProductPatch,
    Consumable, ConsumableIn, ConsumablePatch, ServiceCostOut,
)
from salon.schemas.common import Created, Ok
from salon.schemas.ledger import ReplenishmentIn, ReplenishmentOut
from salon.schemas.reports import LowStockItem
from salon.services import catalog as svc
from salon.services.costing import _money
from salon.services.inventory import low_stock
from salon.store.base import DocumentStore

router = APIRouter(prefix="/catalog", tags=["catalog"])


# ---------- chemicals ----------

@router.get("/chemicals", response_model=List[ChemicalProduct])
async def list_chemicals(store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return (await svc.load_snapshot(store)).chemicals


@router.post("/chemicals", response_model=Created)
async def add_chemical(body: ChemicalProductIn, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return Created(id=await svc.add_chemical(store, body, sub))


@router.patch("/chemicals/{chemical_id}", response_model=ChemicalProduct)
async def update_chemical(chemical_id: str, body: ChemicalProductPatch,
                          store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return await svc.update_chemical(store, chemical_id, body.model_dump(exclude_unset=True), sub)


@router.delete("/chemicals/{chemical_id}", response_model=Ok)
async def delete_chemical(chemical_id: str, store: DocumentStore = Depends(get_store), sub: str = Depends(require_owner)):
    await svc.delete_chemical(store, chemical_id, sub)
    return Ok()


# ---------- consumables ----------

@router.get("/consumables", response_model=List[Consumable])
async def list_consumables(store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return (await svc.load_snapshot(store)).consumables


@router.post("/consumables", response_model=Created)
async def add_consumable(body: ConsumableIn, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return Created(id=await svc.add_consumable(store, body, sub))


@router.patch("/consumables/{consumable_id}", response_model=Consumable)
async def update_consumable(consumable_id: str, body: ConsumablePatch,
                            store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return await svc.update_consumable(store, consumable_id, body.model_dump(exclude_unset=True), sub)


@router.delete("/consumables/{consumable_id}", response_model=Ok)
async def delete_consumable(consumable_id: str, store: DocumentStore = Depends(get_store), sub: str = Depends(require_owner)):
    await svc.delete_consumable(store, consumable_id, sub)
    return Ok()


@router.get("/low_stock", response_model=List[LowStockItem])
async def list_low_stock(store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    snap = await svc.load_snapshot(store)
    return low_stock(snap.consumables, snap.chemicals)


# ---------- services ----------

@router.get("/services", response_model=List[CatalogService])
async def list_services(store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return (await svc.load_snapshot(store)).services


@router.post("/services", response_model=Created)
async def add_service(body: CatalogServiceIn, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return Created(id=await svc.add_service(store, body, sub))


@router.patch("/services/{service_id}", response_model=CatalogService)
async def update_service(service_id: str, body: CatalogServicePatch,
                         store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return await svc.update_service(store, service_id, body.model_dump(exclude_unset=True), sub)


@router.delete("/services/{service_id}", response_model=Ok)
async def delete_service(service_id: str, store: DocumentStore = Depends(get_store), sub: str = Depends(require_owner)):
    await svc.delete_service(store, service_id, sub)
    return Ok()


@router.get("/services/{service_id}/cost", response_model=ServiceCostOut)
async def service_cost(service_id: str, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    """
    Material cost of one unit of the service, with the recipe it was computed from.
    The editor uses the same recipe to pre-populate its controls.
    """
    service = await svc.get_service(store, service_id)
    snap = await svc.load_snapshot(store)
    recipe = snap.resolve(service)
    cost = snap.service_cost(service).as_dict()
    return ServiceCostOut(
        service_id=service.id,
        materials_source=recipe.materials_source,
        consumables_source=recipe.consumables_source,
        manual_materials=recipe.materials,
        manual_consumables=recipe.consumables,
        **cost,
    )


@router.post("/replenishment", response_model=ReplenishmentOut)
async def replenishment(body: ReplenishmentIn, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    snap = await svc.load_snapshot(store)
    return ReplenishmentOut(reposicion=_money(snap.replenishment_cost(body.services)))


# ---------- extras ----------

@router.get("/extras", response_model=List[CatalogExtra])
async def list_extras(store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return await svc.list_extras(store)


@router.post("/extras", response_model=Created)
async def add_extra(body: CatalogExtraIn, store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return Created(id=await svc.add_extra(store, body, sub))


@router.patch("/extras/{extra_id}", response_model=CatalogExtra)
async def update_extra(extra_id: str, body: CatalogExtraPatch,
                       store: DocumentStore = Depends(get_store), sub: str = Depends(require_auth)):
    return await svc.update_extra(store, extra_id, body.model_dump(exclude_unset=True), sub)


@router.delete("/extras/{extra_id}", response_model=Ok)
async def delete_extra(extra_id: str, store: DocumentStore = Depends(get_store), sub: str = Depends(require_owner)):
    await svc.delete_extra(store, extra_id, sub)
    return Ok()
