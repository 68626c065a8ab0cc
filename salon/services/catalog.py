from salon.models.core import (
    CATALOG_EXTRAS, CATALOG_SERVICES, CHEMICAL_PRODUCTS, CONSUMABLES,
    MATERIAL_RECIPES, SERVICE_RECIPES,
)
from salon.schemas.catalog import (
    CatalogExtra, CatalogExtraIn, CatalogService, CatalogServiceIn, ChemicalProduct,
    ChemicalProductIn, Consumable, ConsumableIn, MaterialRecipe, ServiceRecipe,
)
from salon.services.costing import CatalogSnapshot, cost_per_unit
from salon.store.base import DocumentStore
from salon.util.audit import audit
from salon.util.errors import InvalidInput, NotFound
from salon.util.validation import non_negative, reject_nulls


async def load_snapshot(store: DocumentStore) -> CatalogSnapshot:
    return CatalogSnapshot(
        services=[CatalogService.model_validate(d) for d in await store.query(CATALOG_SERVICES, "name", descending=False)],
        chemicals=[ChemicalProduct.model_validate(d) for d in await store.query(CHEMICAL_PRODUCTS, "name", descending=False)],
        consumables=[Consumable.model_validate(d) for d in await store.query(CONSUMABLES, "name", descending=False)],
        material_recipes=[MaterialRecipe.model_validate(d) for d in await store.query(MATERIAL_RECIPES)],
        service_recipes=[ServiceRecipe.model_validate(d) for d in await store.query(SERVICE_RECIPES)],
    )


async def _require(store: DocumentStore, collection: str, doc_id: str) -> dict:
    doc = await store.get(collection, doc_id)
    if doc is None:
        raise NotFound(collection, doc_id)
    return doc


async def _patch(store: DocumentStore, collection: str, doc_id: str, fields: dict, actor: str | None) -> dict:
    before = await _require(store, collection, doc_id)
    await store.update(collection, doc_id, fields)
    await audit(store, actor, collection, doc_id, "UPDATE",
                before={k: before.get(k) for k in fields}, after=fields)
    return {**before, **fields}


async def _remove(store: DocumentStore, collection: str, doc_id: str, actor: str | None) -> None:
    before = await _require(store, collection, doc_id)
    await store.delete(collection, doc_id)
    await audit(store, actor, collection, doc_id, "DELETE", before={"name": before.get("name")})


# ── Chemical products ───────────────────────────────────────────────────────

async def add_chemical(store: DocumentStore, body: ChemicalProductIn, actor: str | None = None) -> str:
    if not body.name.strip():
        raise InvalidInput("name is required")
    if body.quantity <= 0:
        raise InvalidInput("quantity must be > 0")
    non_negative(body.model_dump(), "purchase_price", "stock", "min_stock")
    fields = body.model_dump()
    fields["name"] = body.name.strip()
    fields["cost_per_unit"] = body.purchase_price / body.quantity
    fields["active"] = True
    doc_id = await store.create(CHEMICAL_PRODUCTS, fields)
    await audit(store, actor, CHEMICAL_PRODUCTS, doc_id, "CREATE", after=fields)
    return doc_id


async def update_chemical(store: DocumentStore, doc_id: str, fields: dict, actor: str | None = None) -> dict:
    reject_nulls(fields)
    non_negative(fields, "quantity", "purchase_price", "stock", "min_stock")
    if "name" in fields and not (fields["name"] or "").strip():
        raise InvalidInput("name is required")
    fields = dict(fields)
    if "purchase_price" in fields or "quantity" in fields:
        current = ChemicalProduct.model_validate(await _require(store, CHEMICAL_PRODUCTS, doc_id))
        merged = current.model_copy(update={k: v for k, v in fields.items() if k in ("purchase_price", "quantity")})
        fields["cost_per_unit"] = cost_per_unit(merged)
    return await _patch(store, CHEMICAL_PRODUCTS, doc_id, fields, actor)


async def delete_chemical(store: DocumentStore, doc_id: str, actor: str | None = None) -> None:
    await _remove(store, CHEMICAL_PRODUCTS, doc_id, actor)


# ── Consumables ─────────────────────────────────────────────────────────────

async def add_consumable(store: DocumentStore, body: ConsumableIn, actor: str | None = None) -> str:
    if not body.name.strip() or not body.unit.strip():
        raise InvalidInput("name and unit are required")
    fields = body.model_dump()
    non_negative(fields, "purchase_price", "package_size", "stock_qty", "min_stock_alert")
    fields["name"] = body.name.strip()
    fields["active"] = True
    doc_id = await store.create(CONSUMABLES, fields)
    await audit(store, actor, CONSUMABLES, doc_id, "CREATE", after=fields)
    return doc_id


async def update_consumable(store: DocumentStore, doc_id: str, fields: dict, actor: str | None = None) -> dict:
    reject_nulls(fields, nullable=("purchase_price", "package_size"))
    non_negative(fields, "purchase_price", "package_size", "stock_qty", "min_stock_alert")
    if "name" in fields and not (fields["name"] or "").strip():
        raise InvalidInput("name is required")
    return await _patch(store, CONSUMABLES, doc_id, fields, actor)


async def delete_consumable(store: DocumentStore, doc_id: str, actor: str | None = None) -> None:
    await _remove(store, CONSUMABLES, doc_id, actor)


# ── Catalog services ────────────────────────────────────────────────────────

async def add_service(store: DocumentStore, body: CatalogServiceIn, actor: str | None = None) -> str:
    if not body.name.strip() or body.base_price <= 0:
        raise InvalidInput("name is required and base_price must be > 0")
    fields = {
        "name": body.name.strip(),
        "category": body.category,
        "base_price": body.base_price,
        "active": True,
        "manual_materials": [],
        "manual_consumables": [],
    }
    doc_id = await store.create(CATALOG_SERVICES, fields)
    await audit(store, actor, CATALOG_SERVICES, doc_id, "CREATE", after=fields)
    return doc_id


async def update_service(store: DocumentStore, doc_id: str, fields: dict, actor: str | None = None) -> dict:
    # null recipe lists hand the service back to its legacy recipes
    reject_nulls(fields, nullable=("manual_materials", "manual_consumables"))
    if "name" in fields and not (fields["name"] or "").strip():
        raise InvalidInput("name is required")
    if fields.get("base_price") is not None and fields["base_price"] <= 0:
        raise InvalidInput("base_price must be > 0")
    for line in fields.get("manual_materials") or []:
        if (line.get("qty") or 0) < 0:
            raise InvalidInput("material qty must be >= 0")
    for line in fields.get("manual_consumables") or []:
        if (line.get("qty") or 0) < 1:
            raise InvalidInput("consumable qty must be >= 1")
    return await _patch(store, CATALOG_SERVICES, doc_id, fields, actor)


async def delete_service(store: DocumentStore, doc_id: str, actor: str | None = None) -> None:
    await _remove(store, CATALOG_SERVICES, doc_id, actor)


async def get_service(store: DocumentStore, doc_id: str) -> CatalogService:
    return CatalogService.model_validate(await _require(store, CATALOG_SERVICES, doc_id))


# ── Extras ──────────────────────────────────────────────────────────────────

async def add_extra(store: DocumentStore, body: CatalogExtraIn, actor: str | None = None) -> str:
    if not body.name.strip() or body.price < 0:
        raise InvalidInput("name is required and price must be >= 0")
    fields = {
        "name": body.name.strip(),
        "price": body.price,
        "price_suggested": body.price,
        "applies_to_categories": list(body.applies_to_categories),
        "active": True,
    }
    doc_id = await store.create(CATALOG_EXTRAS, fields)
    await audit(store, actor, CATALOG_EXTRAS, doc_id, "CREATE", after=fields)
    return doc_id


async def update_extra(store: DocumentStore, doc_id: str, fields: dict, actor: str | None = None) -> dict:
    reject_nulls(fields)
    non_negative(fields, "price", "price_suggested")
    if "name" in fields and not (fields["name"] or "").strip():
        raise InvalidInput("name is required")
    return await _patch(store, CATALOG_EXTRAS, doc_id, fields, actor)


async def delete_extra(store: DocumentStore, doc_id: str, actor: str | None = None) -> None:
    await _remove(store, CATALOG_EXTRAS, doc_id, actor)


async def list_extras(store: DocumentStore) -> list[CatalogExtra]:
    return [CatalogExtra.model_validate(d) for d in await store.query(CATALOG_EXTRAS, "name", descending=False)]
