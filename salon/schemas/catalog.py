from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Literal, List

CategoryLiteral = Literal["manicura", "pedicura"]
UnitLiteral = Literal["ml", "kg", "L", "g", "unid"]


class _Record(BaseModel):
    # documents carry bookkeeping keys (timestamp, tenant, created_at...) we don't model
    model_config = ConfigDict(extra="ignore")


# ── Recipe lines ────────────────────────────────────────────────────────────
class MaterialLine(_Record):
    material_id: str
    qty: Optional[float] = None  # missing quantity costs nothing

    @classmethod
    def coerce(cls, v):
        # legacy documents store bare chemical ids
        if isinstance(v, str):
            return {"material_id": v, "qty": 1}
        if isinstance(v, dict) and "material_id" not in v and "id" in v:
            return {"material_id": v["id"], "qty": v.get("qty", v.get("quantity", 1))}
        return v


class ConsumableLine(_Record):
    consumable_id: str
    qty: Optional[float] = None


# ── Leaf items ──────────────────────────────────────────────────────────────
class ChemicalProduct(_Record):
    id: str
    name: str
    quantity: float = 0  # package content
    unit: str = "ml"
    purchase_price: float = 0
    cost_per_unit: float = 0
    stock: float = 0
    min_stock: float = 0
    active: bool = True


class Consumable(_Record):
    id: str
    name: str
    unit: str = "unidad"
    purchase_price: Optional[float] = None
    package_size: Optional[float] = None
    unit_cost: Optional[float] = None  # pre-migration value
    stock_qty: float = 0
    min_stock_alert: float = 0
    active: bool = True


# ── Services, extras, legacy recipes ────────────────────────────────────────
class CatalogService(_Record):
    id: str
    name: str
    category: CategoryLiteral = "manicura"
    base_price: float = 0
    active: bool = True
    # None means "never set": only then are legacy recipes consulted
    manual_materials: Optional[List[MaterialLine]] = None
    manual_consumables: Optional[List[ConsumableLine]] = None

    @field_validator("manual_materials", mode="before")
    @classmethod
    def _legacy_material_ids(cls, v):
        if v is None:
            return None
        return [MaterialLine.coerce(x) for x in v]


class CatalogExtra(_Record):
    id: str
    name: str
    price: float = 0
    price_suggested: float = 0
    applies_to_categories: List[str] = Field(default_factory=list)
    active: bool = True


class MaterialRecipe(_Record):
    id: str
    service_id: str = ""
    service_name: str = ""
    chemical_ids: List[str] = Field(default_factory=list)
    category: Optional[CategoryLiteral] = None
    active: bool = True


class ServiceRecipe(_Record):
    id: str
    service_id: str = ""
    items: List[ConsumableLine] = Field(default_factory=list)


# ── Write payloads ──────────────────────────────────────────────────────────
class ChemicalProductIn(BaseModel):
    name: str
    quantity: float
    unit: UnitLiteral = "ml"
    purchase_price: float
    stock: float = 0
    min_stock: float = 0


class ChemicalProductPatch(BaseModel):
    name: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[UnitLiteral] = None
    purchase_price: Optional[float] = None
    stock: Optional[float] = None
    min_stock: Optional[float] = None
    active: Optional[bool] = None


class ConsumableIn(BaseModel):
    name: str
    unit: str
    purchase_price: float = 0
    package_size: Optional[float] = None
    stock_qty: float = 0
    min_stock_alert: float = 0


class ConsumablePatch(BaseModel):
    name: Optional[str] = None
    unit: Optional[str] = None
    purchase_price: Optional[float] = None
    package_size: Optional[float] = None
    stock_qty: Optional[float] = None
    min_stock_alert: Optional[float] = None
    active: Optional[bool] = None


class CatalogServiceIn(BaseModel):
    name: str
    category: CategoryLiteral = "manicura"
    base_price: float


class CatalogServicePatch(BaseModel):
    name: Optional[str] = None
    category: Optional[CategoryLiteral] = None
    base_price: Optional[float] = None
    active: Optional[bool] = None
    manual_materials: Optional[List[MaterialLine]] = None
    manual_consumables: Optional[List[ConsumableLine]] = None


class CatalogExtraIn(BaseModel):
    name: str
    price: float
    applies_to_categories: List[CategoryLiteral] = Field(default_factory=lambda: ["manicura", "pedicura"])


class CatalogExtraPatch(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    price_suggested: Optional[float] = None
    applies_to_categories: Optional[List[CategoryLiteral]] = None
    active: Optional[bool] = None


# ── Cost output ─────────────────────────────────────────────────────────────
class ServiceCostOut(BaseModel):
    service_id: str
    chemicals_cost: float
    consumables_cost: float
    total_cost: float
    materials_source: Literal["manual", "legacy"]
    consumables_source: Literal["manual", "legacy"]
    manual_materials: List[MaterialLine]
    manual_consumables: List[ConsumableLine]
    missing: List[str] = Field(default_factory=list)
