import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping

from salon.schemas.catalog import (
    CatalogService, ChemicalProduct, Consumable, MaterialRecipe, ServiceRecipe,
)
from salon.schemas.ledger import ServiceLine
from salon.services.recipes import ResolvedRecipe, resolve_recipe

log = logging.getLogger(__name__)


def _money(x) -> float:
    return float(Decimal(str(x)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def cost_per_unit(product: ChemicalProduct) -> float:
    quantity = float(product.quantity or 0)
    if quantity <= 0:
        return 0.0
    return float(product.purchase_price or 0) / quantity


def unit_cost(consumable: Consumable) -> float:
    price, size = consumable.purchase_price, consumable.package_size
    if price is not None and size is not None and size > 0:
        return float(price) / float(size)
    return float(consumable.unit_cost or 0)


@dataclass(frozen=True)
class CostBreakdown:
    chemicals_cost: float = 0.0
    consumables_cost: float = 0.0
    missing: tuple[str, ...] = ()

    @property
    def total_cost(self) -> float:
        return self.chemicals_cost + self.consumables_cost

    def as_dict(self) -> dict:
        return {
            "chemicals_cost": _money(self.chemicals_cost),
            "consumables_cost": _money(self.consumables_cost),
            "total_cost": _money(self.total_cost),
            "missing": list(self.missing),
        }


def _index(items) -> Mapping:
    if isinstance(items, Mapping):
        return items
    return {i.id: i for i in items}


def roll_up(recipe: ResolvedRecipe,
            chemicals: Iterable[ChemicalProduct] | Mapping[str, ChemicalProduct],
            consumables: Iterable[Consumable] | Mapping[str, Consumable]) -> CostBreakdown:
    """Material cost of delivering a service once. Unknown ids cost nothing but are
    reported in ``missing``."""
    chem_by_id = _index(chemicals)
    cons_by_id = _index(consumables)
    missing = []

    chemicals_cost = 0.0
    for line in recipe.materials:
        product = chem_by_id.get(line.material_id)
        if product is None:
            missing.append(line.material_id)
            continue
        chemicals_cost += cost_per_unit(product) * float(line.qty or 0)

    consumables_cost = 0.0
    for line in recipe.consumables:
        item = cons_by_id.get(line.consumable_id)
        if item is None:
            missing.append(line.consumable_id)
            continue
        consumables_cost += unit_cost(item) * float(line.qty or 0)

    if missing:
        log.warning("recipe references unknown items, counted as zero cost: %s", ", ".join(missing))
    return CostBreakdown(chemicals_cost, consumables_cost, tuple(missing))


@dataclass
class CatalogSnapshot:
    """In-memory copy of the collections the roll-up reads. Never mutated by costing."""
    services: list[CatalogService] = field(default_factory=list)
    chemicals: list[ChemicalProduct] = field(default_factory=list)
    consumables: list[Consumable] = field(default_factory=list)
    material_recipes: list[MaterialRecipe] = field(default_factory=list)
    service_recipes: list[ServiceRecipe] = field(default_factory=list)

    def resolve(self, service: CatalogService) -> ResolvedRecipe:
        return resolve_recipe(service, self.chemicals, self.material_recipes, self.service_recipes)

    def service_cost(self, service: CatalogService) -> CostBreakdown:
        return roll_up(self.resolve(service), self.chemicals, self.consumables)

    def find_service(self, service_id: str, service_name: str = "") -> CatalogService | None:
        wanted = (service_name or "").lower()
        for cs in self.services:
            if cs.id == service_id or (wanted and cs.name.lower() == wanted):
                return cs
        return None

    def replenishment_cost(self, lines: Iterable[ServiceLine]) -> float:
        """Material cost of every line of a sale; lines with no catalog entry add nothing."""
        total = 0.0
        for line in lines:
            cs = self.find_service(line.service_id, line.service_name)
            if cs is not None:
                total += self.service_cost(cs).total_cost
        return total
