"""Recipe resolution for catalog services.

A service's ``manual_materials`` / ``manual_consumables`` are authoritative as
soon as they exist, even when empty. Only a field that was never written falls
back to the pre-migration recipe collections. Each list is resolved on its own,
so a service can carry manual consumables while its materials still come from a
legacy MaterialRecipe.
"""
from dataclasses import dataclass, field
from typing import Iterable, Literal, Optional

from salon.schemas.catalog import (
    CatalogService, ChemicalProduct, ConsumableLine, MaterialLine,
    MaterialRecipe, ServiceRecipe,
)

Source = Literal["manual", "legacy"]


@dataclass(frozen=True)
class ResolvedRecipe:
    materials: list[MaterialLine] = field(default_factory=list)
    consumables: list[ConsumableLine] = field(default_factory=list)
    materials_source: Source = "manual"
    consumables_source: Source = "manual"


def normalize_name(name: str) -> str:
    return name.lower().replace("_", " ").strip()


def names_match(a: str, b: str) -> bool:
    """Normalised equality, or either name contained in the other."""
    na, nb = normalize_name(a), normalize_name(b)
    if not na or not nb:
        return na == nb
    return na == nb or na in nb or nb in na


def match_chemical(ref: str, chemicals: Iterable[ChemicalProduct]) -> Optional[ChemicalProduct]:
    """Find the chemical a legacy reference points at: exact id first, then by name."""
    chemicals = list(chemicals)
    for p in chemicals:
        if p.id == ref:
            return p
    for p in chemicals:
        if names_match(p.name, ref):
            return p
    return None


def find_material_recipe(service: CatalogService, recipes: Iterable[MaterialRecipe]) -> Optional[MaterialRecipe]:
    wanted = service.name.lower()
    for r in recipes:
        if r.service_id == service.id or r.service_name.lower() == wanted:
            return r
    return None


def find_service_recipe(service: CatalogService, recipes: Iterable[ServiceRecipe]) -> Optional[ServiceRecipe]:
    for r in recipes:
        if r.id == service.id or r.id == service.name:
            return r
    return None


def legacy_materials(service: CatalogService, chemicals: Iterable[ChemicalProduct],
                     recipes: Iterable[MaterialRecipe]) -> list[MaterialLine]:
    recipe = find_material_recipe(service, recipes)
    if recipe is None:
        return []
    chemicals = list(chemicals)
    out = []
    for ref in recipe.chemical_ids:
        product = match_chemical(ref, chemicals)
        if product is not None:
            # legacy recipes carry no quantities
            out.append(MaterialLine(material_id=product.id, qty=1))
    return out


def legacy_consumables(service: CatalogService, recipes: Iterable[ServiceRecipe]) -> list[ConsumableLine]:
    recipe = find_service_recipe(service, recipes)
    return list(recipe.items) if recipe else []


def resolve_recipe(service: CatalogService,
                   chemicals: Iterable[ChemicalProduct] = (),
                   material_recipes: Iterable[MaterialRecipe] = (),
                   service_recipes: Iterable[ServiceRecipe] = ()) -> ResolvedRecipe:
    """Resolve the material and consumable lists used both for cost previews and
    for pre-populating the service editor."""
    if service.manual_materials is not None:
        materials, m_src = list(service.manual_materials), "manual"
    else:
        materials, m_src = legacy_materials(service, chemicals, material_recipes), "legacy"

    if service.manual_consumables is not None:
        consumables, c_src = list(service.manual_consumables), "manual"
    else:
        consumables, c_src = legacy_consumables(service, service_recipes), "legacy"

    return ResolvedRecipe(materials=materials, consumables=consumables,
                          materials_source=m_src, consumables_source=c_src)
