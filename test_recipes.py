# test_recipes.py
from salon.schemas.catalog import CatalogService, ChemicalProduct, MaterialRecipe, ServiceRecipe
from salon.services.recipes import (
    find_material_recipe, match_chemical, names_match, resolve_recipe,
)

CHEMICALS = [
    ChemicalProduct(id="chem-base", name="Base Coat", quantity=15, purchase_price=9),
    ChemicalProduct(id="chem-top", name="Top Coat", quantity=15, purchase_price=12),
]


def service(**kw):
    base = {"id": "svc-semi", "name": "Semipermanente", "category": "manicura", "base_price": 25}
    base.update(kw)
    return CatalogService.model_validate(base)


def test_legacy_recipe_matches_chemical_by_name():
    recipes = [MaterialRecipe(id="r1", service_id="svc-semi", chemical_ids=["top_coat"])]
    out = resolve_recipe(service(), CHEMICALS, recipes)
    assert out.materials_source == "legacy"
    assert [(m.material_id, m.qty) for m in out.materials] == [("chem-top", 1)]


def test_empty_manual_list_wins_over_legacy_recipe():
    recipes = [MaterialRecipe(id="r1", service_id="svc-semi", chemical_ids=["chem-base"])]
    out = resolve_recipe(service(manual_materials=[]), CHEMICALS, recipes)
    assert out.materials == []
    assert out.materials_source == "manual"


def test_manual_and_legacy_resolve_independently():
    material_recipes = [MaterialRecipe(id="r1", service_name="SEMIPERMANENTE", chemical_ids=["chem-base"])]
    service_recipes = [ServiceRecipe(id="svc-semi", items=[{"consumable_id": "cons-cotton", "qty": 4}])]
    svc = service(manual_consumables=[{"consumable_id": "cons-file", "qty": 1}])
    out = resolve_recipe(svc, CHEMICALS, material_recipes, service_recipes)
    assert out.materials_source == "legacy"
    assert [m.material_id for m in out.materials] == ["chem-base"]
    assert out.consumables_source == "manual"
    assert [c.consumable_id for c in out.consumables] == ["cons-file"]


def test_service_recipe_keyed_by_service_name():
    service_recipes = [ServiceRecipe(id="Semipermanente", items=[{"consumable_id": "cons-cotton", "qty": 4}])]
    out = resolve_recipe(service(manual_materials=[]), CHEMICALS, [], service_recipes)
    assert out.consumables_source == "legacy"
    assert [(c.consumable_id, c.qty) for c in out.consumables] == [("cons-cotton", 4)]


def test_no_recipe_anywhere_gives_empty_lists():
    out = resolve_recipe(service(), CHEMICALS, [], [])
    assert out.materials == [] and out.consumables == []


def test_unmatched_legacy_reference_is_dropped():
    recipes = [MaterialRecipe(id="r1", service_id="svc-semi", chemical_ids=["acetona", "chem-base"])]
    out = resolve_recipe(service(), CHEMICALS, recipes)
    assert [m.material_id for m in out.materials] == ["chem-base"]


def test_legacy_string_materials_are_normalized():
    svc = service(manual_materials=["chem-base", "chem-top"])
    assert [(m.material_id, m.qty) for m in svc.manual_materials] == [("chem-base", 1), ("chem-top", 1)]


def test_name_matching_rules():
    assert names_match("Top Coat", "top_coat")
    assert names_match("Top Coat Brillo", "top coat")
    assert names_match("base", "Base Coat")
    assert not names_match("Acetona", "Top Coat")
    assert not names_match("Top Coat", "")
    assert names_match("", "")


def test_exact_id_beats_name_match():
    chems = [
        ChemicalProduct(id="coat", name="Base Coat"),
        ChemicalProduct(id="chem-x", name="coat"),
    ]
    assert match_chemical("coat", chems).id == "coat"


def test_material_recipe_lookup_by_name_is_case_insensitive():
    recipes = [MaterialRecipe(id="r1", service_id="other", service_name="semiPERMANENTE")]
    assert find_material_recipe(service(), recipes).id == "r1"
