# test_admin_flow_e2e.py
import asyncio
from datetime import datetime, timedelta, timezone

from salon.models.core import SERVICES


def jprint(step, r):
    """Helper to print response and assert on failure."""
    assert 200 <= r.status_code < 300, f"{step} -> {r.status_code}: {r.text}"
    return r.json() if r.headers.get("content-type", "").startswith("application/json") else r.text


def test_catalog_costing_flow(client, auth_headers, owner_headers, rng_suffix):
    assert client.get("/healthz").json() == {"ok": True}
    assert client.get("/catalog/services").status_code == 401

    # ===== 1. Leaf items =====
    r = client.post("/catalog/chemicals", headers=auth_headers, json={
        "name": f"Gel-{rng_suffix}", "quantity": 100, "unit": "ml", "purchase_price": 20.00, "stock": 3, "min_stock": 5,
    })
    chem_id = jprint("POST /catalog/chemicals", r)["id"]

    r = client.post("/catalog/consumables", headers=auth_headers, json={
        "name": f"Lima-{rng_suffix}", "unit": "unidad", "purchase_price": 13.00, "package_size": 100, "stock_qty": 80,
    })
    cons_id = jprint("POST /catalog/consumables", r)["id"]

    r = client.post("/catalog/chemicals", headers=auth_headers, json={"name": "Roto", "quantity": 0, "purchase_price": 5})
    assert r.status_code == 400, r.text

    # ===== 2. Service and its recipe =====
    r = client.post("/catalog/services", headers=auth_headers, json={
        "name": f"Semi-{rng_suffix}", "category": "manicura", "base_price": 25,
    })
    svc_id = jprint("POST /catalog/services", r)["id"]

    cost = jprint("GET cost (empty recipe)", client.get(f"/catalog/services/{svc_id}/cost", headers=auth_headers))
    assert cost["total_cost"] == 0 and cost["materials_source"] == "manual"

    r = client.patch(f"/catalog/services/{svc_id}", headers=auth_headers, json={
        "manual_materials": [{"material_id": chem_id, "qty": 5}],
        "manual_consumables": [{"consumable_id": cons_id, "qty": 2}],
    })
    jprint("PATCH /catalog/services", r)

    cost = jprint("GET cost", client.get(f"/catalog/services/{svc_id}/cost", headers=auth_headers))
    assert cost["chemicals_cost"] == 1.00
    assert cost["consumables_cost"] == 0.26
    assert cost["total_cost"] == 1.26
    assert cost["manual_materials"] == [{"material_id": chem_id, "qty": 5}]

    r = client.post("/catalog/replenishment", headers=auth_headers, json={
        "services": [{"service_id": svc_id, "service_name": f"Semi-{rng_suffix}", "service_price": 25}],
    })
    assert jprint("POST /catalog/replenishment", r)["reposicion"] == 1.26

    low = jprint("GET /catalog/low_stock", client.get("/catalog/low_stock", headers=auth_headers))
    assert [i["id"] for i in low] == [chem_id]

    # ===== 3. Extras =====
    r = client.post("/catalog/extras", headers=auth_headers, json={"name": "Cristales", "price": 0.5})
    extra_id = jprint("POST /catalog/extras", r)["id"]
    extras = jprint("GET /catalog/extras", client.get("/catalog/extras", headers=auth_headers))
    assert extras[0]["price_suggested"] == 0.5

    # ===== 4. Hard deletes are owner-only =====
    assert client.delete(f"/catalog/extras/{extra_id}", headers=auth_headers).status_code == 403
    jprint("DELETE /catalog/extras", client.delete(f"/catalog/extras/{extra_id}", headers=owner_headers))
    jprint("DELETE /catalog/services", client.delete(f"/catalog/services/{svc_id}", headers=owner_headers))
    assert client.get(f"/catalog/services/{svc_id}/cost", headers=auth_headers).status_code == 404


def test_ledger_paging_and_corrections(client, store, auth_headers, owner_headers):
    t0 = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)

    async def seed():
        for n in range(5):
            ts = t0 + timedelta(hours=n)
            await store.create(SERVICES, {"id": f"sale-{n}", "timestamp": ts.isoformat(), "date": ts.date().isoformat(),
                                          "client": "Marta", "cost": 20 + n, "user_id": "u1", "user_name": "Ana"})
    asyncio.run(seed())

    first = jprint("GET /ledger/recent", client.get("/ledger/recent", params={"limit": 3}, headers=auth_headers))
    assert [s["id"] for s in first["items"]] == ["sale-4", "sale-3", "sale-2"]
    assert first["exhausted"] is False

    nxt = jprint("GET /ledger/history", client.get("/ledger/history", params={"cursor": first["next_cursor"], "limit": 3},
                                                   headers=auth_headers))
    assert [s["id"] for s in nxt["items"]] == ["sale-1", "sale-0"]
    assert nxt["exhausted"] is True

    assert client.get("/ledger/history", params={"cursor": "garbage"}, headers=auth_headers).status_code == 400

    # corrections
    assert client.put("/ledger/sale-2/cost", headers=auth_headers, json={"cost": -3}).status_code == 400
    jprint("PUT cost", client.put("/ledger/sale-2/cost", headers=auth_headers, json={"cost": 35}))
    jprint("soft delete", client.post("/ledger/sale-2/delete", headers=auth_headers))

    live = jprint("GET /ledger", client.get("/ledger", headers=auth_headers))
    assert "sale-2" not in [s["id"] for s in live]
    deleted = jprint("GET /ledger deleted", client.get("/ledger", params={"show_deleted": True}, headers=auth_headers))
    assert [(s["id"], s["cost"]) for s in deleted] == [("sale-2", 35)]

    jprint("restore", client.post("/ledger/sale-2/restore", headers=auth_headers))
    assert client.delete("/ledger/sale-2", headers=auth_headers).status_code == 403
    jprint("DELETE /ledger", client.delete("/ledger/sale-2", headers=owner_headers))
    assert client.post("/ledger/sale-2/restore", headers=auth_headers).status_code == 404

    report = jprint("GET /reports/analytics", client.get("/reports/analytics", headers=auth_headers, params={
        "range": "custom", "date_from": "2025-03-01", "date_to": "2025-03-31",
    }))
    assert report["total_services"] == 4
    assert report["total_income"] == 20 + 21 + 23 + 24


def test_staff_and_clients_flow(client, store, auth_headers, owner_headers):
    r = client.post("/staff", headers=auth_headers, json={"name": "Lucía", "pin": "2468", "commission_pct": 40})
    uid = jprint("POST /staff", r)["id"]
    assert client.post("/staff", headers=auth_headers, json={"name": "Eva", "pin": "1", "commission_pct": 40}).status_code == 400
    assert client.put(f"/staff/{uid}/commission", headers=auth_headers, json={"commission_pct": 150}).status_code == 400
    jprint("PUT commission", client.put(f"/staff/{uid}/commission", headers=auth_headers, json={"commission_pct": 50}))

    team = jprint("GET /staff", client.get("/staff", headers=auth_headers))
    assert team[0]["commission_pct"] == 50 and "pin_hash" not in team[0]

    asyncio.run(store.create(SERVICES, {"timestamp": "2025-03-11T10:00:00+00:00", "date": "2025-03-11",
                                        "cost": 40, "user_id": uid, "user_name": "Lucía"}))
    rep = jprint("GET commission", client.get(f"/staff/{uid}/commission", headers=auth_headers,
                                              params={"date_from": "2025-03-01", "date_to": "2025-03-31"}))
    assert (rep["services"], rep["revenue"], rep["commission"]) == (1, 40, 20)
    assert (rep["earned"], rep["paid"], rep["pending"]) == (20, 0, 20)

    jprint("POST payroll expense", client.post("/finance/expenses", headers=auth_headers, json={
        "date": "2025-03-15", "description": "Pago semana", "category": "Comisiones", "amount": 15, "staff_id": uid,
    }))
    rep = jprint("GET commission after payment", client.get(f"/staff/{uid}/commission", headers=auth_headers,
                                                            params={"date_from": "2025-03-01", "date_to": "2025-03-31"}))
    assert (rep["paid"], rep["pending"]) == (15, 5)

    r = client.post("/clients/visits", headers=auth_headers, json={"client": "Marta", "date": "2025-03-11", "amount": 40})
    client_id = jprint("POST /clients/visits", r)["id"]
    people = jprint("GET /clients", client.get("/clients", headers=auth_headers))
    assert [(c["id"], c["total_services"]) for c in people] == [(client_id, 1)]
    jprint("PATCH /clients", client.patch(f"/clients/{client_id}", headers=auth_headers, json={"phone": "600000000"}))
    jprint("DELETE /clients", client.delete(f"/clients/{client_id}", headers=owner_headers))

    jprint("deactivate", client.post(f"/staff/{uid}/deactivate", headers=auth_headers))
    jprint("DELETE /staff", client.delete(f"/staff/{uid}", headers=owner_headers))
    assert client.delete(f"/staff/{uid}", headers=owner_headers).status_code == 404


def test_null_patch_is_rejected_and_catalog_stays_readable(client, auth_headers):
    r = client.post("/catalog/chemicals", headers=auth_headers, json={"name": "Base", "quantity": 100, "purchase_price": 20})
    chem_id = jprint("POST /catalog/chemicals", r)["id"]
    r = client.post("/catalog/services", headers=auth_headers, json={"name": "Manicura", "base_price": 15})
    svc_id = jprint("POST /catalog/services", r)["id"]
    r = client.post("/catalog/consumables", headers=auth_headers, json={"name": "Algodón", "unit": "unidad"})
    cons_id = jprint("POST /catalog/consumables", r)["id"]

    for path, body in [
        (f"/catalog/chemicals/{chem_id}", {"stock": None}),
        (f"/catalog/chemicals/{chem_id}", {"name": None}),
        (f"/catalog/consumables/{cons_id}", {"active": None}),
        (f"/catalog/services/{svc_id}", {"base_price": None}),
        (f"/catalog/services/{svc_id}", {"category": None}),
    ]:
        r = client.patch(path, headers=auth_headers, json=body)
        assert r.status_code == 400, f"PATCH {path} {body} -> {r.status_code}: {r.text}"

    jprint("GET /catalog/chemicals", client.get("/catalog/chemicals", headers=auth_headers))
    jprint("GET /catalog/consumables", client.get("/catalog/consumables", headers=auth_headers))
    jprint("GET cost", client.get(f"/catalog/services/{svc_id}/cost", headers=auth_headers))
    jprint("GET /ledger", client.get("/ledger", headers=auth_headers))

    # clearing a recipe list hands the service back to legacy recipes
    r = client.patch(f"/catalog/services/{svc_id}", headers=auth_headers, json={"manual_materials": None})
    assert jprint("PATCH manual_materials null", r)["manual_materials"] is None
    cost = jprint("GET cost (legacy)", client.get(f"/catalog/services/{svc_id}/cost", headers=auth_headers))
    assert cost["materials_source"] == "legacy" and cost["consumables_source"] == "manual"


def test_finance_expenses_and_balance(client, store, auth_headers, owner_headers):
    async def seed():
        await store.create(SERVICES, {"date": "2025-03-10", "cost": 100, "reposicion": 6.5, "user_id": "u1"})
        await store.create(SERVICES, {"date": "2025-03-11", "cost": 50, "reposicion": 3.5, "user_id": "u1"})
        await store.create(SERVICES, {"date": "2025-03-11", "cost": 999, "reposicion": 9, "deleted": True})
    asyncio.run(seed())

    r = client.post("/finance/expenses", headers=auth_headers, json={
        "date": "2025-03-12", "description": "Factura agua", "category": "Agua", "amount": 30,
    })
    water_id = jprint("POST /finance/expenses (general)", r)["id"]
    jprint("POST /finance/expenses (payroll)", client.post("/finance/expenses", headers=auth_headers, json={
        "date": "2025-03-13", "description": "Sueldo", "category": "Sueldos", "amount": 40, "staff_id": "u1",
    }))
    assert client.post("/finance/expenses", headers=auth_headers, json={
        "date": "2025-03-13", "description": "Nada", "category": "Agua", "amount": 0,
    }).status_code == 400

    payroll = jprint("GET payroll", client.get("/finance/expenses", params={"kind": "payroll"}, headers=auth_headers))
    assert [e["category"] for e in payroll] == ["Sueldos"]
    general = jprint("GET general", client.get("/finance/expenses", params={"kind": "general"}, headers=auth_headers))
    assert [e["id"] for e in general] == [water_id]

    bal = jprint("GET /finance/balance", client.get("/finance/balance", headers=auth_headers))
    assert bal == {
        "total_income": 150, "replenishment_fund": 10, "staff_payments": 40,
        "general_expenses": 30, "total_expenses": 70, "available_profit": 80,
    }

    assert client.delete(f"/finance/expenses/{water_id}", headers=auth_headers).status_code == 403
    jprint("DELETE expense", client.delete(f"/finance/expenses/{water_id}", headers=owner_headers))
    bal = jprint("GET /finance/balance", client.get("/finance/balance", headers=auth_headers))
    assert bal["general_expenses"] == 0 and bal["available_profit"] == 110
