import math
from typing import Iterable

from salon.models.core import USERS
from salon.schemas.finance import Expense
from salon.schemas.ledger import SaleRecord
from salon.schemas.reports import CommissionOut
from salon.schemas.staff import StaffIn, StaffMember
from salon.services.costing import _money
from salon.services.expenses import is_staff_payment
from salon.store.base import DocumentStore
from salon.util.audit import audit
from salon.util.errors import InvalidInput, NotFound
from salon.util.validation import reject_nulls
from salon.util.security import hash_pin

MIN_PIN_LEN = 4
DEFAULT_STAFF_COMMISSION = 35.0
PAYMENT_TYPES = ("commission", "fixed", "hybrid")


def clamp(n: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, n))


def _check_commission(value) -> float:
    try:
        pct = float(value)
    except (TypeError, ValueError):
        raise InvalidInput("commission_pct must be a number between 0 and 100")
    if not math.isfinite(pct) or pct < 0 or pct > 100:
        raise InvalidInput("commission_pct must be between 0 and 100")
    return pct


def _check_pin(pin: str) -> str:
    pin = (pin or "").strip()
    if len(pin) < MIN_PIN_LEN:
        raise InvalidInput(f"PIN must have at least {MIN_PIN_LEN} digits")
    return pin


def _check_salary(value: float) -> None:
    if not math.isfinite(value) or value < 0:
        raise InvalidInput("base_salary must be >= 0")


def normalize_staff(doc: dict) -> StaffMember:
    """Fill the defaults old user documents lack; commission is always clamped to 0..100."""
    role = doc.get("role") or "staff"
    raw = doc.get("commission_pct")
    if raw is None or raw == "":
        pct = 0.0 if role == "owner" else DEFAULT_STAFF_COMMISSION
    else:
        pct = _as_number(raw)
    payment_type = doc.get("payment_type")
    if payment_type not in PAYMENT_TYPES:
        payment_type = "commission"
    return StaffMember.model_validate({**doc, "role": role, "commission_pct": clamp(pct, 0, 100),
                                       "payment_type": payment_type,
                                       "base_salary": max(0.0, _as_number(doc.get("base_salary"))),
                                       "active": doc.get("active") is not False})


def _as_number(raw) -> float:
    try:
        n = float(raw)
    except (TypeError, ValueError):
        return 0.0
    return n if math.isfinite(n) else 0.0


async def list_staff(store: DocumentStore) -> list[StaffMember]:
    return [normalize_staff(d) for d in await store.query(USERS, "name", descending=False)]


async def create_staff(store: DocumentStore, body: StaffIn, actor: str | None = None) -> str:
    if not body.name.strip():
        raise InvalidInput("name is required")
    pct = _check_commission(body.commission_pct)
    pin = _check_pin(body.pin)
    _check_salary(body.base_salary)
    doc_id = await store.create(USERS, {
        "name": body.name.strip(),
        "pin_hash": hash_pin(pin),
        "role": "staff",
        "color": body.color,
        "icon": "user",
        "commission_pct": pct,
        "payment_type": body.payment_type,
        "base_salary": body.base_salary,
        "active": True,
    })
    await audit(store, actor, USERS, doc_id, "CREATE", after={"name": body.name.strip(), "commission_pct": pct})
    return doc_id


async def update_staff(store: DocumentStore, user_id: str, fields: dict, actor: str | None = None) -> None:
    reject_nulls(fields)
    before = await store.get(USERS, user_id)
    if before is None:
        raise NotFound(USERS, user_id)
    fields = dict(fields)
    if "commission_pct" in fields:
        fields["commission_pct"] = _check_commission(fields["commission_pct"])
    if "name" in fields and not (fields["name"] or "").strip():
        raise InvalidInput("name is required")
    if "base_salary" in fields:
        _check_salary(fields["base_salary"])
    if "pin" in fields:
        fields["pin_hash"] = hash_pin(_check_pin(fields.pop("pin")))
    await store.update(USERS, user_id, fields)
    await audit(store, actor, USERS, user_id, "UPDATE",
                after={k: v for k, v in fields.items() if k != "pin_hash"})


async def update_commission(store: DocumentStore, user_id: str, pct: float, actor: str | None = None) -> None:
    await update_staff(store, user_id, {"commission_pct": pct}, actor)


async def deactivate_staff(store: DocumentStore, user_id: str, actor: str | None = None) -> None:
    await update_staff(store, user_id, {"active": False}, actor)


async def delete_staff(store: DocumentStore, user_id: str, actor: str | None = None) -> None:
    if await store.get(USERS, user_id) is None:
        raise NotFound(USERS, user_id)
    await store.delete(USERS, user_id)
    await audit(store, actor, USERS, user_id, "DELETE")


# ── Commission helpers ──────────────────────────────────────────────────────

def commission_pct_for_sale(sale: SaleRecord, staff: Iterable[StaffMember]) -> float:
    """The percentage snapshotted on the sale wins over the staff member's current one."""
    if sale.commission_pct is not None:
        return clamp(sale.commission_pct, 0, 100)
    for u in staff:
        if u.id == sale.user_id:
            return clamp(u.commission_pct, 0, 100)
    return 0.0


def commission_amount(sale: SaleRecord, staff: Iterable[StaffMember]) -> float:
    return float(sale.cost or 0) * commission_pct_for_sale(sale, staff) / 100


def earnings(member: StaffMember, sales: Iterable[SaleRecord], expenses: Iterable[Expense],
             staff: Iterable[StaffMember]) -> CommissionOut:
    """What a staff member earned over the given sales and how much of it payroll expenses have covered.

    Base salary counts for fixed and hybrid pay; commission counts unless pay is fixed.
    """
    staff = list(staff)
    mine = [s for s in sales if not s.deleted and s.user_id == member.id]
    commission = sum(commission_amount(s, staff) for s in mine)
    base = member.base_salary if member.payment_type in ("fixed", "hybrid") else 0.0
    earned = base + (0.0 if member.payment_type == "fixed" else commission)
    paid = sum(e.amount for e in expenses
               if not e.deleted and is_staff_payment(e) and e.staff_id == member.id)
    return CommissionOut(
        user_id=member.id,
        payment_type=member.payment_type,
        services=len(mine),
        revenue=_money(sum(float(s.cost or 0) for s in mine)),
        commission=_money(commission),
        base_salary=_money(base),
        earned=_money(earned),
        paid=_money(paid),
        pending=_money(max(0.0, earned - paid)),
    )
