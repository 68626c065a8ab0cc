from datetime import date, timedelta
from typing import Iterable

from salon.schemas.finance import BalanceOut, Expense
from salon.schemas.ledger import SaleRecord
from salon.schemas.reports import AnalyticsOut, ServiceStat, StaffStat, WeekdayStat
from salon.services.costing import _money
from salon.services.expenses import is_staff_payment
from salon.util.errors import InvalidInput

# Monday first, as the dashboard shows them
WEEKDAYS = ["Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo"]
UNSPECIFIED = "Sin especificar"


def date_range(preset: str, today: date, date_from: date | None = None, date_to: date | None = None) -> tuple[date, date]:
    if preset == "week":
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=6)
    if preset == "month":
        return today.replace(day=1), today
    if preset == "year":
        return today.replace(month=1, day=1), today
    if preset == "custom":
        if date_from is None or date_to is None:
            raise InvalidInput("custom range needs date_from and date_to")
        return date_from, date_to
    raise InvalidInput(f"unknown range preset: {preset}")


def in_range(sales: Iterable[SaleRecord], start: date, end: date) -> list[SaleRecord]:
    lo, hi = start.isoformat(), end.isoformat()
    return [s for s in sales if not s.deleted and lo <= s.date <= hi]


def _headline_service(s: SaleRecord) -> str:
    if s.services and s.services[0].service_name:
        return s.services[0].service_name
    return s.service or UNSPECIFIED


def summarize(sales: Iterable[SaleRecord], start: date, end: date) -> AnalyticsOut:
    rows = in_range(sales, start, end)

    weekdays = {name: [0.0, 0] for name in WEEKDAYS}
    staff: dict[str, list] = {}
    services: dict[str, list] = {}
    for s in rows:
        cost = float(s.cost or 0)
        w = weekdays[WEEKDAYS[date.fromisoformat(s.date[:10]).weekday()]]
        w[0] += cost; w[1] += 1
        st = staff.setdefault(s.user_name, [0.0, 0])
        st[0] += cost; st[1] += 1
        sv = services.setdefault(_headline_service(s), [0, 0.0])
        sv[0] += 1; sv[1] += cost

    total = sum(float(s.cost or 0) for s in rows)
    count = len(rows)

    top_staff = None
    if staff:
        name, (rev, n) = max(staff.items(), key=lambda kv: kv[1][0])
        top_staff = StaffStat(user_name=name, revenue=_money(rev), services=n)
    top_service = None
    if services:
        name, (n, rev) = max(services.items(), key=lambda kv: kv[1][0])
        top_service = ServiceStat(service_name=name, count=n, revenue=_money(rev))

    return AnalyticsOut(
        date_from=start.isoformat(),
        date_to=end.isoformat(),
        total_income=_money(total),
        total_services=count,
        average_ticket=_money(total / count) if count else 0.0,
        weekdays=[WeekdayStat(weekday=k, revenue=_money(v[0]), services=v[1]) for k, v in weekdays.items()],
        top_staff=top_staff,
        top_service=top_service,
    )


def balance(sales: Iterable[SaleRecord], expenses: Iterable[Expense]) -> BalanceOut:
    """All-time position: income against every expense, and the material cost owed back to stock."""
    live = [s for s in sales if not s.deleted]
    spent = [e for e in expenses if not e.deleted]
    income = sum(float(s.cost or 0) for s in live)
    staff = sum(e.amount for e in spent if is_staff_payment(e))
    general = sum(e.amount for e in spent if not is_staff_payment(e))
    return BalanceOut(
        total_income=_money(income),
        replenishment_fund=_money(sum(float(s.reposicion or 0) for s in live)),
        staff_payments=_money(staff),
        general_expenses=_money(general),
        total_expenses=_money(staff + general),
        available_profit=_money(max(0.0, income - staff - general)),
    )
