from pydantic import BaseModel
from typing import Optional, Literal, List

RangeLiteral = Literal["week", "month", "year", "custom"]


class WeekdayStat(BaseModel):
    weekday: str
    revenue: float
    services: int


class StaffStat(BaseModel):
    user_name: str
    revenue: float
    services: int


class ServiceStat(BaseModel):
    service_name: str
    count: int
    revenue: float


class AnalyticsOut(BaseModel):
    date_from: str
    date_to: str
    total_income: float
    total_services: int
    average_ticket: float
    weekdays: List[WeekdayStat]
    top_staff: Optional[StaffStat] = None
    top_service: Optional[ServiceStat] = None


class LowStockItem(BaseModel):
    id: str
    name: str
    current_stock: int
    min_stock: float
    type: Literal["consumable", "chemical"]


class CommissionOut(BaseModel):
    user_id: str
    payment_type: str
    services: int
    revenue: float
    commission: float
    base_salary: float
    earned: float
    paid: float
    pending: float
