from pydantic import BaseModel, ConfigDict
from typing import Optional, Literal

RoleLiteral = Literal["owner", "staff"]
PaymentTypeLiteral = Literal["commission", "fixed", "hybrid"]


class StaffMember(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str
    name: str = "Sin nombre"
    role: RoleLiteral = "staff"
    color: str = "from-teal-500 to-emerald-600"
    icon: Literal["crown", "user"] = "user"
    commission_pct: float = 0
    payment_type: PaymentTypeLiteral = "commission"
    base_salary: float = 0
    active: bool = True


class StaffIn(BaseModel):
    name: str
    pin: str
    commission_pct: float
    payment_type: PaymentTypeLiteral = "commission"
    base_salary: float = 0
    color: str = "from-teal-500 to-emerald-600"


class StaffPatch(BaseModel):
    name: Optional[str] = None
    pin: Optional[str] = None
    commission_pct: Optional[float] = None
    payment_type: Optional[PaymentTypeLiteral] = None
    base_salary: Optional[float] = None
    color: Optional[str] = None
    active: Optional[bool] = None


class CommissionPatch(BaseModel):
    commission_pct: float
