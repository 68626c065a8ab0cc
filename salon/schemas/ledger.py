from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal, List

PaymentMethodLiteral = Literal["cash", "transfer"]


class ServiceLine(BaseModel):
    model_config = ConfigDict(extra="ignore")
    service_id: str = ""
    service_name: str = ""
    service_price: float = 0


class ExtraLine(BaseModel):
    model_config = ConfigDict(extra="ignore")
    extra_id: str
    extra_name: str
    price_per_nail: float = 0
    nails_count: int = 0
    total_price: float = 0


class SaleRecord(BaseModel):
    """One entry of the sales ledger (the ``services`` collection)."""
    model_config = ConfigDict(extra="ignore")
    id: str
    date: str
    timestamp: Optional[str] = None
    client: str = ""
    services: Optional[List[ServiceLine]] = None
    extras: Optional[List[ExtraLine]] = None
    service: Optional[str] = None  # pre-line-item records only carry a name
    cost: float = 0
    user_id: str = ""
    user_name: str = ""
    payment_method: PaymentMethodLiteral = "cash"
    commission_pct: Optional[float] = None
    category: Optional[Literal["manicura", "pedicura"]] = None
    reposicion: Optional[float] = None
    deleted: bool = False


class SaleCostPatch(BaseModel):
    cost: float


class HistoryPageOut(BaseModel):
    items: List[SaleRecord]
    next_cursor: Optional[str] = None
    exhausted: bool


class ReplenishmentIn(BaseModel):
    services: List[ServiceLine] = Field(default_factory=list)


class ReplenishmentOut(BaseModel):
    reposicion: float
