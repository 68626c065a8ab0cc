from pydantic import BaseModel, ConfigDict
from typing import Optional


class Client(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str
    name: str
    phone: Optional[str] = None
    first_visit: Optional[str] = None
    last_visit: Optional[str] = None
    total_spent: float = 0
    total_services: int = 0
    preferred_staff_id: Optional[str] = None
    active: bool = True


class ClientIn(BaseModel):
    name: str
    phone: Optional[str] = None
    preferred_staff_id: Optional[str] = None


class ClientPatch(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    preferred_staff_id: Optional[str] = None
    active: Optional[bool] = None


class VisitIn(BaseModel):
    client: str
    date: str
    amount: float
