from pydantic import BaseModel, ConfigDict
from typing import Optional


class Expense(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str
    date: str
    description: str = ""
    category: str = ""
    amount: float = 0
    staff_id: Optional[str] = None  # set on payroll entries
    user_id: Optional[str] = None   # who registered it
    deleted: bool = False


class ExpenseIn(BaseModel):
    date: str
    description: str
    category: str
    amount: float
    staff_id: Optional[str] = None


class BalanceOut(BaseModel):
    total_income: float
    replenishment_fund: float
    staff_payments: float
    general_expenses: float
    total_expenses: float
    available_profit: float
