"""Схемы статистики инвентаря."""
from typing import List

from pydantic import BaseModel


class BreakdownRow(BaseModel):
    key: str
    count: int = 0
    total_value: float = 0.0


class StateCount(BaseModel):
    state: str
    count: int = 0


class InventoryStatsOut(BaseModel):
    total_count: int = 0
    total_value: float = 0.0
    broken_count: int = 0
    available_count: int = 0
    in_service_count: int = 0
    unavailable_count: int = 0
    employee_count: int = 0
    type_count: int = 0
    by_territory: List[BreakdownRow] = []
    by_type: List[BreakdownRow] = []
    by_brand: List[BreakdownRow] = []
    by_vendor: List[BreakdownRow] = []
    state_distribution: List[StateCount] = []
