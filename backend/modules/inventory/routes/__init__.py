"""Подроуты инвентаря (types, employees, equipment, credentials, events, stats, export)."""
from . import credentials, employees, equipment, events, export, stats, types

__all__ = ["credentials", "employees", "equipment", "events", "export", "stats", "types"]
