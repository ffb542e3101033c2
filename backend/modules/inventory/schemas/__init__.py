"""Схемы модуля инвентаря."""
from .credential import CredentialIn, CredentialOut, CredentialSetIn
from .employee import EmployeeIn, EmployeeOut
from .equipment import EquipmentDetailOut, EquipmentIn, EquipmentOut, FilterOptionsOut
from .equipment_type import EquipmentTypeIn, EquipmentTypeOut
from .event import EventIn, EventOut
from .stats import BreakdownRow, InventoryStatsOut

__all__ = [
    "CredentialIn",
    "CredentialOut",
    "CredentialSetIn",
    "EmployeeIn",
    "EmployeeOut",
    "EquipmentDetailOut",
    "EquipmentIn",
    "EquipmentOut",
    "FilterOptionsOut",
    "EquipmentTypeIn",
    "EquipmentTypeOut",
    "EventIn",
    "EventOut",
    "BreakdownRow",
    "InventoryStatsOut",
]
