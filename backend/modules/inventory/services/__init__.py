"""Сервисы модуля инвентаря."""

from .credential_service import list_credentials, replace_credentials
from .employee_service import (
    create_employee,
    get_employee,
    group_by_territory,
    list_employee_equipment,
    list_employees,
    retire_employee,
    update_employee,
)
from .equipment_service import (
    assign_employee,
    create_equipment,
    delete_equipment,
    get_equipment,
    get_filter_options,
    link_type,
    list_equipment,
    update_equipment,
)
from .event_service import create_event, delete_event, list_events, update_event
from .filters import EquipmentFilter, build_predicates
from .stats_service import compute_inventory_stats
from .type_service import create_type, get_type, list_types, retire_type, update_type

__all__ = [
    "list_credentials",
    "replace_credentials",
    "create_employee",
    "get_employee",
    "group_by_territory",
    "list_employee_equipment",
    "list_employees",
    "retire_employee",
    "update_employee",
    "assign_employee",
    "create_equipment",
    "delete_equipment",
    "get_equipment",
    "get_filter_options",
    "link_type",
    "list_equipment",
    "update_equipment",
    "create_event",
    "delete_event",
    "list_events",
    "update_event",
    "EquipmentFilter",
    "build_predicates",
    "compute_inventory_stats",
    "create_type",
    "get_type",
    "list_types",
    "retire_type",
    "update_type",
]
