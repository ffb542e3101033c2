"""Справочные значения модуля инвентаря."""

from enum import Enum


class EquipmentState(str, Enum):
    """Текущее состояние оборудования."""

    IN_SERVICE = "En service"
    AVAILABLE = "Disponible"
    BROKEN = "En panne"
    UNAVAILABLE = "Indisponible"


class EventCategory(str, Enum):
    """Категория события жизненного цикла."""

    ATTRIBUTION = "Attribution"
    STATE_CHANGE = "État"
    OBSERVATION = "Observation"


STATE_VALUES = [s.value for s in EquipmentState]
EVENT_CATEGORY_VALUES = [c.value for c in EventCategory]

# Корзина статистики для оборудования без сотрудника или без территории
UNASSIGNED_TERRITORY = "non_attribue"

# Значения-заглушки фильтров "все"
FILTER_ALL_SENTINELS = {"", "tous", "toutes"}
