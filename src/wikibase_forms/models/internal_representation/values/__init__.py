from .base import Value
from .entity_value import EntityValue
from .string_value import StringValue
from .time_value import TimeValue
from .quantity_value import QuantityValue
from .globe_value import GlobeValue
from .monolingual_value import MonolingualValue

__all__ = [
    "Value",
    "EntityValue",
    "StringValue",
    "TimeValue",
    "QuantityValue",
    "GlobeValue",
    "MonolingualValue",
]
