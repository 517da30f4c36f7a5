from src.models.schema.livestock import Livestock
from src.models.schema.device import Device
from src.models.schema.weight import Weight

__all__ = [
    "Livestock",
    "Device",
    "Weight",
]
