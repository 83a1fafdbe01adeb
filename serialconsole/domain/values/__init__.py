"""Domain value objects - immutable data structures."""

from .baud_rate import BAUD_RATES, DEFAULT_BAUD_RATE, validate_baud_rate
from .connection_state import ConnectionState, ControllerSnapshot, StreamFaultPolicy
from .device import DeviceEvent, DeviceEventKind, DeviceHandle, DeviceInfo

__all__ = [
    "BAUD_RATES",
    "DEFAULT_BAUD_RATE",
    "validate_baud_rate",
    "ConnectionState",
    "ControllerSnapshot",
    "StreamFaultPolicy",
    "DeviceEvent",
    "DeviceEventKind",
    "DeviceHandle",
    "DeviceInfo",
]
