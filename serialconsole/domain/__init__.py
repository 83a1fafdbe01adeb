"""Pure domain layer - no infrastructure dependencies."""

# Entities
from .entities import OUTPUT_BUFFER_MAX_LINES, InputHistory, OutputBuffer

# Errors
from .errors import (
    OpenError,
    SelectionCancelled,
    SerialConsoleError,
    SessionActiveError,
    StreamFault,
)

# Ports
from .ports import (
    ByteSink,
    ByteSource,
    DeviceCapability,
    DeviceListener,
    OutputSink,
    SerialPortHandle,
)

# Value Objects
from .values import (
    BAUD_RATES,
    DEFAULT_BAUD_RATE,
    ConnectionState,
    ControllerSnapshot,
    DeviceEvent,
    DeviceEventKind,
    DeviceHandle,
    DeviceInfo,
    StreamFaultPolicy,
    validate_baud_rate,
)

__all__ = [
    # Values
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
    # Entities
    "OutputBuffer",
    "OUTPUT_BUFFER_MAX_LINES",
    "InputHistory",
    # Errors
    "SerialConsoleError",
    "SelectionCancelled",
    "OpenError",
    "StreamFault",
    "SessionActiveError",
    # Ports
    "ByteSource",
    "ByteSink",
    "SerialPortHandle",
    "DeviceCapability",
    "DeviceListener",
    "OutputSink",
]
