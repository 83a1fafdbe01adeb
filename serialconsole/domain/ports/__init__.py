"""Domain ports - interfaces for infrastructure to implement."""

from .device_port import (
    ByteSink,
    ByteSource,
    DeviceCapability,
    DeviceListener,
    SerialPortHandle,
)
from .output_sink import OutputSink

__all__ = [
    "ByteSink",
    "ByteSource",
    "DeviceCapability",
    "DeviceListener",
    "SerialPortHandle",
    "OutputSink",
]
