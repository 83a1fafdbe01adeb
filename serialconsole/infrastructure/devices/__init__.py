"""Device infrastructure - pyserial backed serial access."""

from .hotplug import HotplugWatcher, diff_ports
from .port_detector import SerialPortDetector
from .pyserial_device import PySerialCapability, PySerialPort
from .selectors import PortSelector, PresetPortSelector

__all__ = [
    "HotplugWatcher",
    "diff_ports",
    "SerialPortDetector",
    "PySerialCapability",
    "PySerialPort",
    "PortSelector",
    "PresetPortSelector",
]
