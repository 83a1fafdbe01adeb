"""Device value objects."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class DeviceHandle:
    """A selectable serial device (not yet opened)."""

    path: str
    vendor_id: int | None = None
    product_id: int | None = None
    description: str = ""

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True, slots=True)
class DeviceInfo:
    """USB identifiers reported by an open port."""

    vendor_id: int | None = None
    product_id: int | None = None

    @staticmethod
    def format_id(value: int | None) -> str:
        """Format a USB id as four hex digits, empty when unknown."""
        return f"{value:04x}" if value is not None else ""


class DeviceEventKind(Enum):
    """Device-level notifications."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True, slots=True)
class DeviceEvent:
    """A device was attached to or removed from the host."""

    kind: DeviceEventKind
    device: DeviceHandle | None = None
