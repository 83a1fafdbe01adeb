"""Device ports - interfaces the serial infrastructure implements."""

from collections.abc import Callable
from typing import Protocol

from ..values import DeviceEvent, DeviceHandle, DeviceInfo

DeviceListener = Callable[[DeviceEvent], None]


class ByteSource(Protocol):
    """Readable side of an open port."""

    async def read(self, size: int = 4096) -> bytes:
        """Read up to size bytes. Returns b"" at end of stream."""
        ...


class ByteSink(Protocol):
    """Writable side of an open port."""

    async def write(self, data: bytes) -> None:
        """Write data and wait until it is handed to the transport."""
        ...


class SerialPortHandle(Protocol):
    """An open serial port."""

    @property
    def info(self) -> DeviceInfo:
        """USB identifiers of the port."""
        ...

    @property
    def readable(self) -> ByteSource:
        ...

    @property
    def writable(self) -> ByteSink:
        ...

    async def close(self) -> None:
        """Close the port. May raise if the device is already gone."""
        ...


class DeviceCapability(Protocol):
    """Access to serial devices on this host.

    Device enumeration and opening live behind this interface so the
    session logic never touches a driver directly.
    """

    def is_available(self) -> bool:
        """Whether serial access works at all on this host."""
        ...

    async def request_device(self) -> DeviceHandle | None:
        """Ask for a device. Returns None if the selection was cancelled."""
        ...

    async def open(self, handle: DeviceHandle, baud_rate: int) -> SerialPortHandle:
        """Open handle at baud_rate."""
        ...

    def subscribe(self, listener: DeviceListener) -> None:
        """Register for connected/disconnected notifications."""
        ...

    def unsubscribe(self, listener: DeviceListener) -> None:
        ...
