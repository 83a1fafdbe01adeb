"""Device capability backed by pyserial and pyserial-asyncio."""

import asyncio
import logging

import serial_asyncio

from serialconsole.domain import DeviceHandle, DeviceInfo, DeviceListener

from .hotplug import DEFAULT_POLL_INTERVAL, HotplugWatcher
from .port_detector import SerialPortDetector
from .selectors import PortSelector

logger = logging.getLogger(__name__)

PORT_CLOSE_TIMEOUT = 2.0  # seconds


class StreamByteSource:
    """ByteSource over an asyncio StreamReader."""

    def __init__(self, reader: asyncio.StreamReader) -> None:
        self._reader = reader

    async def read(self, size: int = 4096) -> bytes:
        return await self._reader.read(size)


class StreamByteSink:
    """ByteSink over an asyncio StreamWriter."""

    def __init__(self, writer: asyncio.StreamWriter) -> None:
        self._writer = writer

    async def write(self, data: bytes) -> None:
        self._writer.write(data)
        await self._writer.drain()


class PySerialPort:
    """An open serial port."""

    def __init__(
        self,
        device: DeviceHandle,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        self._device = device
        self._writer = writer
        self._readable = StreamByteSource(reader)
        self._writable = StreamByteSink(writer)

    @property
    def info(self) -> DeviceInfo:
        return DeviceInfo(self._device.vendor_id, self._device.product_id)

    @property
    def readable(self) -> StreamByteSource:
        return self._readable

    @property
    def writable(self) -> StreamByteSink:
        return self._writable

    async def close(self) -> None:
        self._writer.close()
        await asyncio.wait_for(self._writer.wait_closed(), timeout=PORT_CLOSE_TIMEOUT)


class PySerialCapability:
    """Serial access through pyserial.

    Ports are enumerated with ``serial.tools.list_ports`` and opened as
    asyncio streams. A polling watcher turns port list changes into
    connected/disconnected events.
    """

    def __init__(
        self,
        selector: PortSelector,
        detector: SerialPortDetector | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._selector = selector
        self._detector = detector or SerialPortDetector()
        self._watcher = HotplugWatcher(self._detector, poll_interval)

    @property
    def selector(self) -> PortSelector:
        return self._selector

    @property
    def detector(self) -> SerialPortDetector:
        return self._detector

    def is_available(self) -> bool:
        return self._detector.is_supported()

    async def list_ports(self) -> list[DeviceHandle]:
        return await asyncio.to_thread(self._detector.detect_ports)

    async def request_device(self) -> DeviceHandle | None:
        ports = await self.list_ports()
        return await self._selector.select(ports)

    async def open(self, handle: DeviceHandle, baud_rate: int) -> PySerialPort:
        logger.info("Opening serial port path=%s baud_rate=%d", handle.path, baud_rate)
        reader, writer = await serial_asyncio.open_serial_connection(
            url=handle.path, baudrate=baud_rate
        )
        return PySerialPort(handle, reader, writer)

    def subscribe(self, listener: DeviceListener) -> None:
        self._watcher.add_listener(listener)

    def unsubscribe(self, listener: DeviceListener) -> None:
        self._watcher.remove_listener(listener)

    async def start(self) -> None:
        """Start watching for hotplug events."""
        await self._watcher.start()

    async def stop(self) -> None:
        await self._watcher.stop()
