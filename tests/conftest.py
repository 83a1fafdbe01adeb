"""Shared test fixtures and configuration."""

import asyncio

import pytest

from serialconsole.domain import (
    DeviceEvent,
    DeviceHandle,
    DeviceInfo,
    InputHistory,
    OutputBuffer,
)

# ============= Domain Fixtures =============


@pytest.fixture
def device():
    """Sample USB serial device."""
    return DeviceHandle(
        path="/dev/ttyACM0",
        vendor_id=0x2341,
        product_id=0x0043,
        description="Arduino Uno",
    )


@pytest.fixture
def other_device():
    """A second device on the same host."""
    return DeviceHandle(path="/dev/ttyUSB0", vendor_id=0x10C4, product_id=0xEA60)


@pytest.fixture
def output_buffer():
    """Empty output buffer."""
    return OutputBuffer()


@pytest.fixture
def input_history():
    """Empty input history."""
    return InputHistory()


# ============= Fake Serial Port =============


class FakeByteSource:
    """Byte source fed by the test."""

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self.read_calls = 0

    async def read(self, size: int = 4096) -> bytes:
        self.read_calls += 1
        item = await self._queue.get()
        if isinstance(item, Exception):
            raise item
        return item

    # Test helpers
    def feed(self, data: bytes) -> None:
        self._queue.put_nowait(data)

    def feed_eof(self) -> None:
        self._queue.put_nowait(b"")

    def fail(self, error: Exception) -> None:
        self._queue.put_nowait(error)


class FakeByteSink:
    """Byte sink recording writes."""

    def __init__(self):
        self.written: list[bytes] = []
        self.error: Exception | None = None

    async def write(self, data: bytes) -> None:
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        self.written.append(data)

    @property
    def text(self) -> str:
        return b"".join(self.written).decode("utf-8")


class FakeSerialPort:
    """Open port with fake streams."""

    def __init__(self, device: DeviceHandle):
        self._device = device
        self.source = FakeByteSource()
        self.sink = FakeByteSink()
        self.closed = False
        self.close_calls = 0
        self.close_error: Exception | None = None

    @property
    def info(self) -> DeviceInfo:
        return DeviceInfo(self._device.vendor_id, self._device.product_id)

    @property
    def readable(self) -> FakeByteSource:
        return self.source

    @property
    def writable(self) -> FakeByteSink:
        return self.sink

    async def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error
        self.closed = True
        self.source.feed_eof()


class FakeCapability:
    """Device capability with a scripted selection."""

    def __init__(self, selection: DeviceHandle | None, available: bool = True):
        self.selection = selection
        self.available = available
        self.open_error: Exception | None = None
        self.opened: list[tuple[DeviceHandle, int]] = []
        self.ports: list[FakeSerialPort] = []
        self.request_count = 0
        self.listeners: list = []
        self.started = False
        self.selector = None

    def is_available(self) -> bool:
        return self.available

    async def list_ports(self) -> list[DeviceHandle]:
        return [self.selection] if self.selection else []

    async def request_device(self) -> DeviceHandle | None:
        self.request_count += 1
        return self.selection

    async def open(self, handle: DeviceHandle, baud_rate: int) -> FakeSerialPort:
        if self.open_error is not None:
            raise self.open_error
        port = FakeSerialPort(handle)
        self.opened.append((handle, baud_rate))
        self.ports.append(port)
        return port

    def subscribe(self, listener) -> None:
        self.listeners.append(listener)

    def unsubscribe(self, listener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.started = False

    # Test helpers
    @property
    def port(self) -> FakeSerialPort:
        """Most recently opened port."""
        return self.ports[-1]

    def emit(self, event: DeviceEvent) -> None:
        for listener in list(self.listeners):
            listener(event)


@pytest.fixture
def fake_capability(device):
    """Capability that selects the sample device."""
    return FakeCapability(device)


@pytest.fixture
def wait_for():
    """Await until a predicate holds, failing after a timeout."""

    async def _wait_for(predicate, timeout: float = 1.0) -> None:
        async def _poll():
            while not predicate():
                await asyncio.sleep(0.001)

        await asyncio.wait_for(_poll(), timeout)

    return _wait_for


@pytest.fixture
def byte_source():
    """Byte source fed by the test."""
    return FakeByteSource()


@pytest.fixture
def byte_sink():
    """Byte sink recording writes."""
    return FakeByteSink()
