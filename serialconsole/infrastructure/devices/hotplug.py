"""Hotplug detection by polling the port list."""

import asyncio
import logging

from serialconsole.domain import DeviceEvent, DeviceEventKind, DeviceHandle, DeviceListener

from .port_detector import SerialPortDetector

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0  # seconds


def diff_ports(
    previous: dict[str, DeviceHandle],
    current: dict[str, DeviceHandle],
) -> list[DeviceEvent]:
    """Events for ports that disappeared or appeared between two scans.

    Removals come first so a re-enumerated device reads as lost then back.
    """
    events = [
        DeviceEvent(DeviceEventKind.DISCONNECTED, device)
        for path, device in previous.items()
        if path not in current
    ]
    events.extend(
        DeviceEvent(DeviceEventKind.CONNECTED, device)
        for path, device in current.items()
        if path not in previous
    )
    return events


class HotplugWatcher:
    """Emit connected/disconnected events as ports come and go."""

    def __init__(
        self,
        detector: SerialPortDetector,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._detector = detector
        self._poll_interval = poll_interval
        self._listeners: list[DeviceListener] = []
        self._known: dict[str, DeviceHandle] = {}
        self._task: asyncio.Task | None = None

    def add_listener(self, listener: DeviceListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: DeviceListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._known = await self._scan()
        self._task = asyncio.create_task(self._poll_loop(), name="serial-hotplug")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        await asyncio.wait({self._task})
        self._task = None

    async def poll_once(self) -> list[DeviceEvent]:
        """Rescan ports and emit the differences."""
        current = await self._scan()
        events = diff_ports(self._known, current)
        self._known = current
        for event in events:
            logger.info("Device %s path=%s", event.kind.value, event.device)
            self._emit(event)
        return events

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            try:
                await self.poll_once()
            except Exception as e:
                logger.warning("Port scan failed: %s", e)

    async def _scan(self) -> dict[str, DeviceHandle]:
        ports = await asyncio.to_thread(self._detector.detect_ports)
        return {port.path: port for port in ports}

    def _emit(self, event: DeviceEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Device listener failed")
