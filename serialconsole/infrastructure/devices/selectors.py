"""Port selectors - decide which device a connect request opens."""

from typing import Protocol

from serialconsole.domain import DeviceHandle


class PortSelector(Protocol):
    """Picks one of the detected ports, or None to cancel."""

    async def select(self, ports: list[DeviceHandle]) -> DeviceHandle | None:
        ...


class PresetPortSelector:
    """Select a port chosen ahead of time.

    The path may be any URL pyserial understands (``loop://``,
    ``socket://host:port``), so it does not have to be a detected port.
    Without a path, a single detected port is picked automatically.
    """

    def __init__(self, path: str | None = None) -> None:
        self.path = path

    async def select(self, ports: list[DeviceHandle]) -> DeviceHandle | None:
        if self.path is None:
            return ports[0] if len(ports) == 1 else None
        for port in ports:
            if port.path == self.path:
                return port
        return DeviceHandle(path=self.path)
