"""Connection state and fault policy values."""

from dataclasses import dataclass
from enum import Enum


class ConnectionState(Enum):
    """Lifecycle of the controller's single session slot."""

    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"


class StreamFaultPolicy(Enum):
    """What to do when a live session's byte stream fails."""

    REPORT = "report"
    TEARDOWN = "teardown"


@dataclass(frozen=True, slots=True)
class ControllerSnapshot:
    """Observable controller status."""

    state: ConnectionState
    baud_rate: int
    vendor_id: int | None = None
    product_id: int | None = None
    device_path: str | None = None

    @property
    def connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED
