"""Session controller - connect, send and disconnect coordination."""

import asyncio
import logging
from collections.abc import Callable

from serialconsole.domain import (
    DEFAULT_BAUD_RATE,
    OUTPUT_BUFFER_MAX_LINES,
    ConnectionState,
    ControllerSnapshot,
    DeviceCapability,
    DeviceEvent,
    DeviceEventKind,
    DeviceHandle,
    InputHistory,
    OpenError,
    OutputBuffer,
    SelectionCancelled,
    SessionActiveError,
    StreamFault,
    StreamFaultPolicy,
    validate_baud_rate,
)

from .connection_session import ConnectionSession

logger = logging.getLogger(__name__)

# Lines shown to the user alongside device output
WAITING_NOTICE = "Waiting for user input to connect to serial port\n"
CONNECTED_NOTICE = "Connected serial port with baud rate {baud_rate}\n"
READING_NOTICE = "Connected and reading data:\n"
DISCONNECTED_NOTICE = "\nDisconnected from serial port\n"
CONNECTION_LOST_NOTICE = (
    "\n\nConnection lost, check device or cable. Please reconnect again.\n"
)
CONNECTION_RESET_NOTICE = (
    "\n\nConnection was reset, check device or cable. Please reconnect again.\n"
)
OPEN_ERROR_LINE = "Error received: {error}\n"
SEND_ERROR_LINE = "\nError sending: {error}\n"

OutputListener = Callable[[str], None]
StatusListener = Callable[[ControllerSnapshot], None]


class SessionController:
    """Public face of the serial console.

    Holds at most one ConnectionSession, owns the output buffer and the
    input history, and reacts to device connect/disconnect notifications.
    Every way a session can end converges on a single teardown.
    """

    def __init__(
        self,
        capability: DeviceCapability,
        baud_rate: int = DEFAULT_BAUD_RATE,
        max_lines: int = OUTPUT_BUFFER_MAX_LINES,
        max_history: int | None = None,
        encoding: str = "utf-8",
        line_ending: str = "\n",
        fault_policy: StreamFaultPolicy = StreamFaultPolicy.TEARDOWN,
    ) -> None:
        self._capability = capability
        self._baud_rate = validate_baud_rate(baud_rate)
        self._buffer = OutputBuffer(max_lines=max_lines)
        self._history = InputHistory(max_entries=max_history)
        self._encoding = encoding
        self._line_ending = line_ending
        self._fault_policy = fault_policy

        self._device_available = capability.is_available()
        if self._device_available:
            logger.info("Serial device access is available")
        else:
            logger.info("Serial device access is not available on this host")

        self._state = ConnectionState.IDLE
        self._session: ConnectionSession | None = None
        self._device: DeviceHandle | None = None
        self._vendor_id: int | None = None
        self._product_id: int | None = None
        self.current_input = ""

        self._lifecycle_lock = asyncio.Lock()
        self._events: asyncio.Queue[DeviceEvent | None] = asyncio.Queue()
        self._dispatch_task: asyncio.Task | None = None
        self._read_task: asyncio.Task | None = None
        self._output_listeners: list[OutputListener] = []
        self._status_listeners: list[StatusListener] = []

    # ============= Lifecycle =============

    async def start(self) -> None:
        """Start listening for device notifications."""
        if self._dispatch_task is not None:
            return
        self._capability.subscribe(self._enqueue_event)
        self._dispatch_task = asyncio.create_task(
            self._dispatch_events(), name="serial-device-events"
        )

    async def stop(self) -> None:
        """Stop listening and close any live session."""
        self._capability.unsubscribe(self._enqueue_event)
        if self._dispatch_task is not None:
            # Queued events, and any teardown they started, run to completion
            self._events.put_nowait(None)
            await asyncio.wait({self._dispatch_task})
            self._dispatch_task = None
        await self.disconnect()
        await self.wait_reader_stopped()

    async def wait_reader_stopped(self) -> None:
        """Wait until the current read loop, if any, has returned."""
        task = self._read_task
        if task is not None and task is not asyncio.current_task():
            await asyncio.wait({task})

    # ============= Observable state =============

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def device_available(self) -> bool:
        return self._device_available

    @property
    def device(self) -> DeviceHandle | None:
        return self._device

    @property
    def vendor_id(self) -> int | None:
        return self._vendor_id

    @property
    def product_id(self) -> int | None:
        return self._product_id

    @property
    def baud_rate(self) -> int:
        return self._baud_rate

    @baud_rate.setter
    def baud_rate(self, value: int) -> None:
        if self._session is not None or self._state is not ConnectionState.IDLE:
            raise SessionActiveError("Baud rate cannot change while connected")
        self._baud_rate = validate_baud_rate(value)
        self._notify_status()

    @property
    def max_lines(self) -> int:
        return self._buffer.max_lines

    @max_lines.setter
    def max_lines(self, value: int) -> None:
        self._buffer.resize(value)

    @property
    def fault_policy(self) -> StreamFaultPolicy:
        return self._fault_policy

    @property
    def output(self) -> str:
        """Rendered output, device data and notices in arrival order."""
        return self._buffer.render()

    @property
    def output_lines(self) -> list[str]:
        return self._buffer.lines

    @property
    def history(self) -> list[str]:
        return self._history.entries

    def snapshot(self) -> ControllerSnapshot:
        return ControllerSnapshot(
            state=self._state,
            baud_rate=self._baud_rate,
            vendor_id=self._vendor_id,
            product_id=self._product_id,
            device_path=self._device.path if self._device else None,
        )

    def add_output_listener(self, listener: OutputListener) -> None:
        self._output_listeners.append(listener)

    def remove_output_listener(self, listener: OutputListener) -> None:
        if listener in self._output_listeners:
            self._output_listeners.remove(listener)

    def add_status_listener(self, listener: StatusListener) -> None:
        self._status_listeners.append(listener)

    def remove_status_listener(self, listener: StatusListener) -> None:
        if listener in self._status_listeners:
            self._status_listeners.remove(listener)

    # ============= Operations =============

    async def connect(self) -> bool:
        """Select and open a device, then start reading from it.

        Returns:
            True if a session is now live.
        """
        if not self._device_available:
            logger.info("Connect ignored, serial access not available")
            return False

        async with self._lifecycle_lock:
            if self._state is not ConnectionState.IDLE:
                logger.info("Connect ignored state=%s", self._state.value)
                return False

            self._set_state(ConnectionState.CONNECTING)
            self.append(WAITING_NOTICE)

            try:
                session = await ConnectionSession.open(
                    self._capability, self._baud_rate, encoding=self._encoding
                )
            except SelectionCancelled as e:
                logger.info("Device selection cancelled")
                self._set_state(ConnectionState.IDLE)
                self.append(f"{e}\n")
                return False
            except OpenError as e:
                logger.warning("Failed to open device baud_rate=%d: %s", self._baud_rate, e)
                self._set_state(ConnectionState.IDLE)
                self.append(OPEN_ERROR_LINE.format(error=e))
                return False
            except asyncio.CancelledError:
                self._set_state(ConnectionState.IDLE)
                raise

            self._session = session
            self._device = session.device
            self._vendor_id = session.info.vendor_id
            self._product_id = session.info.product_id
            self._set_state(ConnectionState.CONNECTED)

            self.append(CONNECTED_NOTICE.format(baud_rate=self._baud_rate))
            self.append(READING_NOTICE)
            self._read_task = asyncio.create_task(
                self._run_read_loop(session), name="serial-read-loop"
            )

        logger.info(
            "Connected device=%s baud_rate=%d vendor_id=%s product_id=%s",
            self._device,
            self._baud_rate,
            self._vendor_id,
            self._product_id,
        )
        return True

    async def disconnect(self) -> None:
        """Close the live session, if any."""
        session = self._session
        if session is None:
            return
        session.keep_alive = False
        await self._teardown(DISCONNECTED_NOTICE, session)

    async def send(self, text: str | None = None) -> bool:
        """Send a command to the device.

        Args:
            text: Command to send. Defaults to current_input.

        Returns:
            True if the command was written. Sending without a live session
            is a silent no-op.
        """
        if text is None:
            text = self.current_input

        session = self._session
        if session is None or self._state is not ConnectionState.CONNECTED:
            logger.debug("Send ignored, no live session")
            return False

        try:
            await session.write(text + self._line_ending)
        except StreamFault as e:
            logger.warning("Write failed device=%s: %s", session.device, e)
            self.append(SEND_ERROR_LINE.format(error=e))
            if self._fault_policy is StreamFaultPolicy.TEARDOWN:
                session.keep_alive = False
                await self._teardown(DISCONNECTED_NOTICE, session)
            return False

        self._history.record(text)
        self.current_input = ""
        return True

    def render(self) -> str:
        return self._buffer.render()

    def clear(self) -> None:
        """Clear the console output."""
        self._buffer.clear()

    def clear_input(self) -> None:
        self.current_input = ""

    def append(self, text: str) -> None:
        """Append text to the output buffer and tell listeners."""
        self._buffer.append(text)
        for listener in list(self._output_listeners):
            try:
                listener(text)
            except Exception:
                logger.exception("Output listener failed")

    # ============= Device events =============

    async def handle_device_event(self, event: DeviceEvent) -> None:
        """React to a device being attached or removed."""
        if event.kind is DeviceEventKind.DISCONNECTED:
            session = self._session
            if session is None:
                logger.info("Device removed while idle device=%s", event.device)
                return
            if event.device is not None and event.device.path != session.device.path:
                logger.info("Ignoring removal of other device=%s", event.device)
                return
            logger.warning("Device disconnected device=%s", session.device)
            session.keep_alive = False
            await self._teardown(CONNECTION_LOST_NOTICE, session)

        elif event.kind is DeviceEventKind.CONNECTED:
            session = self._session
            if session is None or self._state is not ConnectionState.CONNECTED:
                logger.info("Device attached device=%s", event.device)
            elif event.device is not None and event.device.path != session.device.path:
                logger.info("Ignoring attach of other device=%s", event.device)
            else:
                self.append(CONNECTION_RESET_NOTICE)

    def _enqueue_event(self, event: DeviceEvent) -> None:
        self._events.put_nowait(event)

    async def _dispatch_events(self) -> None:
        while True:
            event = await self._events.get()
            if event is None:
                return
            try:
                await self.handle_device_event(event)
            except Exception:
                logger.exception("Device event handling failed event=%s", event)

    # ============= Internals =============

    async def _run_read_loop(self, session: ConnectionSession) -> None:
        try:
            await session.read_loop(self, self._fault_policy)
        except Exception:
            logger.exception("Read loop failed device=%s", session.device)
        await self._teardown(DISCONNECTED_NOTICE, session)

    async def _teardown(self, notice: str, session: ConnectionSession) -> bool:
        """Tear session down if it is still the live one.

        Returns:
            True if this call performed the teardown.
        """
        async with self._lifecycle_lock:
            if self._session is not session:
                return False

            self._set_state(ConnectionState.DISCONNECTING)
            failed = await session.teardown()
            if failed:
                logger.warning(
                    "Teardown completed with failures device=%s steps=%s",
                    session.device,
                    ", ".join(failed),
                )

            self._session = None
            self._unset_connection()
            self.append(notice)
            return True

    def _unset_connection(self) -> None:
        self._device = None
        self._vendor_id = None
        self._product_id = None
        self._set_state(ConnectionState.IDLE)

    def _set_state(self, state: ConnectionState) -> None:
        self._state = state
        self._notify_status()

    def _notify_status(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._status_listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Status listener failed")
