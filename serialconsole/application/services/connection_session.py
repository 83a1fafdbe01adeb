"""Connection session - one open port and its two codec pipes."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from serialconsole.domain import (
    DeviceCapability,
    DeviceHandle,
    DeviceInfo,
    OpenError,
    OutputSink,
    SelectionCancelled,
    SerialPortHandle,
    StreamFault,
    StreamFaultPolicy,
)

from .codec_pipe import InboundPipe, OutboundPipe, TextReader, TextWriter

logger = logging.getLogger(__name__)

READ_ERROR_LINE = "\nRead error: {error}\n"


class ConnectionSession:
    """A live connection to one device.

    Owns the port, the inbound and outbound pipes, the reader and the
    writer. Instances are only handed out by open() once every part is in
    place, and teardown() releases all of them.
    """

    def __init__(
        self,
        device: DeviceHandle,
        port: SerialPortHandle,
        inbound_pipe: InboundPipe | None = None,
        outbound_pipe: OutboundPipe | None = None,
        reader: TextReader | None = None,
        writer: TextWriter | None = None,
    ) -> None:
        self.device = device
        self.port: SerialPortHandle | None = port
        self.inbound_pipe = inbound_pipe
        self.outbound_pipe = outbound_pipe
        self.reader = reader
        self.writer = writer
        self.keep_alive = True
        self._reading = False
        self._teardown_task: asyncio.Task | None = None

    @classmethod
    async def open(
        cls,
        capability: DeviceCapability,
        baud_rate: int,
        encoding: str = "utf-8",
    ) -> "ConnectionSession":
        """Select a device, open it and wire its streams.

        Raises:
            SelectionCancelled: If no device was selected.
            OpenError: If the device or its streams could not be set up.
        """
        try:
            device = await capability.request_device()
        except Exception as e:
            raise OpenError(str(e) or type(e).__name__) from e
        if device is None:
            raise SelectionCancelled()

        try:
            port = await capability.open(device, baud_rate)
        except Exception as e:
            raise OpenError(str(e) or type(e).__name__) from e

        session = cls(device, port)
        try:
            session.inbound_pipe = InboundPipe(port.readable, encoding)
            session.reader = session.inbound_pipe.get_reader()
            session.outbound_pipe = OutboundPipe(port.writable, encoding)
            session.writer = session.outbound_pipe.get_writer()
        except Exception as e:
            await session.teardown()
            raise OpenError(f"Failed to set up streams: {e}") from e

        logger.info("Session opened device=%s baud_rate=%d", device, baud_rate)
        return session

    @property
    def info(self) -> DeviceInfo:
        if self.port is None:
            return DeviceInfo()
        return self.port.info

    @property
    def is_closed(self) -> bool:
        return self._teardown_task is not None and self._teardown_task.done()

    async def read_loop(
        self,
        sink: OutputSink,
        fault_policy: StreamFaultPolicy = StreamFaultPolicy.TEARDOWN,
    ) -> None:
        """Forward decoded chunks to sink until the session stops.

        Ends when keep_alive is cleared, the stream ends, or the reader is
        cancelled. A stream fault is written to sink and ends the loop only
        under the TEARDOWN policy.
        """
        if self._reading:
            raise RuntimeError("Read loop already running for this session")
        self._reading = True

        while self.keep_alive and self.reader is not None:
            try:
                chunk = await self.reader.read()
            except StreamFault as e:
                sink.append(READ_ERROR_LINE.format(error=e))
                if fault_policy is StreamFaultPolicy.TEARDOWN:
                    self.keep_alive = False
                continue

            if chunk is None:
                logger.info("Serial reader closed device=%s", self.device)
                self.keep_alive = False
                break
            sink.append(chunk)

    async def write(self, text: str) -> None:
        """Write text through the session's writer.

        Raises:
            StreamFault: If the session is closed or the write failed.
        """
        if self.writer is None:
            raise StreamFault("Session is closed")
        await self.writer.write(text)

    async def teardown(self) -> list[str]:
        """Release every resource in a fixed order.

        Each step runs even if an earlier one failed. The steps run in their
        own task, so a caller being cancelled does not stop them; a later
        call waits for that run. Never raises; calling it again after it
        finished is a no-op.

        Returns:
            Names of the steps that failed.
        """
        if self._teardown_task is None:
            self.keep_alive = False
            self._teardown_task = asyncio.create_task(
                self._run_teardown(), name="serial-session-teardown"
            )
            return await asyncio.shield(self._teardown_task)
        if not self._teardown_task.done():
            await asyncio.shield(self._teardown_task)
        return []

    async def _run_teardown(self) -> list[str]:
        steps: list[tuple[str, Callable[[], Awaitable[None]]]] = [
            ("cancel reader", self._cancel_reader),
            ("close writer", self._close_writer),
            ("inbound pipe", self._await_inbound_pipe),
            ("outbound pipe", self._await_outbound_pipe),
            ("close port", self._close_port),
        ]
        failed = []
        for name, step in steps:
            try:
                await step()
            except Exception:
                logger.debug("Teardown step failed step=%s device=%s", name, self.device, exc_info=True)
                failed.append(name)

        self.reader = None
        self.writer = None
        self.inbound_pipe = None
        self.outbound_pipe = None
        self.port = None

        logger.info("Session closed device=%s", self.device)
        return failed

    async def _cancel_reader(self) -> None:
        if self.reader is not None:
            self.reader.cancel()

    async def _close_writer(self) -> None:
        if self.writer is not None:
            await self.writer.close()

    async def _await_inbound_pipe(self) -> None:
        if self.inbound_pipe is not None:
            await self.inbound_pipe.wait_closed()

    async def _await_outbound_pipe(self) -> None:
        if self.outbound_pipe is not None:
            await self.outbound_pipe.wait_closed()

    async def _close_port(self) -> None:
        if self.port is not None:
            await self.port.close()
