"""Codec pipes - link a port's byte streams to text streams.

An inbound pipe pumps bytes from the port through an incremental decoder
into a queue of text chunks that a single TextReader consumes. An outbound
pipe takes text from a single TextWriter, encodes it, and writes it to the
port in submission order.
"""

import asyncio
import codecs
import logging
from dataclasses import dataclass

from serialconsole.domain import ByteSink, ByteSource, StreamFault

logger = logging.getLogger(__name__)

# Constants
READ_SIZE = 4096
PIPE_CLOSE_TIMEOUT = 1.0  # seconds

_END = object()


@dataclass(frozen=True, slots=True)
class _Fault:
    error: Exception


def _describe(error: BaseException) -> str:
    return str(error) or type(error).__name__


class TextReader:
    """Exclusive read cursor over an inbound pipe's decoded text."""

    def __init__(self, pipe: "InboundPipe") -> None:
        self._pipe = pipe

    async def read(self) -> str | None:
        """Wait for the next decoded chunk.

        Returns:
            The chunk, or None once the stream ended or was cancelled.

        Raises:
            StreamFault: If the byte source failed.
        """
        return await self._pipe._next_chunk()

    def cancel(self) -> None:
        """Cancel the stream. A pending read returns None."""
        self._pipe.cancel()


class InboundPipe:
    """Byte source -> decoder -> text chunks."""

    def __init__(
        self,
        source: ByteSource,
        encoding: str = "utf-8",
        errors: str = "replace",
        read_size: int = READ_SIZE,
    ) -> None:
        # Raises LookupError for an unknown encoding before anything starts
        self._decoder = codecs.getincrementaldecoder(encoding)(errors=errors)
        self._source = source
        self._read_size = read_size
        self._chunks: asyncio.Queue[object] = asyncio.Queue()
        self._reader: TextReader | None = None
        self._cancelled = False
        self._finished = False
        self.error: Exception | None = None
        self._task = asyncio.create_task(self._pump(), name="serial-inbound-pipe")

    def get_reader(self) -> TextReader:
        """Acquire the single reader of this pipe."""
        if self._reader is not None:
            raise RuntimeError("Inbound pipe already has a reader")
        self._reader = TextReader(self)
        return self._reader

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        """Stop pumping and release any pending read."""
        if self._cancelled:
            return
        self._cancelled = True
        self._task.cancel()
        self._chunks.put_nowait(_END)

    async def wait_closed(self, timeout: float = PIPE_CLOSE_TIMEOUT) -> None:
        """Wait for the pump to finish, whatever its outcome."""
        await _settle(self._task, timeout)

    async def _pump(self) -> None:
        try:
            while True:
                data = await self._source.read(self._read_size)
                if not data:
                    break
                text = self._decoder.decode(data)
                if text:
                    self._chunks.put_nowait(text)
            tail = self._decoder.decode(b"", final=True)
            if tail:
                self._chunks.put_nowait(tail)
            self._chunks.put_nowait(_END)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # The stream stays open without an end marker until cancelled
            logger.warning("Serial read error: %s", e)
            self.error = e
            self._chunks.put_nowait(_Fault(e))

    async def _next_chunk(self) -> str | None:
        if self._cancelled or self._finished:
            return None
        item = await self._chunks.get()
        if item is _END:
            self._finished = True
            return None
        if isinstance(item, _Fault):
            raise StreamFault(_describe(item.error)) from item.error
        return item


class TextWriter:
    """Exclusive write cursor over an outbound pipe's text input."""

    def __init__(self, pipe: "OutboundPipe") -> None:
        self._pipe = pipe

    async def write(self, text: str) -> None:
        """Encode text and wait until the port accepted it.

        Raises:
            StreamFault: If the writer is closed or the byte sink failed.
        """
        await self._pipe._submit(text)

    async def close(self) -> None:
        """Stop accepting text. Already queued writes still go out."""
        self._pipe.close()


class OutboundPipe:
    """Text -> encoder -> byte sink, one write at a time."""

    def __init__(
        self,
        sink: ByteSink,
        encoding: str = "utf-8",
        errors: str = "strict",
    ) -> None:
        self._encoder = codecs.getincrementalencoder(encoding)(errors=errors)
        self._sink = sink
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._writer: TextWriter | None = None
        self._closing = False
        self._task = asyncio.create_task(self._pump(), name="serial-outbound-pipe")

    def get_writer(self) -> TextWriter:
        """Acquire the single writer of this pipe."""
        if self._writer is not None:
            raise RuntimeError("Outbound pipe already has a writer")
        self._writer = TextWriter(self)
        return self._writer

    @property
    def done(self) -> bool:
        return self._task.done()

    def close(self) -> None:
        if self._closing:
            return
        self._closing = True
        self._queue.put_nowait(_END)

    async def wait_closed(self, timeout: float = PIPE_CLOSE_TIMEOUT) -> None:
        """Wait for queued writes to drain, cancelling the pump on timeout."""
        await _settle(self._task, timeout)

    async def _submit(self, text: str) -> None:
        if self._closing or self._task.done():
            raise StreamFault("Writer is closed")
        try:
            data = self._encoder.encode(text)
        except UnicodeError as e:
            raise StreamFault(_describe(e)) from e
        future = asyncio.get_running_loop().create_future()
        self._queue.put_nowait((data, future))
        await future

    async def _pump(self) -> None:
        future: asyncio.Future | None = None
        try:
            while True:
                item = await self._queue.get()
                if item is _END:
                    break
                data, future = item
                try:
                    await self._sink.write(data)
                except Exception as e:
                    logger.warning("Serial write error: %s", e)
                    if not future.done():
                        future.set_exception(StreamFault(_describe(e)))
                else:
                    if not future.done():
                        future.set_result(None)
                future = None
        finally:
            # Fail whatever never reached the port
            pending = [future] if future is not None else []
            while not self._queue.empty():
                item = self._queue.get_nowait()
                if item is not _END:
                    pending.append(item[1])
            for waiter in pending:
                if not waiter.done():
                    waiter.set_exception(StreamFault("Writer is closed"))


async def _settle(task: asyncio.Task, timeout: float) -> None:
    done, _ = await asyncio.wait({task}, timeout=timeout)
    if done:
        return
    task.cancel()
    await asyncio.wait({task}, timeout=timeout)
