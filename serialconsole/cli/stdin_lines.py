"""Line input from stdin that does not block the event loop."""

import asyncio
import queue
import sys
import threading
from typing import TextIO


def _resolve(future: asyncio.Future, line: str | None) -> None:
    if not future.done():
        future.set_result(line)


class StdinLines:
    """Read lines on a daemon thread, one per request.

    Lines are only consumed when someone awaits readline(), so the port
    prompt and the command loop can share stdin.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdin
        self._requests: queue.Queue[tuple[asyncio.AbstractEventLoop, asyncio.Future]] = (
            queue.Queue()
        )
        self._thread: threading.Thread | None = None

    async def readline(self) -> str | None:
        """Next line without its newline, or None at end of input."""
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._requests.put((loop, future))
        self._ensure_thread()
        return await future

    def _ensure_thread(self) -> None:
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name="stdin-lines", daemon=True)
            self._thread.start()

    def _run(self) -> None:
        while True:
            loop, future = self._requests.get()
            try:
                line = self._stream.readline()
            except (OSError, ValueError):
                line = ""
            result = line.rstrip("\r\n") if line else None
            loop.call_soon_threadsafe(_resolve, future, result)
