"""Output sink port."""

from typing import Protocol


class OutputSink(Protocol):
    """Destination for received text and status lines."""

    def append(self, text: str) -> None:
        ...

    def render(self) -> str:
        ...

    def clear(self) -> None:
        ...
