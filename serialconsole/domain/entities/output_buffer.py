"""Output buffer entity for the console view."""

from collections import deque
from dataclasses import dataclass, field

# Business rules
OUTPUT_BUFFER_MAX_LINES = 500


@dataclass
class OutputBuffer:
    """Bounded history of received text chunks.

    Pure domain logic for buffering console output.
    No async, no serial port - just data management.
    Eviction works on whole chunks as they were appended,
    a chunk is never split.
    """

    max_lines: int = OUTPUT_BUFFER_MAX_LINES
    _lines: deque[str] = field(default_factory=deque)

    def __post_init__(self) -> None:
        if self.max_lines <= 0:
            raise ValueError("max_lines must be positive")

    @property
    def lines(self) -> list[str]:
        """Surviving chunks in arrival order."""
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        """Check if buffer is empty."""
        return not self._lines

    def append(self, chunk: str) -> None:
        """Append a chunk, evicting the oldest ones over the limit."""
        self._lines.append(chunk)
        self._trim()

    def render(self) -> str:
        """Get all buffered output as a single string."""
        return "".join(self._lines)

    def clear(self) -> None:
        """Clear the buffer."""
        self._lines.clear()

    def resize(self, max_lines: int) -> None:
        """Change the capacity, evicting immediately if it shrank."""
        if max_lines <= 0:
            raise ValueError("max_lines must be positive")
        self.max_lines = max_lines
        self._trim()

    def _trim(self) -> None:
        while len(self._lines) > self.max_lines:
            self._lines.popleft()

    def __len__(self) -> int:
        """Return number of chunks in buffer."""
        return len(self._lines)
