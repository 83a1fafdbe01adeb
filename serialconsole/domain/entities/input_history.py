"""Input history entity."""

from collections import deque
from dataclasses import dataclass, field


@dataclass
class InputHistory:
    """Commands sent to the device, oldest first.

    Unbounded unless max_entries is set, in which case the
    oldest entries are dropped.
    """

    max_entries: int | None = None
    _entries: deque[str] = field(default_factory=deque)

    def __post_init__(self) -> None:
        if self.max_entries is not None and self.max_entries <= 0:
            raise ValueError("max_entries must be positive")

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def last(self) -> str | None:
        """Most recently sent command."""
        return self._entries[-1] if self._entries else None

    def record(self, command: str) -> None:
        self._entries.append(command)
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                self._entries.popleft()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))
