"""Interactive port selection."""

from rich.console import Console

from serialconsole.domain import DeviceHandle

from .display import console as default_console
from .display import ports_table
from .stdin_lines import StdinLines


class InteractivePortSelector:
    """Ask the user which port to open.

    An empty answer or end of input cancels the selection.
    """

    def __init__(self, lines: StdinLines, console: Console | None = None) -> None:
        self._lines = lines
        self._console = console or default_console

    async def select(self, ports: list[DeviceHandle]) -> DeviceHandle | None:
        if ports:
            self._console.print(ports_table(ports))
        else:
            self._console.print("[yellow]No serial ports detected[/yellow]")
        self._console.print("Select port number or path (empty to cancel): ", end="")
        answer = await self._lines.readline()
        if answer is None:
            return None
        return self.resolve(answer, ports)

    @staticmethod
    def resolve(answer: str, ports: list[DeviceHandle]) -> DeviceHandle | None:
        """Map an answer (1-based index or path) to a port."""
        answer = answer.strip()
        if not answer:
            return None
        if answer.isdigit():
            index = int(answer) - 1
            return ports[index] if 0 <= index < len(ports) else None
        for port in ports:
            if port.path == answer:
                return port
        return DeviceHandle(path=answer)
