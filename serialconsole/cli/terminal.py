"""Interactive terminal console."""

import logging

from rich.text import Text

from serialconsole.container import Container

from .display import console, display_banner, display_status, write_output
from .stdin_lines import StdinLines

logger = logging.getLogger(__name__)


class TerminalConsole:
    """Run a session controller against this terminal.

    Device output is written as it arrives. Each input line is sent to the
    device, except lines starting with "/" which are local commands.
    """

    def __init__(self, container: Container, lines: StdinLines) -> None:
        self._container = container
        self._controller = container.controller
        self._lines = lines

    async def run(self) -> int:
        controller = self._controller
        controller.add_output_listener(write_output)
        await self._container.start()
        display_banner()
        try:
            if not controller.device_available:
                console.print("[red]Serial access is not available on this host[/red]")
                return 1
            await controller.connect()
            await self._input_loop()
        finally:
            await self._container.stop()
            controller.remove_output_listener(write_output)
        return 0

    async def _input_loop(self) -> None:
        while True:
            line = await self._lines.readline()
            if line is None:
                return
            if line.startswith("/"):
                if not await self.handle_command(line[1:].strip().lower()):
                    return
                continue

            self._controller.current_input = line
            if not await self._controller.send():
                if not self._controller.connected:
                    console.print("[dim]Not connected, use /connect[/dim]")

    async def handle_command(self, command: str) -> bool:
        """Run a local command.

        Returns:
            False when the console should exit.
        """
        controller = self._controller
        if command in ("quit", "exit", "q"):
            return False
        if command == "connect":
            await controller.connect()
        elif command == "disconnect":
            await controller.disconnect()
        elif command == "clear":
            controller.clear()
            console.clear()
        elif command == "history":
            for index, entry in enumerate(controller.history, start=1):
                console.print(Text.assemble((f"{index:>3}", "dim"), " ", entry), highlight=False)
        elif command == "status":
            display_status(controller.snapshot())
        else:
            console.print(f"[yellow]Unknown command: /{command}[/yellow]")
        return True
