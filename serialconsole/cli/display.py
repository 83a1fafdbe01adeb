"""Display utilities for the terminal console."""

import sys

from rich.console import Console
from rich.table import Table

from serialconsole import __version__
from serialconsole.domain import ControllerSnapshot, DeviceHandle, DeviceInfo

# Force UTF-8 for Windows console
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")

console = Console()

HELP_TEXT = (
    "Type a line and press Enter to send it. Local commands: "
    "/connect /disconnect /clear /history /status /quit"
)


def display_banner() -> None:
    """Print the startup banner."""
    console.print(f"[bold cyan]Serial Console[/bold cyan] [dim]v{__version__}[/dim]")
    console.print(f"[dim]{HELP_TEXT}[/dim]")
    console.print()


def ports_table(ports: list[DeviceHandle]) -> Table:
    """Build a table of detected ports."""
    table = Table(title="Serial ports", title_justify="left")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Port", style="cyan")
    table.add_column("VID:PID")
    table.add_column("Description")
    for index, port in enumerate(ports, start=1):
        ids = ""
        if port.vendor_id is not None:
            ids = f"{DeviceInfo.format_id(port.vendor_id)}:{DeviceInfo.format_id(port.product_id)}"
        table.add_row(str(index), port.path, ids, port.description)
    return table


def display_ports(ports: list[DeviceHandle]) -> None:
    if not ports:
        console.print("[yellow]No serial ports found[/yellow]")
        return
    console.print(ports_table(ports))


def display_status(snapshot: ControllerSnapshot) -> None:
    """Print a one-line connection status."""
    if snapshot.connected:
        ids = ""
        if snapshot.vendor_id is not None:
            ids = (
                f" [dim]({DeviceInfo.format_id(snapshot.vendor_id)}:"
                f"{DeviceInfo.format_id(snapshot.product_id)})[/dim]"
            )
        console.print(
            f"[green]● connected[/green] {snapshot.device_path} @ {snapshot.baud_rate}{ids}"
        )
    else:
        console.print(f"[dim]○ {snapshot.state.value}[/dim]")


def write_output(chunk: str) -> None:
    """Write device output verbatim."""
    console.out(chunk, end="", highlight=False)
