"""Command line argument parsing."""

import argparse

from serialconsole import __version__
from serialconsole.domain import BAUD_RATES


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments namespace with:
        - port: Serial port path or pyserial URL (optional)
        - baud: Baud rate (optional, overrides config)
        - config: Config file path (optional)
        - list_ports: Whether to list ports and exit
        - serve: Whether to run the HTTP server instead of the terminal console
        - host/http_port: HTTP bind address overrides
        - verbose: Whether to show detailed logs
    """
    parser = argparse.ArgumentParser(
        prog="serialconsole",
        description="Serial Console - monitor and talk to serial devices",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "port",
        nargs="?",
        default=None,
        help="Serial port or pyserial URL (default: ask, or config serial.port)",
    )
    parser.add_argument(
        "-b",
        "--baud",
        type=int,
        choices=BAUD_RATES,
        metavar="RATE",
        default=None,
        help="Baud rate (default: config serial.baud_rate, 115200)",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to config file (default: $SERIALCONSOLE_CONFIG_PATH or config.yaml)",
    )
    parser.add_argument(
        "-l",
        "--list-ports",
        action="store_true",
        help="List detected serial ports and exit",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP/WebSocket server instead of the terminal console",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="HTTP bind host (server mode)",
    )
    parser.add_argument(
        "--http-port",
        type=int,
        default=None,
        help="HTTP port (server mode)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show detailed logs",
    )

    return parser.parse_args(argv)
